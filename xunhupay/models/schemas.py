"""
数据模型 / 类型定义，供各模块引用。
使用 dataclass 保持轻量，不引入 ORM。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
from urllib.parse import urlparse

from xunhupay.services.errors import ConfigError, XunhuPayError

DEFAULT_API_URL = "https://api.xunhupay.com/payment/do.html"

# H5 支付网站名称长度上限
WAP_NAME_MAX_LENGTH = 32


class PaymentType(str, Enum):
    """支付通道类型。"""

    WECHAT = "wechat"
    ALIPAY = "alipay"


@dataclass(frozen=True)
class GatewayConfig:
    """虎皮椒网关配置，每个适配器实例加载一次，之后只读。"""

    appid: str
    appsecret: str = field(repr=False)
    payment_type: PaymentType = PaymentType.ALIPAY
    api_url: str = DEFAULT_API_URL
    wap_name: Optional[str] = None
    wap_url: Optional[str] = None

    def __post_init__(self):
        if not self.appid:
            raise ConfigError("缺少配置项: appid")
        if not self.appsecret:
            raise ConfigError("缺少配置项: appsecret")
        if not self.api_url:
            raise ConfigError("缺少配置项: api_url")
        try:
            scheme = urlparse(self.api_url).scheme
        except ValueError:
            raise ConfigError(f"api_url 格式错误: {self.api_url}")
        if scheme not in ("http", "https"):
            raise ConfigError(f"api_url 不是合法的 HTTP 地址: {self.api_url}")

        try:
            payment_type = PaymentType(self.payment_type)
        except ValueError:
            raise ConfigError(f"不支持的支付类型: {self.payment_type}")
        # frozen dataclass 需通过 object.__setattr__ 规范化字段
        object.__setattr__(self, "payment_type", payment_type)

        if payment_type is PaymentType.WECHAT:
            if not self.wap_name or not self.wap_url:
                raise ConfigError("微信 H5 支付必须配置 wap_name 和 wap_url")
            if len(self.wap_name) > WAP_NAME_MAX_LENGTH:
                raise ConfigError(
                    f"wap_name 长度不能超过 {WAP_NAME_MAX_LENGTH} 个字符"
                )


@dataclass(frozen=True)
class Order:
    trade_no: str
    total_amount: int  # 单位：分
    notify_url: str
    return_url: str
    user_id: Optional[str | int] = None


@dataclass
class PayResult:
    """发起支付的结果：成功时携带跳转链接，失败时携带类型化异常。"""

    redirect_url: Optional[str] = None
    error: Optional[XunhuPayError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.redirect_url is not None

    def unwrap(self) -> str:
        """返回跳转链接，失败时抛出携带的异常。"""
        if self.error is not None:
            raise self.error
        return self.redirect_url


@dataclass
class NotificationResult:
    trade_no: str
    callback_no: str = ""
    ack: str = "success"
    total_fee: str = ""
    attach: str = ""
