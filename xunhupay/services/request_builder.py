"""
支付请求参数构建：将订单和网关配置映射为带签名的请求参数。
"""

import secrets
import string
from datetime import datetime
from decimal import Decimal
from random import Random
from typing import Optional

from xunhupay.models.schemas import GatewayConfig, Order, PaymentType
from xunhupay.services.errors import OrderError
from xunhupay.services.sign import SIGN_FIELD, generate_sign

API_VERSION = "1.1"
TITLE_SUFFIX = " - 订阅服务"
NONCE_ALPHABET = string.ascii_letters + string.digits
NONCE_LENGTH = 16


def format_total_fee(total_amount: int) -> str:
    """
    将分转换为元，固定两位小数。

    使用 Decimal 计算，避免浮点误差丢失一分钱：
    10000 → "100.00"，12345 → "123.45"，5 → "0.05"。
    """
    if isinstance(total_amount, bool) or not isinstance(total_amount, int):
        raise OrderError(f"订单金额必须为整数分: {total_amount!r}")
    if total_amount < 0:
        raise OrderError(f"订单金额不能为负数: {total_amount}")

    yuan = (Decimal(total_amount) / 100).quantize(Decimal("0.01"))
    return f"{yuan:.2f}"


def generate_nonce_str(rng: Random, length: int = NONCE_LENGTH) -> str:
    """从字母数字字符集中均匀抽取随机字符串。"""
    return "".join(rng.choice(NONCE_ALPHABET) for _ in range(length))


class RequestBuilder:
    """支付请求构建器。"""

    def __init__(self, app_name: str = "XBoard"):
        """
        Args:
            app_name: 应用名称，拼接到订单标题中。
        """
        self.app_name = app_name

    def build(
        self,
        order: Order,
        config: GatewayConfig,
        now: Optional[datetime] = None,
        rng: Optional[Random] = None,
    ) -> dict:
        """
        构建带 hash 签名的支付请求参数。

        Args:
            order: 待支付订单。
            config: 网关配置。
            now: 请求时间，默认当前时间。
            rng: 随机源，默认 secrets.SystemRandom()。

        Returns:
            dict: 按插入顺序排列的参数，最后一项为 hash。

        Raises:
            OrderError: 订单金额非法。
        """
        if now is None:
            now = datetime.now()
        if rng is None:
            rng = secrets.SystemRandom()

        params = {
            "version": API_VERSION,
            "appid": config.appid,
            "trade_order_id": order.trade_no,
            "total_fee": format_total_fee(order.total_amount),
            "title": self.app_name + TITLE_SUFFIX,
            "time": str(int(now.timestamp())),
            "notify_url": order.notify_url,
            "return_url": order.return_url,
            "nonce_str": generate_nonce_str(rng),
        }

        # 添加备注信息
        if order.user_id is not None and order.user_id != "":
            params["attach"] = f"user_id:{order.user_id}"

        # 微信 H5 支付需附带网站信息
        if config.payment_type is PaymentType.WECHAT:
            params["type"] = "WAP"
            params["wap_url"] = config.wap_url
            params["wap_name"] = config.wap_name

        params[SIGN_FIELD] = generate_sign(params, config.appsecret)
        return params
