"""
网关配置服务：从环境变量加载虎皮椒网关配置，并提供后台配置表单描述。

配置只读，凭证不做任何持久化。
"""

import logging
import os

from dotenv import load_dotenv

from xunhupay.models.schemas import DEFAULT_API_URL, GatewayConfig, PaymentType
from xunhupay.services.errors import ConfigError
from xunhupay.services.gateway_client import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

ENV_PREFIX = "XUNHUPAY_"


def get_config(key: str, default: str | None = None) -> str | None:
    """读取 XUNHUPAY_ 前缀的环境变量，空字符串视为未配置。"""
    value = os.getenv(ENV_PREFIX + key.upper())
    if value is None or value.strip() == "":
        return default
    return value.strip()


def load_gateway_config() -> GatewayConfig:
    """
    从环境变量（及 .env 文件）加载网关配置。

    Raises:
        ConfigError: 必填配置缺失或非法。
    """
    load_dotenv()
    config = GatewayConfig(
        api_url=get_config("api_url", DEFAULT_API_URL),
        appid=get_config("appid", ""),
        appsecret=get_config("appsecret", ""),
        payment_type=get_config("payment_type", PaymentType.ALIPAY.value),
        wap_name=get_config("wap_name"),
        wap_url=get_config("wap_url"),
    )
    logger.info(
        "虎皮椒网关配置已加载: appid=%s, payment_type=%s, api_url=%s",
        config.appid, config.payment_type.value, config.api_url,
    )
    return config


def load_app_name() -> str:
    """读取应用名称，用于拼接订单标题。"""
    load_dotenv()
    return os.getenv("APP_NAME") or "XBoard"


def load_timeout() -> float:
    """读取网关请求超时时间（秒）。"""
    load_dotenv()
    raw = get_config("timeout")
    if raw is None:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ConfigError(f"XUNHUPAY_TIMEOUT 不是合法数字: {raw}")
    if timeout <= 0:
        raise ConfigError(f"XUNHUPAY_TIMEOUT 必须大于 0: {raw}")
    return timeout


def config_form() -> dict:
    """返回后台配置表单描述，供管理界面渲染。"""
    return {
        "api_url": {
            "label": "API接口地址",
            "description": f"虎皮椒支付API地址，默认: {DEFAULT_API_URL}",
            "type": "input",
            "default": DEFAULT_API_URL,
        },
        "appid": {
            "label": "APPID",
            "description": "虎皮椒分配的APPID（不是微信小程序APPID）",
            "type": "input",
        },
        "appsecret": {
            "label": "APPSECRET",
            "description": "虎皮椒分配的密钥",
            "type": "input",
        },
        "payment_type": {
            "label": "支付类型",
            "description": "选择支付通道类型",
            "type": "select",
            "options": {
                PaymentType.WECHAT.value: "微信支付",
                PaymentType.ALIPAY.value: "支付宝支付",
            },
        },
        "wap_name": {
            "label": "网站名称",
            "description": "店铺名称或网站名称，长度32字符以内（H5支付必填）",
            "type": "input",
        },
        "wap_url": {
            "label": "网站域名",
            "description": "您的网站域名，如: https://example.com（H5支付必填）",
            "type": "input",
        },
    }
