"""
虎皮椒支付适配器异常体系。

pay() 通过 PayResult 返回以下某一种异常实例；通知校验从不抛出异常。
"""

# 展示给终端用户的统一提示，不透出支付网关原始错误信息
USER_MESSAGE = "支付暂时不可用，请稍后重试"


class XunhuPayError(Exception):
    """虎皮椒适配器异常基类。"""

    kind = "error"
    user_message = USER_MESSAGE


class ConfigError(XunhuPayError):
    """网关配置缺失或非法，构造配置时立即抛出。"""

    kind = "config"


class OrderError(XunhuPayError):
    """订单参数非法（如金额不是非负整数分）。"""

    kind = "order"


class TransportError(XunhuPayError):
    """网络异常、超时或 HTTP 非 2xx 响应。"""

    kind = "transport"


class ProtocolError(XunhuPayError):
    """响应体格式错误或缺少必要字段。"""

    kind = "protocol"


class GatewayError(XunhuPayError):
    """支付网关明确返回 errcode != 0。"""

    kind = "gateway"

    def __init__(self, errmsg: str, errcode=None):
        super().__init__(errmsg)
        self.errmsg = errmsg
        self.errcode = errcode


class SignatureError(XunhuPayError):
    """响应签名校验失败。"""

    kind = "signature"
