"""
虎皮椒支付网关客户端：发起支付请求并校验网关响应。

流程：构建签名参数 → 表单 POST 到 api_url → 解析 JSON →
检查 errcode → 校验响应 hash → 返回跳转链接。
失败以 PayResult.error 返回，不重试，由调用方决定重试策略。
"""

import json
import logging
from datetime import datetime
from random import Random
from typing import Optional

import httpx

from xunhupay.models.schemas import GatewayConfig, Order, PayResult
from xunhupay.services.errors import (
    GatewayError,
    ProtocolError,
    SignatureError,
    TransportError,
    XunhuPayError,
)
from xunhupay.services.request_builder import RequestBuilder
from xunhupay.services.sign import verify_sign

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class GatewayClient:
    """虎皮椒支付网关客户端。"""

    def __init__(
        self,
        config: GatewayConfig,
        builder: Optional[RequestBuilder] = None,
        http_client: Optional[httpx.Client] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Args:
            config: 网关配置。
            builder: 请求构建器，默认使用 RequestBuilder()。
            http_client: 外部注入的 httpx.Client，生命周期由调用方管理；
                为空时每次请求新建客户端。
            timeout: 请求超时时间（秒）。
        """
        self.config = config
        self.builder = builder or RequestBuilder()
        self._http_client = http_client
        self.timeout = timeout

    def _post(self, params: dict) -> httpx.Response:
        """表单 POST 请求参数到网关，网络异常和非 2xx 统一转为 TransportError。"""
        try:
            if self._http_client is not None:
                response = self._http_client.post(
                    self.config.api_url, data=params, timeout=self.timeout
                )
                response.raise_for_status()
                return response

            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.config.api_url, data=params)
                response.raise_for_status()
                return response
        except httpx.TimeoutException as e:
            raise TransportError(f"请求虎皮椒接口超时: {e}")
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"虎皮椒支付接口请求失败: HTTP {e.response.status_code}"
            )
        except httpx.HTTPError as e:
            raise TransportError(f"请求虎皮椒接口失败: {e}")

    @staticmethod
    def _parse(response: httpx.Response) -> dict:
        """解析响应 JSON，必须为对象且包含 errcode。"""
        try:
            data = response.json()
        except (json.JSONDecodeError, ValueError) as e:
            raise ProtocolError(f"解析虎皮椒响应失败: {e}")

        if not isinstance(data, dict) or "errcode" not in data:
            raise ProtocolError("虎皮椒支付接口返回数据格式错误")
        return data

    @staticmethod
    def _check_errcode(data: dict) -> None:
        """只有整数 0 表示成功，字符串 "0" 等其它取值均按网关错误处理。"""
        errcode = data["errcode"]
        if isinstance(errcode, int) and not isinstance(errcode, bool) and errcode == 0:
            return

        errmsg = data.get("errmsg") or "未知错误"
        raise GatewayError(str(errmsg), errcode=errcode)

    def _request(
        self,
        order: Order,
        now: Optional[datetime],
        rng: Optional[Random],
    ) -> str:
        params = self.builder.build(order, self.config, now=now, rng=rng)
        data = self._parse(self._post(params))

        self._check_errcode(data)

        # 验证返回签名
        if not verify_sign(data, self.config.appsecret):
            raise SignatureError("虎皮椒支付返回签名验证失败")

        url = data.get("url")
        if not url or not isinstance(url, str):
            raise ProtocolError("虎皮椒支付响应缺少 url 字段")
        return url

    def pay(
        self,
        order: Order,
        now: Optional[datetime] = None,
        rng: Optional[Random] = None,
    ) -> PayResult:
        """
        发起支付。

        Args:
            order: 待支付订单。
            now: 请求时间，默认当前时间。
            rng: nonce 随机源，默认 secrets.SystemRandom()。

        Returns:
            PayResult: 成功时 redirect_url 为支付跳转链接；
            失败时 error 为 OrderError / TransportError / ProtocolError /
            GatewayError / SignatureError 之一。
        """
        try:
            url = self._request(order, now, rng)
        except XunhuPayError as e:
            logger.error(
                "虎皮椒支付发起失败: trade_no=%s, amount=%s, payment_type=%s, "
                "error=%s, msg=%s",
                order.trade_no, order.total_amount,
                self.config.payment_type.value, e.kind, e,
            )
            return PayResult(error=e)

        logger.info(
            "虎皮椒支付发起成功: trade_no=%s, amount=%s, payment_type=%s",
            order.trade_no, order.total_amount, self.config.payment_type.value,
        )
        return PayResult(redirect_url=url)
