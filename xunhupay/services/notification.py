"""
支付回调通知校验：验证虎皮椒异步通知并映射为通用结果。

校验失败一律返回 None 并记录原因，不向调用方抛出异常，
避免向潜在的恶意请求方泄露校验细节。
"""

import logging
from collections.abc import Mapping
from typing import Optional

from xunhupay.models.schemas import GatewayConfig, NotificationResult
from xunhupay.services.sign import SIGN_FIELD, verify_sign

logger = logging.getLogger(__name__)

# 虎皮椒要求回调响应体为 success，否则持续重试通知
ACK = "success"

# 订单已支付状态
STATUS_PAID = "OD"


class NotificationValidator:
    """虎皮椒回调通知校验器。"""

    def __init__(self, config: GatewayConfig):
        self.config = config

    def _check(self, params: dict) -> Optional[NotificationResult]:
        trade_order_id = params.get("trade_order_id")

        # 验证必要参数
        if not params.get(SIGN_FIELD) or not trade_order_id:
            logger.warning(
                "虎皮椒支付回调参数不完整: keys=%s", sorted(params.keys())
            )
            return None

        # 验证签名
        if not verify_sign(params, self.config.appsecret):
            logger.warning(
                "虎皮椒支付回调签名验证失败: trade_order_id=%s", trade_order_id
            )
            return None

        # 非已支付状态属于正常的待支付通知，不视为错误
        status = params.get("status")
        if status != STATUS_PAID:
            logger.info(
                "虎皮椒支付回调订单状态非已支付: trade_order_id=%s, status=%s",
                trade_order_id, status or "unknown",
            )
            return None

        callback_no = params.get("transaction_id") or params.get("open_order_id") or ""
        logger.info(
            "虎皮椒支付回调成功: trade_order_id=%s, transaction_id=%s, total_fee=%s",
            trade_order_id, callback_no, params.get("total_fee", ""),
        )
        return NotificationResult(
            trade_no=trade_order_id,
            callback_no=callback_no,
            ack=ACK,
            total_fee=params.get("total_fee", ""),
            attach=params.get("attach", ""),
        )

    def validate(self, raw: Mapping) -> Optional[NotificationResult]:
        """
        校验回调通知。

        依次检查：必要参数 → 签名 → 订单状态为 OD。

        Args:
            raw: 回调表单参数，非字符串值（如上传文件）会被忽略。

        Returns:
            校验通过返回 NotificationResult，否则返回 None 表示忽略该回调。
        """
        try:
            params = {k: v for k, v in raw.items() if isinstance(v, str)}
            return self._check(params)
        except Exception:
            logger.exception("虎皮椒支付回调处理异常")
            return None
