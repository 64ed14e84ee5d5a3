"""
虎皮椒支付路由：

- POST /xunhupay/pay: 发起支付，返回跳转链接
- POST /xunhupay/notify: 接收虎皮椒异步通知，校验通过返回 success
- GET /xunhupay/config/form: 后台配置表单描述
"""

import inspect
import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.concurrency import run_in_threadpool

from xunhupay.models.schemas import GatewayConfig, Order
from xunhupay.services.gateway_client import GatewayClient
from xunhupay.services.gateway_config import (
    config_form,
    load_app_name,
    load_gateway_config,
    load_timeout,
)
from xunhupay.services.notification import ACK, NotificationValidator
from xunhupay.services.request_builder import RequestBuilder

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/xunhupay", tags=["xunhupay"])

# 必填参数列表
REQUIRED_PARAMS = ["trade_no", "total_amount", "notify_url", "return_url"]

# 非 success 的响应体，虎皮椒会继续重试通知
NACK = "fail"


@lru_cache
def get_gateway_config() -> GatewayConfig:
    return load_gateway_config()


@lru_cache
def get_app_name() -> str:
    return load_app_name()


@lru_cache
def get_timeout() -> float:
    return load_timeout()


def get_gateway_client(
    config: GatewayConfig = Depends(get_gateway_config),
    app_name: str = Depends(get_app_name),
    timeout: float = Depends(get_timeout),
) -> GatewayClient:
    builder = RequestBuilder(app_name=app_name)
    return GatewayClient(config, builder=builder, timeout=timeout)


def get_notification_validator(
    config: GatewayConfig = Depends(get_gateway_config),
) -> NotificationValidator:
    return NotificationValidator(config)


@router.post("/pay")
async def create_payment(
    request: Request,
    client: GatewayClient = Depends(get_gateway_client),
):
    """
    发起支付接口。

    流程：校验必填参数 → 构建订单 → 调用网关 → 返回跳转链接
    """
    form_data = await request.form()
    params = {k: v for k, v in form_data.items() if isinstance(v, str)}

    missing = [k for k in REQUIRED_PARAMS if not params.get(k)]
    if missing:
        return JSONResponse(content={
            "code": -1,
            "msg": f"缺少必填参数: {', '.join(missing)}",
        })

    try:
        total_amount = int(params["total_amount"])
    except ValueError:
        return JSONResponse(content={"code": -1, "msg": "订单金额无效"})

    order = Order(
        trade_no=params["trade_no"],
        total_amount=total_amount,
        notify_url=params["notify_url"],
        return_url=params["return_url"],
        user_id=params.get("user_id") or None,
    )

    # 网关请求为阻塞调用，放入线程池执行
    result = await run_in_threadpool(client.pay, order)
    if not result.ok:
        return JSONResponse(content={"code": -1, "msg": result.error.user_message})

    # type 1 表示跳转 URL
    return JSONResponse(content={"code": 1, "type": 1, "data": result.redirect_url})


@router.post("/notify")
async def payment_notify(
    request: Request,
    validator: NotificationValidator = Depends(get_notification_validator),
):
    """
    虎皮椒异步通知接口。

    校验通过且调用方处理成功时返回纯文本 success，否则返回 fail 让虎皮椒重试。
    调用方可通过 app.state.on_paid 注册支付成功处理函数。
    """
    form_data = await request.form()
    result = validator.validate(form_data)
    if result is None:
        return PlainTextResponse(NACK)

    on_paid = getattr(request.app.state, "on_paid", None)
    if on_paid is not None:
        try:
            # 协程处理函数直接 await，普通函数放入线程池执行
            if inspect.iscoroutinefunction(on_paid):
                await on_paid(result)
            else:
                outcome = await run_in_threadpool(on_paid, result)
                if inspect.isawaitable(outcome):
                    await outcome
        except Exception:
            logger.exception(
                "支付成功回调处理异常，等待虎皮椒重试: trade_no=%s", result.trade_no
            )
            return PlainTextResponse(NACK)

    return PlainTextResponse(ACK)


@router.get("/config/form")
async def get_config_form():
    """返回网关配置表单描述。"""
    return {"code": 0, "data": config_form()}
