"""
虎皮椒支付适配器应用入口：FastAPI 应用实例、日志配置和路由注册。
"""

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from xunhupay.services.errors import ConfigError

load_dotenv()

# 日志配置
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    force=True,
)

logger = logging.getLogger(__name__)

app = FastAPI(title="XunhuPay", description="虎皮椒支付网关适配器")


@app.exception_handler(ConfigError)
async def config_error_handler(request: Request, exc: ConfigError):
    """网关配置缺失时拒绝服务，不向请求方暴露配置细节。"""
    logger.error("虎皮椒网关配置错误: path=%s, error=%s", request.url.path, exc)
    return JSONResponse(
        status_code=500, content={"code": -1, "msg": exc.user_message}
    )


# ── 路由注册 ──────────────────────────────────────────────

from xunhupay.routes.payment import router as payment_router

app.include_router(payment_router)


# ── 健康检查 ──────────────────────────────────────────────

@app.get("/health")
async def health_check():
    return {"status": "ok"}
