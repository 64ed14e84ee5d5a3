"""全局测试配置：共享网关配置和订单夹具。"""

import pytest

from xunhupay.models.schemas import GatewayConfig, Order, PaymentType

TEST_SECRET = "s3cret"


@pytest.fixture
def config():
    return GatewayConfig(
        appid="1000",
        appsecret=TEST_SECRET,
        api_url="https://api.example/do",
        payment_type=PaymentType.ALIPAY,
    )


@pytest.fixture
def wechat_config():
    return GatewayConfig(
        appid="1000",
        appsecret=TEST_SECRET,
        api_url="https://api.example/do",
        payment_type=PaymentType.WECHAT,
        wap_name="测试商城",
        wap_url="https://shop.example.com",
    )


@pytest.fixture
def order():
    return Order(
        trade_no="T100",
        total_amount=9999,
        notify_url="https://cb/n",
        return_url="https://cb/r",
    )
