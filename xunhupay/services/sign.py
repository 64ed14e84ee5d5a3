"""MD5 签名生成与验证模块。"""

import hashlib
import hmac
from collections.abc import Mapping
from urllib.parse import quote_plus

SIGN_FIELD = "hash"


def _to_text(value) -> str:
    """
    将标量参数值转为签名用文本，与 PHP 字符串转换保持一致：
    布尔值渲染为 1/0，整数值的浮点数去掉小数部分（1.0 → 1）。
    """
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e15:
            return str(int(value))
        return repr(value)
    return str(value)


def _flatten(key: str, value):
    """
    展开嵌套参数，与 PHP http_build_query 一致：
    {"a": {"b": "c"}} → a[b]=c，列表按下标展开，嵌套的 None 跳过。
    """
    if isinstance(value, Mapping):
        items = value.items()
    elif isinstance(value, (list, tuple)):
        items = enumerate(value)
    else:
        yield key, _to_text(value)
        return

    for sub_key, sub_value in items:
        if sub_value is None:
            continue
        yield from _flatten(f"{key}[{sub_key}]", sub_value)


def _form_encode(text: str) -> str:
    """按 PHP http_build_query 规则编码：空格转 +，~ 也需编码。"""
    return quote_plus(text, safe="").replace("~", "%7E")


def canonical_query(params: dict) -> str:
    """
    构建规范化签名字符串（不含密钥）。

    1. 过滤 hash 参数
    2. 过滤空值（None 和空字符串）
    3. 按参数名 UTF-8 字节序从小到大排序（仅排序顶层参数）
    4. 拼接 URL 键值对（键和值均做表单编码，嵌套参数展开为 a[b]=c）
    """
    # 过滤空值和 hash
    filtered = {
        str(k): v
        for k, v in params.items()
        if k != SIGN_FIELD and v is not None and v != ""
    }

    # 显式按字节序排序，不依赖区域设置
    sorted_keys = sorted(filtered, key=lambda k: k.encode("utf-8"))

    return "&".join(
        f"{_form_encode(k)}={_form_encode(v)}"
        for key in sorted_keys
        for k, v in _flatten(key, filtered[key])
    )


def generate_sign(params: dict, secret: str) -> str:
    """
    生成 MD5 签名：规范化字符串直接拼接密钥后 MD5。

    返回小写 32 位十六进制签名字符串。
    """
    sign_str = canonical_query(params) + secret
    return hashlib.md5(sign_str.encode("utf-8")).hexdigest()


def verify_sign(params: dict, secret: str) -> bool:
    """验证带 hash 字段的参数签名是否正确，使用常量时间比较。"""
    sign = params.get(SIGN_FIELD)
    if not sign or not isinstance(sign, str):
        return False

    expected = generate_sign(params, secret)
    return hmac.compare_digest(expected.encode("utf-8"), sign.encode("utf-8"))
