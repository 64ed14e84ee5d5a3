"""MD5 签名模块单元测试。"""

import hashlib
import re

from xunhupay.services.sign import canonical_query, generate_sign, verify_sign


class TestCanonicalQuery:
    """canonical_query 单元测试。"""

    def test_sorted_by_key(self):
        params = {"z": "1", "a": "2", "m": "3"}
        assert canonical_query(params) == "a=2&m=3&z=1"

    def test_byte_order_not_locale(self):
        """大写字母排在小写字母之前，数字排在字母之前。"""
        params = {"b": "1", "B": "2", "1": "3", "_": "4"}
        assert canonical_query(params) == "1=3&B=2&_=4&b=1"

    def test_numeric_looking_keys_use_string_order(self):
        params = {"10": "a", "9": "b", "100": "c"}
        assert canonical_query(params) == "10=a&100=c&9=b"

    def test_values_form_encoded(self):
        params = {"url": "https://example.com?foo=bar&baz=1", "title": "a b~c"}
        assert canonical_query(params) == (
            "title=a+b%7Ec&url=https%3A%2F%2Fexample.com%3Ffoo%3Dbar%26baz%3D1"
        )

    def test_non_ascii_values_utf8_encoded(self):
        assert canonical_query({"title": "订阅"}) == "title=%E8%AE%A2%E9%98%85"

    def test_non_string_values_rendered_as_text(self):
        params = {"errcode": 0, "flag": True, "off": False}
        assert canonical_query(params) == "errcode=0&flag=1&off=0"

    def test_float_values_rendered_like_php(self):
        params = {"a": 1.0, "b": 1.5, "c": -2.0}
        assert canonical_query(params) == "a=1&b=1.5&c=-2"

    def test_nested_mapping_expanded_with_brackets(self):
        params = {"a": {"b": "c", "d": {"e": 1}}, "z": "1"}
        assert canonical_query(params) == "a%5Bb%5D=c&a%5Bd%5D%5Be%5D=1&z=1"

    def test_nested_list_expanded_by_index(self):
        params = {"items": ["x", None, "y"]}
        assert canonical_query(params) == "items%5B0%5D=x&items%5B2%5D=y"

    def test_empty_nested_value_emits_nothing(self):
        assert canonical_query({"a": "1", "b": {}, "c": []}) == "a=1"

    def test_nested_response_field_verifies(self):
        """响应中包含浮点数和嵌套对象时，签名按 PHP 规则计算仍可验证通过。"""
        data = {"errcode": 0, "rate": 1.0, "extra": {"b": "c"}, "url": "u"}
        sign_str = "errcode=0&extra%5Bb%5D=c&rate=1&url=u" + "k"
        data["hash"] = hashlib.md5(sign_str.encode("utf-8")).hexdigest()
        assert verify_sign(data, "k") is True


class TestGenerateSign:
    """generate_sign 单元测试。"""

    def test_basic_sign(self):
        sign = generate_sign({"a": "1", "b": "2", "c": "3"}, "mykey")
        # 应为小写 32 位十六进制
        assert re.fullmatch(r"[0-9a-f]{32}", sign)

    def test_known_value(self):
        """已知输入验证签名正确性：规范化字符串直接拼接密钥。"""
        params = {"c": "3", "a": "1", "b": "2"}
        expected = hashlib.md5("a=1&b=2&c=3KEY".encode("utf-8")).hexdigest()
        assert generate_sign(params, "KEY") == expected

    def test_deterministic(self):
        params = {"x": "hello", "y": "world"}
        assert generate_sign(params, "k") == generate_sign(dict(params), "k")

    def test_ascii_sort_order(self):
        """不同顺序输入应产生相同签名。"""
        params_a = {"z": "1", "a": "2", "m": "3"}
        params_b = {"a": "2", "m": "3", "z": "1"}
        assert generate_sign(params_a, "k") == generate_sign(params_b, "k")

    def test_filters_hash(self):
        """hash 参数不参与签名。"""
        base = {"a": "1", "b": "2"}
        with_hash = {"a": "1", "b": "2", "hash": "anything"}
        assert generate_sign(base, "k") == generate_sign(with_hash, "k")

    def test_filters_empty_values(self):
        """空值参数不参与签名。"""
        base = {"a": "1", "b": "2"}
        with_empty = {"a": "1", "b": "2", "c": "", "d": None}
        assert generate_sign(base, "k") == generate_sign(with_empty, "k")

    def test_zero_is_not_empty(self):
        assert generate_sign({"a": "1"}, "k") != generate_sign({"a": "1", "n": 0}, "k")

    def test_single_char_mutation_changes_sign(self):
        base = {"trade_order_id": "T100", "total_fee": "99.99"}
        mutated = {"trade_order_id": "T101", "total_fee": "99.99"}
        assert generate_sign(base, "k") != generate_sign(mutated, "k")


class TestVerifySign:
    """verify_sign 单元测试。"""

    def test_valid_sign(self):
        params = {"appid": "1000", "total_fee": "10.00", "title": "test"}
        params["hash"] = generate_sign(params, "secret")
        assert verify_sign(params, "secret") is True

    def test_missing_hash_fails(self):
        assert verify_sign({"a": "1"}, "secret") is False

    def test_empty_hash_fails(self):
        assert verify_sign({"a": "1", "hash": ""}, "secret") is False

    def test_non_string_hash_fails(self):
        assert verify_sign({"a": "1", "hash": 123}, "secret") is False

    def test_invalid_sign(self):
        assert verify_sign({"a": "1", "hash": "0" * 32}, "secret") is False

    def test_wrong_key_fails(self):
        params = {"a": "1"}
        params["hash"] = generate_sign(params, "correct_key")
        assert verify_sign(params, "wrong_key") is False

    def test_tampered_params_fail(self):
        params = {"a": "1", "b": "2"}
        params["hash"] = generate_sign(params, "k")
        params["b"] = "3"
        assert verify_sign(params, "k") is False

    def test_every_flipped_hash_char_fails(self):
        params = {"trade_order_id": "T100", "status": "OD"}
        sign = generate_sign(params, "k")
        for i, ch in enumerate(sign):
            flipped = "0" if ch != "0" else "1"
            tampered = dict(params, hash=sign[:i] + flipped + sign[i + 1:])
            assert verify_sign(tampered, "k") is False

    def test_non_ascii_hash_fails(self):
        assert verify_sign({"a": "1", "hash": "签名"}, "k") is False
