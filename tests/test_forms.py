"""
Unit tests for form flattening (no server required).
Run: pytest tests/test_forms.py -v
"""

from dataclasses import dataclass, field

import pytest
from pydantic import BaseModel, Field

from httpkit.errors import FormEncodeError, PayloadEncodeError
from httpkit.forms import encode_form, multipart_fields, urlencode_fields


class Signup(BaseModel):
    user_name: str = Field(..., alias="userName")
    age: int
    newsletter: bool = False
    referrer: str | None = None


@dataclass
class Address:
    city: str
    zip_codes: list[str] = field(default_factory=list)


class Ordered:
    def to_form_fields(self):
        return [("b", 2), ("a", "one"), ("a", None), ("c", False)]


class TestScalars:
    def test_flat_mapping(self):
        fields = encode_form({"name": "Ada", "age": 36, "admin": True, "ratio": 1.5})
        assert fields == [("name", "Ada"), ("age", "36"), ("admin", "true"), ("ratio", "1.500000")]

    def test_none_is_omitted(self):
        assert encode_form({"a": None, "b": "x"}) == [("b", "x")]

    def test_false_is_kept(self):
        assert encode_form({"flag": False}) == [("flag", "false")]

    def test_sequence_repeats_key(self):
        assert encode_form({"tag": ["x", "y", None, 3]}) == [("tag", "x"), ("tag", "y"), ("tag", "3")]

    def test_empty_sequence_yields_nothing(self):
        assert encode_form({"tag": []}) == []

    def test_nested_mapping_uses_dotted_keys(self):
        fields = encode_form({"user": {"name": "Ada", "address": {"city": "London"}}})
        assert fields == [("user.name", "Ada"), ("user.address.city", "London")]


class TestPayloadKinds:
    def test_pydantic_model_uses_alias(self):
        fields = encode_form(Signup(userName="ada", age=36))
        assert fields == [("userName", "ada"), ("age", "36"), ("newsletter", "false")]

    def test_dataclass(self):
        fields = encode_form(Address(city="Paris", zip_codes=["75001", "75002"]))
        assert fields == [("city", "Paris"), ("zip_codes", "75001"), ("zip_codes", "75002")]

    def test_form_encodable_keeps_order(self):
        assert encode_form(Ordered()) == [("b", "2"), ("a", "one"), ("c", "false")]


class TestErrors:
    def test_list_of_mappings(self):
        with pytest.raises(FormEncodeError):
            encode_form({"items": [{"id": 1}]})

    def test_nested_list(self):
        with pytest.raises(FormEncodeError):
            encode_form({"grid": [[1, 2]]})

    def test_top_level_sequence(self):
        with pytest.raises(FormEncodeError):
            encode_form(["a", "b"])

    def test_top_level_scalar(self):
        with pytest.raises(FormEncodeError):
            encode_form("a=b")

    def test_unsupported_value(self):
        with pytest.raises(FormEncodeError):
            encode_form({"raw": b"bytes"})

    def test_empty_key(self):
        with pytest.raises(FormEncodeError, match="non-empty"):
            encode_form({"": "x"})
        with pytest.raises(FormEncodeError, match="non-empty"):
            encode_form({"": ["x"]})
        with pytest.raises(FormEncodeError, match="non-empty"):
            encode_form({"user": {"": 1}})

    def test_non_string_key(self):
        with pytest.raises(FormEncodeError):
            encode_form({1: "x"})

    def test_is_payload_encode_error(self):
        assert issubclass(FormEncodeError, PayloadEncodeError)
        assert issubclass(FormEncodeError, ValueError)


class TestBodies:
    def test_urlencoded(self):
        assert urlencode_fields([("a", "1"), ("a", "2"), ("b", "x y&z")]) == b"a=1&a=2&b=x+y%26z"

    def test_multipart(self):
        body, content_type = multipart_fields([("a", "1"), ("b", "two")], boundary="testboundary")
        assert content_type == "multipart/form-data; boundary=testboundary"
        assert body.startswith(b"--testboundary\r\n")
        assert body.endswith(b"--testboundary--\r\n")
        assert b'name="a"' in body and b"\r\n\r\n1\r\n" in body
        assert b'name="b"' in body and b"\r\n\r\ntwo\r\n" in body
        assert b"filename" not in body
