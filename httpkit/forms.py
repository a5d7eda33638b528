"""
Form flattening: turn a structured payload into ordered (key, string value) pairs
for URL-encoded or multipart bodies.

Payloads either implement ``to_form_fields()`` or are pydantic models, dataclasses
or mappings. Nested mappings become dotted keys; sequences of scalars repeat the key.
"""

import dataclasses
from collections.abc import Iterable, Mapping
from typing import Any, Optional, Protocol, runtime_checkable
from urllib.parse import urlencode

from pydantic import BaseModel
from urllib3 import encode_multipart_formdata

from httpkit.errors import FormEncodeError

FormFields = list[tuple[str, str]]

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


@runtime_checkable
class FormEncodable(Protocol):
    """Payload that knows its own form representation."""

    def to_form_fields(self) -> Iterable[tuple[str, Any]]:
        ...


def _scalar(key: str, value: Any) -> str:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return f"{value:.6f}"
    if isinstance(value, str):
        return value
    raise FormEncodeError(f"cannot encode field {key!r} of type {type(value).__name__}")


def _flatten(key: str, value: Any, out: FormFields) -> None:
    if value is None:
        return
    if isinstance(value, Mapping):
        for sub_key, sub_value in value.items():
            if not isinstance(sub_key, str) or not sub_key:
                raise FormEncodeError(f"form keys must be non-empty strings, got {sub_key!r} under {key!r}")
            _flatten(f"{key}.{sub_key}" if key else sub_key, sub_value, out)
        return
    if isinstance(value, (list, tuple, set, frozenset)):
        for item in value:
            if isinstance(item, (Mapping, list, tuple, set, frozenset)):
                raise FormEncodeError(f"field {key!r} holds a nested collection")
            if item is not None:
                out.append((key, _scalar(key, item)))
        return
    out.append((key, _scalar(key, value)))


def _as_mapping(payload: Any) -> Mapping:
    if isinstance(payload, BaseModel):
        return payload.model_dump(by_alias=True, mode="json")
    if dataclasses.is_dataclass(payload) and not isinstance(payload, type):
        return dataclasses.asdict(payload)
    if isinstance(payload, Mapping):
        return payload
    raise FormEncodeError(f"cannot flatten payload of type {type(payload).__name__}")


def encode_form(payload: Any) -> FormFields:
    """Flatten ``payload`` into ordered form pairs. Raises FormEncodeError."""
    out: FormFields = []
    if isinstance(payload, FormEncodable):
        for key, value in payload.to_form_fields():
            if not isinstance(key, str) or not key:
                raise FormEncodeError(f"form keys must be non-empty strings, got {key!r}")
            if value is not None:
                out.append((key, _scalar(key, value)))
        return out
    _flatten("", _as_mapping(payload), out)
    return out


def urlencode_fields(fields: FormFields) -> bytes:
    return urlencode(fields).encode("ascii")


def multipart_fields(fields: FormFields, boundary: Optional[str] = None) -> tuple[bytes, str]:
    """Return (body, content type) with one text part per pair. No file parts."""
    return encode_multipart_formdata(fields, boundary=boundary)
