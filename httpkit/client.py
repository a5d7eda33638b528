"""
Outbound request helpers built on urllib.request.

Each helper performs one blocking round trip, reads the whole body into memory
and returns it. HTTP error statuses still return their body; only transport
failures raise (TransportError / RequestTimeout).
"""

import http.client
import json
import logging
import urllib.error
import urllib.request
from typing import Any, Mapping, Optional

from fastapi.encoders import jsonable_encoder

from httpkit.config import LENIENT_JSON, REQUEST_TIMEOUT, USER_AGENT
from httpkit.errors import FormEncodeError, PayloadEncodeError, RequestTimeout, TransportError
from httpkit.forms import FORM_CONTENT_TYPE, encode_form, multipart_fields, urlencode_fields
from httpkit.models import HttpResponse

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


def _encode_json(payload: Any) -> bytes:
    try:
        return json.dumps(jsonable_encoder(payload), separators=(",", ":"), allow_nan=False).encode("utf-8")
    except (TypeError, ValueError, RecursionError) as e:
        if not LENIENT_JSON:
            raise PayloadEncodeError(f"request payload is not JSON serializable: {e}") from e
        logger.warning("Sending empty body, payload is not JSON serializable: %s", e)
        return b""


def _round_trip(
    method: str,
    url: str,
    data: Optional[bytes] = None,
    headers: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
) -> tuple[HttpResponse, bytes]:
    """Send one request and return (status/headers, full body)."""
    try:
        req = urllib.request.Request(url, data=data, method=method)
    except ValueError as e:
        raise TransportError(url, f"invalid request URL: {e}") from e
    req.add_header("User-Agent", USER_AGENT)
    for key, value in (headers or {}).items():
        req.add_header(key, value)

    if timeout is None:
        timeout = REQUEST_TIMEOUT
    kwargs = {} if timeout is None else {"timeout": timeout}

    logger.debug("%s %s (%d byte body)", req.get_method(), url, len(data or b""))
    try:
        with urllib.request.urlopen(req, **kwargs) as resp:
            body = resp.read()
            meta = HttpResponse(
                status_code=resp.status,
                reason=resp.reason or "",
                headers=dict(resp.headers.items()),
                url=resp.geturl(),
            )
    except urllib.error.HTTPError as e:
        # 4xx/5xx: the status is part of the answer, not a failure
        try:
            body = e.read()
        except TimeoutError as read_err:
            logger.warning("%s %s: timed out reading error body", method, url)
            raise RequestTimeout(url, f"timed out after {timeout}s") from read_err
        except (OSError, http.client.HTTPException) as read_err:
            logger.warning("%s %s: failed reading error body: %s", method, url, read_err)
            raise TransportError(url, f"failed reading response body: {read_err}") from read_err
        finally:
            e.close()
        meta = HttpResponse(
            status_code=e.code,
            reason=str(e.reason or ""),
            headers=dict(e.headers.items()) if e.headers else {},
            url=e.geturl() or url,
        )
    except urllib.error.URLError as e:
        logger.warning("%s %s failed: %s", method, url, e.reason)
        if isinstance(e.reason, TimeoutError):
            raise RequestTimeout(url, f"timed out after {timeout}s") from e
        raise TransportError(url, f"connection failed: {e.reason}") from e
    except TimeoutError as e:
        logger.warning("%s %s timed out: %s", method, url, e)
        raise RequestTimeout(url, f"timed out after {timeout}s") from e
    except (OSError, http.client.HTTPException) as e:
        logger.warning("%s %s failed mid-read: %s", method, url, e)
        raise TransportError(url, f"failed reading response: {e}") from e

    logger.debug("%s %s -> %d (%d bytes)", method, url, meta.status_code, len(body))
    return meta, body


def get(endpoint: str, *, timeout: Optional[float] = None) -> bytes:
    """GET ``endpoint`` and return the response body."""
    _, body = _round_trip("GET", endpoint, timeout=timeout)
    return body


def post_json(endpoint: str, payload: Any, *, timeout: Optional[float] = None) -> bytes:
    """POST ``payload`` as JSON and return the response body."""
    _, body = _round_trip(
        "POST",
        endpoint,
        data=_encode_json(payload),
        headers={"Content-Type": JSON_CONTENT_TYPE},
        timeout=timeout,
    )
    return body


def send_request(
    method: str,
    url: str,
    headers: Optional[Mapping[str, str]] = None,
    payload: Any = None,
    *,
    timeout: Optional[float] = None,
) -> tuple[HttpResponse, bytes]:
    """
    Send ``payload`` as a JSON body with an arbitrary method and headers.

    A ``None`` payload sends no body. Caller headers are applied after the
    default Content-Type and replace it (each header is set exactly once).
    The connection is closed before returning; use the returned bytes.
    """
    data = None
    merged: dict[str, str] = {}
    if payload is not None:
        data = _encode_json(payload)
        merged["Content-Type"] = JSON_CONTENT_TYPE
    merged.update(headers or {})
    return _round_trip(method, url, data=data, headers=merged, timeout=timeout)


def _flatten_or_log(endpoint: str, payload: Any):
    try:
        return encode_form(payload)
    except FormEncodeError as e:
        logger.warning("Form request to %s not sent: %s", endpoint, e)
        raise


def post_form(endpoint: str, payload: Any, *, timeout: Optional[float] = None) -> bytes:
    """POST ``payload`` flattened into an application/x-www-form-urlencoded body."""
    fields = _flatten_or_log(endpoint, payload)
    _, body = _round_trip(
        "POST",
        endpoint,
        data=urlencode_fields(fields),
        headers={"Content-Type": FORM_CONTENT_TYPE},
        timeout=timeout,
    )
    return body


def post_multipart(endpoint: str, payload: Any, *, timeout: Optional[float] = None) -> bytes:
    """POST ``payload`` flattened into multipart/form-data text fields."""
    fields = _flatten_or_log(endpoint, payload)
    data, content_type = multipart_fields(fields)
    _, body = _round_trip(
        "POST",
        endpoint,
        data=data,
        headers={"Content-Type": content_type},
        timeout=timeout,
    )
    return body
