"""
Response helpers: render JSON bodies (enveloped or raw) as FastAPI responses.
Status code and body code always agree; content type is application/json.
"""

import logging
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, Response

from httpkit.config import LENIENT_JSON
from httpkit.errors import PayloadEncodeError
from httpkit.models import ResponseEnvelope

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


def _render(code: int, content: Any) -> Response:
    try:
        return JSONResponse(content=jsonable_encoder(content), status_code=code)
    except (TypeError, ValueError, RecursionError) as e:
        if not LENIENT_JSON:
            raise PayloadEncodeError(f"response payload is not JSON serializable: {e}") from e
        logger.warning("Dropping unserializable response body (status %d): %s", code, e)
        return Response(status_code=code, media_type=JSON_MEDIA_TYPE)


def respond_with_envelope(code: int, message: str, payload: Any = None, count: int = 0) -> Response:
    """Envelope with ``count`` always present and ``success`` omitted."""
    envelope = ResponseEnvelope(code=code, message=message, data=payload, count=count)
    return _render(code, envelope.to_wire())


def respond_with_envelope_struct(envelope: ResponseEnvelope) -> Response:
    """Render a caller-built envelope; unset ``success``/``count`` are left out."""
    return _render(envelope.code, envelope.to_wire())


def respond_raw(code: int, payload: Any) -> Response:
    """Serialize ``payload`` directly, without the envelope."""
    return _render(code, payload)
