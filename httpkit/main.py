"""Demo service for the response helpers; also the target for live request-helper tests."""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response

from httpkit.config import LOG_LEVEL, VERSION
from httpkit.forms import FORM_CONTENT_TYPE
from httpkit.models import ResponseEnvelope
from httpkit.responses import respond_raw, respond_with_envelope

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="httpkit demo",
    description="Envelope and raw JSON responses; echo target for outbound helpers.",
    version=VERSION,
)


@app.get("/health")
def health() -> Response:
    return respond_raw(200, {"status": "ok"})


@app.get("/ping", response_class=PlainTextResponse)
def ping() -> str:
    return "pong"


@app.api_route("/echo", methods=["GET", "POST", "PUT", "PATCH", "DELETE"])
async def echo(request: Request) -> Response:
    """
    Reflect the request back inside an envelope.
    Form bodies (URL-encoded or multipart) are parsed into ordered [key, value] pairs; count = number of pairs.
    """
    content_type = request.headers.get("content-type", "")
    form: list[list[str]] = []
    body = ""
    if content_type.startswith(FORM_CONTENT_TYPE) or content_type.startswith("multipart/form-data"):
        parsed = await request.form()
        form = [[key, value] for key, value in parsed.multi_items() if isinstance(value, str)]
    else:
        body = (await request.body()).decode("utf-8", errors="replace")
    logger.debug("echo %s %s (%d form fields)", request.method, request.url.path, len(form))
    data = {
        "method": request.method,
        "path": request.url.path,
        "headers": [[key, value] for key, value in request.headers.items()],
        "content_type": content_type,
        "body": body,
        "form": form,
    }
    return respond_with_envelope(200, "ok", data, len(form))


@app.get("/status/{code}")
def status(code: int) -> Response:
    """Envelope with ``success`` set and no ``count``; 404 for unknown codes, 400 for bodyless ones."""
    try:
        phrase = HTTPStatus(code).phrase
    except ValueError:
        return respond_with_envelope(404, f"unknown status code {code}")
    if code < 200 or code in (204, 304):
        # bodyless statuses cannot carry an envelope
        return respond_with_envelope(400, f"status {code} has no body")
    return ResponseEnvelope(success=code < 400, code=code, message=phrase).respond()
