"""Data models for the response envelope and outbound round trips."""

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import BaseModel, Field


class ResponseEnvelope(BaseModel):
    """Uniform JSON wrapper written by the response helpers."""

    success: Optional[bool] = Field(None, description="Omitted from the wire when unset")
    code: int = Field(..., description="HTTP status code, also written as the response status")
    message: str = Field(default="", description="Human readable message, may be empty")
    count: Optional[int] = Field(None, description="Omitted from the wire when unset")
    data: Any = Field(None, description="Arbitrary payload, serialized as-is")

    def to_wire(self) -> dict[str, Any]:
        """Return the envelope as a dict with unset optional fields dropped."""
        out: dict[str, Any] = {}
        if self.success is not None:
            out["success"] = self.success
        out["code"] = self.code
        out["message"] = self.message
        if self.count is not None:
            out["count"] = self.count
        out["data"] = self.data
        return out

    def respond(self):
        """Render this envelope as a JSON response with status ``code``."""
        from httpkit.responses import respond_with_envelope_struct

        return respond_with_envelope_struct(self)


@dataclass(frozen=True)
class HttpResponse:
    """Status line and headers of a completed round trip. The body is returned separately."""

    status_code: int
    reason: str = ""
    headers: dict[str, str] = field(default_factory=dict)
    url: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Case-insensitive header lookup."""
        lowered = name.lower()
        for key, value in self.headers.items():
            if key.lower() == lowered:
                return value
        return default
