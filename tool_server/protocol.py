"""Wire contracts: request/response envelopes and single-line JSON codec."""

import json
import math
from typing import Any, Dict

from pydantic import BaseModel

INVALID_MESSAGE_FORMAT = "Invalid message format"


class ToolRequest(BaseModel):
    """One decoded request line: `{"tool": ..., "params": ...}`."""

    tool: Any = None
    params: Any = None


class ErrorResponse(BaseModel):
    """Error envelope. Success responses are the tool result itself."""

    error: str


def error_envelope(message: str) -> Dict[str, Any]:
    return ErrorResponse(error=message).model_dump()


def _reject_constant(token: str) -> Any:
    # NaN / Infinity / -Infinity are not JSON
    raise ValueError(f"Invalid JSON token: {token}")


def decode_line(line: bytes) -> Any:
    """
    Parse one framed line. Raises ValueError on invalid UTF-8 or JSON
    (json.JSONDecodeError and UnicodeDecodeError are both ValueErrors).
    """
    return json.loads(line.decode("utf-8"), parse_constant=_reject_constant)


def _finite(payload: Any) -> Any:
    """Replace non-finite floats with None, as JSON.stringify writes null."""
    if isinstance(payload, float) and not math.isfinite(payload):
        return None
    if isinstance(payload, dict):
        return {key: _finite(value) for key, value in payload.items()}
    if isinstance(payload, (list, tuple)):
        return [_finite(value) for value in payload]
    return payload


def encode_message(payload: Any) -> bytes:
    """Serialize a payload as one newline-terminated UTF-8 JSON line."""
    body = json.dumps(_finite(payload), ensure_ascii=False, allow_nan=False)
    return body.encode("utf-8") + b"\n"
