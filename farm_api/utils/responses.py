"""
Response Envelopes

Every handler answers with the same JSON shapes so clients can branch on
the `success` flag without inspecting status codes.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def success_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """
    Build the success envelope.

    `data` and `message` are only included when given. Pydantic models and
    ORM-derived values are encoded here so handlers can return the dict as is.
    """
    body: Dict[str, Any] = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = jsonable_encoder(data)
    body["timestamp"] = utc_timestamp()
    return body


def error_body(error: str, status_code: int = 500) -> Dict[str, Any]:
    return {
        "success": False,
        "error": error,
        "statusCode": status_code,
        "timestamp": utc_timestamp(),
    }


def error_response(
    error: str,
    status_code: int = 500,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    """Domain error envelope as a ready-to-send response."""
    return JSONResponse(
        status_code=status_code,
        content=error_body(error, status_code),
        headers=headers,
    )
