"""
Storefront - Response Envelope
===============================
Every JSON response has the shape {success, message, data?, error?}.
"""

from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def envelope(success: bool, message: str, data: Any = None, error: Optional[str] = None) -> dict:
    body = {"success": success, "message": message}
    if data is not None:
        body["data"] = data
    if error:
        body["error"] = error
    return body


def send_success(message: str, data: Any = None, status_code: int = 200) -> JSONResponse:
    return JSONResponse(jsonable_encoder(envelope(True, message, data)), status_code=status_code)


def send_error(message: str, status_code: int = 400, error: Optional[str] = None) -> JSONResponse:
    return JSONResponse(envelope(False, message, error=error), status_code=status_code)
