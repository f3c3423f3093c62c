from typing import Any, Optional

from fastapi.responses import JSONResponse


def success(data: Any = None, message: Optional[str] = None) -> dict:
    body = {"success": True}
    if data is not None:
        body["data"] = data
    if message:
        body["message"] = message
    return body


def error_response(status_code: int, code: str, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": {"code": code, "message": message}},
        headers=headers,
    )
