from typing import Any


def success_response(data: Any = None, message: str | None = None) -> dict:
    return {"status": "success", "data": data, "message": message}


def error_response(message: str, error_code: str = "ERROR", data: Any = None) -> dict:
    return {"status": "error", "data": data, "message": message, "errorCode": error_code}
