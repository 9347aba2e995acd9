# storeit/utils/response.py
from typing import Any, Optional, Dict

from ..errors import StoreItError


def success(data: Optional[Any] = None, message: str = "OK", code: int = 200) -> Dict:
    return {
        "code": code,
        "success": True,
        "message": message,
        "data": {} if data is None else data
    }


def error(message: str = "Error", code: int = 400, err: Optional[Any] = None) -> Dict:
    return {
        "code": code,
        "success": False,
        "message": message,
        "error": err or {}
    }


def error_from(exc: StoreItError) -> Dict:
    return error(exc.message, exc.status_code, {"code": exc.code})
