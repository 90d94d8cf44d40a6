"""
🛠️ Route Helpers
Envelope construction and service lookup shared by the blueprints.

Every response body has the shape::

    {"success": bool, "timestamp": "...Z", "request_id": "...",
     "message": "...", "data": {...}, "error_code": "..."}

``message``, ``data`` and ``error_code`` are omitted when empty.
"""

import datetime
import logging
import uuid
from functools import wraps
from typing import Any, Callable, Dict, Optional

from flask import Response, current_app, jsonify

logger = logging.getLogger(__name__)

EXTENSION_KEY = "cuetimer"


def _utc_timestamp() -> str:
    now_utc = datetime.datetime.now(tz=datetime.timezone.utc)
    return now_utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def get_service_manager():
    """ServiceManager stored on the running app by ``create_app``."""
    return current_app.extensions[EXTENSION_KEY]


def get_service(name: str) -> Optional[Any]:
    return get_service_manager().get_service(name)


def api_response(
    success: bool,
    *,
    data: Optional[Any] = None,
    message: str = "",
    status: int = 200,
    error_code: Optional[str] = None
) -> Response:
    """Build a JSON envelope response tagged with a fresh request id."""
    request_id = uuid.uuid4().hex
    timestamp = _utc_timestamp()
    body: Dict[str, Any] = {"success": success, "timestamp": timestamp, "request_id": request_id}
    for key, value in (("message", message), ("data", data), ("error_code", error_code)):
        if value is None or value == "":
            continue
        body[key] = value

    resp = jsonify(body)
    resp.status_code = status
    resp.headers["X-Request-ID"] = request_id
    return resp


def api_error(
    message: str,
    *,
    status: int = 400,
    error_code: Optional[str] = None,
    data: Optional[Any] = None,
) -> Response:
    return api_response(False, data=data, message=message, status=status, error_code=error_code)


def service_response(result, *, error_status: int = 400) -> Response:
    """Translate a ServiceResult into an envelope.

    Expected failures (bad trigger file, clock violation) map to
    ``error_status``; unhandled exceptions inside a service map to 500.
    """
    if result.success:
        return api_response(True, data=result.data, message=result.message or "")
    return api_error(
        result.message or "Request failed",
        status=500 if result.unexpected else error_status,
        error_code=(result.error_code or "error").lower(),
        data=result.data,
    )


def api_error_handler(func: Callable) -> Callable:
    """Turn exceptions escaping a view into a 500 envelope."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except Exception:
            logger.exception(f"Unhandled error in {func.__name__}")
            return api_error("An internal error occurred", status=500, error_code="unhandled_exception")
    return wrapper
