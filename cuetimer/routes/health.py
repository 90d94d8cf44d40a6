"""
🩺 Health & Version Routes Blueprint
"""

import logging

from flask import Blueprint

from ..version import get_version_dict
from .helpers import api_error_handler, api_response, get_service, get_service_manager

health_bp = Blueprint("health", __name__)
logger = logging.getLogger(__name__)


@health_bp.route("/api/health")
@api_error_handler
def health():
    """📊 Health of all services plus process information."""
    result = get_service_manager().health_check_all()
    if not result.success:
        return api_response(False, message=result.message or "Health check failed",
                            status=500, error_code=result.error_code or "health_error")

    system_info = get_service("system").get_system_info()
    return api_response(True, data={
        "health": result.data,
        "system": system_info.data if system_info.success else None,
    })


@health_bp.route("/api/version")
def version():
    return api_response(True, data=get_version_dict())
