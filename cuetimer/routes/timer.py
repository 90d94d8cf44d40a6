"""
⏱️ Timer Routes Blueprint
Control and status endpoints for the timer and its trigger files.
"""

import logging

from flask import Blueprint, request

from ..utils.logger import log_structured
from .helpers import api_error, api_error_handler, get_service, service_response

timer_bp = Blueprint("timer", __name__)
logger = logging.getLogger(__name__)


@timer_bp.route("/api/timer/status")
@api_error_handler
def timer_status():
    """Current phase and displayed time."""
    return service_response(get_service("timer").get_status())


@timer_bp.route("/api/timer/start", methods=["POST"])
@api_error_handler
def timer_start():
    """Start the countdown, restarting it from any phase."""
    return service_response(get_service("timer").start())


@timer_bp.route("/api/timer/toggle", methods=["POST"])
@api_error_handler
def timer_toggle():
    """Pause a running timer or resume a paused one."""
    return service_response(get_service("timer").toggle())


@timer_bp.route("/api/timer/cancel", methods=["POST"])
@api_error_handler
def timer_cancel():
    return service_response(get_service("timer").cancel())


@timer_bp.route("/api/configs")
@api_error_handler
def list_configs():
    """Selectable trigger files and the currently loaded one."""
    return service_response(get_service("timer").list_trigger_configs())


@timer_bp.route("/api/configs/load", methods=["POST"])
@api_error_handler
def load_config():
    """Load a trigger file by name.

    Accepts ``{"config": "<name>"}`` as JSON or form data.
    """
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = request.form
    raw = payload.get("config")
    config_id = "" if raw is None else str(raw).strip()
    if not config_id:
        return api_error("No trigger file selected", status=400, error_code="missing_config")

    result = get_service("timer").load_trigger_config(config_id)
    if not result.success:
        log_structured(logger, logging.WARNING, "Trigger file rejected",
                       config=config_id, error_code=result.error_code, endpoint="/api/configs/load")
    return service_response(result)
