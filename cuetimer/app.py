"""
CueTimer Main Application
Flask application factory exposing the timer as a local JSON control API
"""

import atexit
import logging
from typing import Any, Dict, Optional

from flask import Flask

from .config import load_config
from .routes import health_bp, timer_bp
from .routes.errors import register_error_handlers
from .routes.helpers import EXTENSION_KEY
from .services.service_manager import ServiceManager
from .utils.logger import set_log_level, setup_logging

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[Dict[str, Any]] = None,
    *,
    service_manager: Optional[ServiceManager] = None,
) -> Flask:
    """Return a freshly constructed Flask application.

    Args:
        settings: Validated settings; loaded from ``config/`` when omitted
        service_manager: Pre-built services (tests inject fakes here)
    """
    setup_logging()
    if settings is None:
        settings = load_config()
    set_log_level(settings.get("log_level", "INFO"))

    app = Flask(__name__)
    app.json.sort_keys = False

    if service_manager is None:
        service_manager = ServiceManager(settings)
        atexit.register(service_manager.shutdown_all)
    app.extensions[EXTENSION_KEY] = service_manager

    app.register_blueprint(timer_bp)
    app.register_blueprint(health_bp)
    register_error_handlers(app)

    logger.info(
        f"⏱️ CueTimer ready (countdown {settings.get('countdown_seconds')}s, "
        f"trigger dir {settings.get('trigger_config_dir')})"
    )
    return app


__all__ = ["create_app"]
