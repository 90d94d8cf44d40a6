"""
🔧 Service Manager
==================

Builds the services for one Flask app, initializes them in order and shuts
them down in reverse order.  The manager lives on ``app.extensions``.
"""

import logging
from typing import Any, Dict, Optional

from . import ServiceResult
from .system_service import SystemService
from .timer_service import TimerService


class ServiceManager:
    """Owns the timer and system services of an application."""

    def __init__(self, settings: Optional[Dict[str, Any]] = None, *, timer: Optional[TimerService] = None):
        self.logger = logging.getLogger("cuetimer.service_manager")
        self.settings = settings or {}

        self.timer = timer or TimerService(self.settings)
        self.system = SystemService()
        self.services = {"timer": self.timer, "system": self.system}

        for name, service in self.services.items():
            result = service.initialize()
            if not result.success:
                self.logger.error(f"❌ {name} service failed to initialize: {result.message}")

    def get_service(self, name: str) -> Optional[Any]:
        return self.services.get(name)

    def shutdown_all(self) -> None:
        for name in reversed(list(self.services)):
            try:
                self.services[name].shutdown()
            except Exception as e:
                self.logger.warning(f"⚠️ Error shutting down {name} service: {e}")
        self.logger.info("🛑 Services stopped")

    def health_check_all(self) -> ServiceResult:
        """Aggregate the health of every service.

        A service counts as healthy only if its check succeeded and reported
        ``status == "healthy"``; a degraded timer (no audio device, stopped
        ticker) makes the whole application unhealthy.
        """
        services: Dict[str, Dict[str, Any]] = {}
        for name, service in self.services.items():
            try:
                health = service.health_check()
            except Exception as e:
                self.logger.error(f"Health check of {name} raised: {e}")
                health = ServiceResult(success=False, message=str(e), error_code="HEALTH_CHECK_FAILED")

            details = health.data if health.success and isinstance(health.data, dict) else {
                "status": "error",
                "error": health.message,
            }
            summary = str(details.get("status", "")).lower()
            services[name] = {
                "healthy": health.success and summary == "healthy",
                "status": details,
                "status_summary": summary,
            }

        healthy = sum(1 for entry in services.values() if entry["healthy"])
        return ServiceResult(
            success=True,
            data={
                "overall_healthy": healthy == len(services),
                "services": services,
                "total_services": len(services),
                "healthy_services": healthy,
            },
        )
