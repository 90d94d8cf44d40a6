"""
🏗️ Service Layer
================

Services sit between the HTTP routes and the timer core.  Every public
service method returns a :class:`ServiceResult` instead of raising, so the
routes only translate results into JSON envelopes.
"""

import logging
import time
from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

OPERATION_FAILED = "OPERATION_FAILED"


@dataclass
class ServiceResult:
    """Outcome of a service call."""
    success: bool
    data: Optional[Any] = None
    message: Optional[str] = None
    error_code: Optional[str] = None
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def unexpected(self) -> bool:
        """True when the call failed because of an unhandled exception."""
        return not self.success and self.error_code == OPERATION_FAILED


class BaseService(ABC):
    """Lifecycle and result helpers shared by the services."""

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(f"cuetimer.service.{name}")
        self._started_at: Optional[float] = None
        self.last_error: Optional[str] = None

    def initialize(self) -> ServiceResult:
        self._started_at = time.monotonic()
        self.logger.info(f"🔧 {self.name} service ready")
        return ServiceResult(success=True, message=f"{self.name} service initialized")

    def shutdown(self) -> None:
        self._started_at = None

    @property
    def initialized(self) -> bool:
        return self._started_at is not None

    def uptime_seconds(self) -> float:
        if self._started_at is None:
            return 0.0
        return round(time.monotonic() - self._started_at, 1)

    def health_check(self) -> ServiceResult:
        """Base health: healthy once initialized. Subclasses add components."""
        if not self.initialized:
            return self._error_result(f"{self.name} service not initialized", error_code="NOT_INITIALIZED")
        return self._success_result(data={
            "service": self.name,
            "status": "healthy",
            "uptime_seconds": self.uptime_seconds(),
            "last_error": self.last_error,
        })

    def _handle_error(self, error: Exception, operation: str) -> ServiceResult:
        """Log an unexpected failure of ``operation`` and wrap it in a result."""
        self.last_error = f"{operation}: {error}"
        self.logger.error(f"💥 {self.name}.{operation} failed: {error}", exc_info=True)
        return ServiceResult(
            success=False,
            message=f"{self.name}.{operation} failed: {error}",
            error_code=OPERATION_FAILED,
        )

    def _success_result(self, data: Any = None, message: Optional[str] = None) -> ServiceResult:
        return ServiceResult(success=True, data=data, message=message)

    def _error_result(self, message: str, error_code: str = "ERROR", data: Any = None) -> ServiceResult:
        return ServiceResult(success=False, data=data, message=message, error_code=error_code)
