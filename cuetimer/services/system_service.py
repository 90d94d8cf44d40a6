"""
🔧 System Service - Process and host information
================================================

Reports resource usage of the running timer process for the health
endpoint.
"""

import os
import platform
from typing import Any, Dict

import psutil

from . import BaseService, ServiceResult
from ..version import get_version_dict


class SystemService(BaseService):
    """Service for system-wide information and monitoring."""

    def __init__(self):
        super().__init__("system")
        self._process = psutil.Process(os.getpid())

    def _get_system_resources(self) -> Dict[str, Any]:
        memory_info = self._process.memory_info()
        return {
            "memory_mb": round(memory_info.rss / (1024 * 1024), 1),
            "cpu_percent": self._process.cpu_percent(interval=None),
            "threads": self._process.num_threads(),
            "system_memory_percent": psutil.virtual_memory().percent,
        }

    def get_system_info(self) -> ServiceResult:
        try:
            return self._success_result(data={
                "platform": platform.platform(),
                "python": platform.python_version(),
                "uptime_seconds": self.uptime_seconds(),
                "resource_usage": self._get_system_resources(),
                "version": get_version_dict(),
            })
        except Exception as e:
            return self._handle_error(e, "get_system_info")

    def health_check(self) -> ServiceResult:
        base_health = super().health_check()
        if not base_health.success:
            return base_health
        try:
            resources = self._get_system_resources()
        except psutil.Error as e:
            return self._handle_error(e, "health_check")
        return self._success_result(data={
            "service": "system",
            "status": "healthy",
            "uptime_seconds": self.uptime_seconds(),
            "resource_usage": resources,
        })
