"""
CueTimer Route Blueprints
"""

from .health import health_bp
from .timer import timer_bp

__all__ = [
    "health_bp",
    "timer_bp",
]
