"""
Утилиты для пула.
"""

from .logger import get_logger, setup_logging
from .monitoring import ResourceSnapshot, ResourceUsage

__all__ = [
    "get_logger",
    "setup_logging",
    "ResourceSnapshot",
    "ResourceUsage"
]
