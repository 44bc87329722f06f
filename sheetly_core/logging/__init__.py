"""
Sheetly Logging Module

Structured logging setup shared by services using sheetly-core.
"""

from .config import (
    setup_logging,
    get_logger,
    add_service_name,
    service_name_var,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "add_service_name",
    "service_name_var",
]
