"""Observability – structured logging helpers."""
from table_export.observability.logging.processors import get_logger
from table_export.observability.logging.factory import JsonLoggerFactory

__all__ = [
    "JsonLoggerFactory",
    "get_logger",
]
