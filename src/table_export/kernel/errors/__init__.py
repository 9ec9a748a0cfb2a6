"""Kernel error hierarchy: public re-export surface.

Hierarchy::

    BaseError                  (base.py)
    ├── ApplicationError       (base.py)
    └── ExportError            (export.py)
        ├── ConfigurationError
        ├── ProjectionError
        ├── MaterializationError
        ├── EncodingError
        └── TransportError
"""

from table_export.kernel.errors.base import ApplicationError, BaseError
from table_export.kernel.errors.export import (
    ConfigurationError,
    EncodingError,
    ExportError,
    MaterializationError,
    ProjectionError,
    TransportError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConfigurationError",
    "EncodingError",
    "ExportError",
    "MaterializationError",
    "ProjectionError",
    "TransportError",
]
