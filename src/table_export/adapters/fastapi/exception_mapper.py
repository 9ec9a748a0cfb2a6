"""FastAPI adapter – ExportExceptionMapper."""
from __future__ import annotations

from typing import Any, Callable

from fastapi.responses import JSONResponse

from table_export.kernel.errors import (
    BaseError,
    ConfigurationError,
    EncodingError,
    ExportError,
    MaterializationError,
    ProjectionError,
)


class ExportExceptionMapper:
    """Register export error → HTTP status-code mappings on a FastAPI app.

    Error body schema::

        {"code": "export_projection", "message": "...", "detail": {...}}

    Mappings
    --------
    ``ConfigurationError``   → 400
    ``ProjectionError``      → 422
    ``MaterializationError`` → 500
    ``EncodingError``        → 500
    ``ExportError``          → 500

    Only errors raised before the response starts streaming reach these
    handlers; a failure mid-stream aborts the connection instead.
    """

    def __init__(self) -> None:
        # ORDER MATTERS: more-specific subtypes first
        self._map: list[tuple[type[Exception], int]] = [
            (ConfigurationError, 400),
            (ProjectionError, 422),
            (MaterializationError, 500),
            (EncodingError, 500),
            (ExportError, 500),
        ]

    def status_for(self, exc: BaseException) -> int:
        for exc_type, status in self._map:
            if isinstance(exc, exc_type):
                return status
        return 500

    def register(self, app: Any) -> None:
        """Register all error handlers on a ``FastAPI`` or ``Starlette`` app."""

        def make_handler(code: int) -> Callable[[Any, Any], Any]:
            def handler(request: Any, exc: Any) -> Any:  # noqa: ARG001
                if isinstance(exc, BaseError):
                    body = exc.to_dict()
                else:
                    body = {"code": "error", "message": str(exc)}
                return JSONResponse(status_code=code, content=body)

            return handler

        for exc_type, status in self._map:
            app.add_exception_handler(exc_type, make_handler(status))


__all__ = ["ExportExceptionMapper"]
