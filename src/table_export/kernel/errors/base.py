"""Root of the table-export error hierarchy."""

from __future__ import annotations

import json
from typing import Any


class BaseError(Exception):
    """Error carrying a machine-readable ``code`` and a ``detail`` mapping.

    ``detail`` only holds serialisable context (a column name, the offending
    setting).  The triggering exception is chained as ``__cause__`` and left
    out of :meth:`to_dict` unless asked for, so the dict can go straight into
    an HTTP response body.

    Args:
        message: Human-readable description.
        code: Machine-readable slug (defaults to ``default_code``).
        detail: Extra context, copied.
        cause: Original exception, chained as ``__cause__``.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        if cause is not None:
            self.__cause__ = cause

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self, *, include_cause: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if include_cause and self.__cause__ is not None:
            payload["cause"] = repr(self.__cause__)
        return payload

    def log_fields(self) -> dict[str, Any]:
        """Flat fields for a structlog event: ``error``, ``message`` and the detail entries."""
        return {"error": self.code, "message": self.message, **self.detail}


class ApplicationError(BaseError):
    """Wiring and configuration failures outside a single export."""

    default_code = "application_error"


__all__ = ["ApplicationError", "BaseError"]
