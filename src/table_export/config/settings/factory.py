"""Config settings – SettingsFactory layers several sources into one settings object."""
from __future__ import annotations

import dataclasses
from typing import Any, Sequence, TypeVar

from table_export.config.settings.base import Settings
from table_export.config.settings.loaders import SettingsLoader
from table_export.config.validation.errors import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)
from table_export.observability.logging import get_logger

T = TypeVar("T", bound=Settings)

logger = get_logger(__name__)


class SettingsFactory:
    """Layer loaders, then explicit overrides, into one settings instance.

    A loader contributes only the values that differ from the field
    defaults, so a source that sets nothing cannot undo an earlier one.
    A loader that cannot produce settings at all (say, a required field it
    does not know) is logged and skipped.  A value that is present but
    invalid is never skipped: :class:`InvalidSettingValueError` propagates.
    """

    @staticmethod
    def _changed(instance: Settings, defaults: dict[str, Any]) -> dict[str, Any]:
        changed: dict[str, Any] = {}
        for field in dataclasses.fields(instance):  # type: ignore[arg-type]
            value = getattr(instance, field.name)
            if field.name not in defaults or value != defaults[field.name]:
                changed[field.name] = value
        return changed

    @classmethod
    def create(
        cls,
        settings_cls: type[T],
        loaders: Sequence[SettingsLoader] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> T:
        """Build *settings_cls*; later loaders win, *overrides* win over all.

        Raises
        ------
        MissingRequiredSettingError
            When a field without a default was supplied by no source.
        InvalidSettingValueError
            When any source, or the overrides, hold an unusable value.
        ConfigError
            On any other construction failure.
        """
        defaults = settings_cls.field_defaults()
        values: dict[str, Any] = {}

        for loader in loaders or ():
            try:
                values.update(cls._changed(loader.load(settings_cls), defaults))
            except InvalidSettingValueError:
                raise
            except ConfigError as exc:
                logger.warning(
                    "settings.loader_skipped",
                    loader=type(loader).__name__,
                    **exc.log_fields(),
                )

        values.update(overrides or {})

        missing = [
            field.name
            for field in dataclasses.fields(settings_cls)  # type: ignore[arg-type]
            if field.name not in values and field.name not in defaults
        ]
        if missing:
            raise MissingRequiredSettingError(missing[0])

        try:
            return settings_cls(**values)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to construct {settings_cls.__name__}: {exc}") from exc


__all__ = ["SettingsFactory"]
