"""Config settings – ExportSettings and its loader entry point."""
from __future__ import annotations

import dataclasses
from typing import Any, ClassVar

from table_export.config.settings.base import Settings
from table_export.config.settings.factory import SettingsFactory
from table_export.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from table_export.config.validation import InvalidSettingValueError

FORMATS = ("csv", "xlsx", "pdf")
PAGE_ORIENTATIONS = ("portrait", "landscape")
PAPER_SIZES = ("A3", "A4", "A5", "LETTER", "LEGAL")


@dataclasses.dataclass
class ExportSettings(Settings):
    """Exporter-wide defaults and feature switches.

    Every value can be set through ``EXPORT_<FIELD>`` environment variables,
    e.g. ``EXPORT_DEFAULT_FORMAT=csv`` or ``EXPORT_DISABLE_PREVIEW=1``.
    """

    _prefix: ClassVar[str] = "EXPORT"

    default_format: str = "xlsx"
    default_page_orientation: str = "portrait"
    time_format: str = "%b_%d_%Y-%H_%M"

    disable_additional_columns: bool = False
    disable_filter_columns: bool = False
    disable_file_name: bool = False
    disable_file_name_prefix: bool = False
    disable_preview: bool = False

    use_alternate_pdf_backend: bool = False
    paper_size: str = "A4"

    csv_delimiter: str = ","
    csv_bom: bool = False
    xlsx_sheet_title: str = "Export"
    chunk_size: int = 64 * 1024

    pdf_template: str = "pdf"
    print_template: str = "print"
    templates_dir: str = ""

    def _validate(self) -> None:
        self.default_format = self.default_format.lower()
        self.default_page_orientation = self.default_page_orientation.lower()
        self.paper_size = self.paper_size.upper()

        if self.default_format not in FORMATS:
            raise InvalidSettingValueError(
                "default_format", self.default_format, f"expected one of {', '.join(FORMATS)}"
            )
        if self.default_page_orientation not in PAGE_ORIENTATIONS:
            raise InvalidSettingValueError(
                "default_page_orientation",
                self.default_page_orientation,
                f"expected one of {', '.join(PAGE_ORIENTATIONS)}",
            )
        if self.paper_size not in PAPER_SIZES:
            raise InvalidSettingValueError(
                "paper_size", self.paper_size, f"expected one of {', '.join(PAPER_SIZES)}"
            )
        if len(self.csv_delimiter) != 1:
            raise InvalidSettingValueError("csv_delimiter", self.csv_delimiter, "must be a single character")
        if self.chunk_size < 1:
            raise InvalidSettingValueError("chunk_size", self.chunk_size, "must be positive")
        if not self.xlsx_sheet_title:
            raise InvalidSettingValueError("xlsx_sheet_title", self.xlsx_sheet_title, "must not be empty")
        # Excel rejects longer sheet names
        self.xlsx_sheet_title = self.xlsx_sheet_title[:31]


def load_export_settings(
    env_file: str | None = None,
    overrides: dict[str, Any] | None = None,
) -> ExportSettings:
    """Build :class:`ExportSettings` from the environment (and optionally a
    ``.env`` file), with *overrides* applied last."""
    loaders: list[SettingsLoader] = [EnvSettingsLoader()]
    if env_file is not None:
        loaders.append(DotenvSettingsLoader(env_file))
    return SettingsFactory.create(ExportSettings, loaders=loaders, overrides=overrides)


__all__ = [
    "FORMATS",
    "PAGE_ORIENTATIONS",
    "PAPER_SIZES",
    "ExportSettings",
    "load_export_settings",
]
