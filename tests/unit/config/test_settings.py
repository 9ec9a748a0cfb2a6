"""Unit tests for export settings, loaders and the settings factory."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

import pytest

from table_export.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    ExportSettings,
    Settings,
    SettingsFactory,
    SettingsLoader,
    load_export_settings,
)
from table_export.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)


@pytest.fixture(autouse=True)
def _clean_export_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("EXPORT_") or key.startswith("REQ_"):
            monkeypatch.delenv(key, raising=False)


@dataclass
class RequiredSettings(Settings):
    _prefix: ClassVar[str] = "REQ"

    token: str


# ---------------------------------------------------------------------------
# ExportSettings
# ---------------------------------------------------------------------------


class TestExportSettings:
    def test_defaults(self) -> None:
        s = ExportSettings()
        assert s.default_format == "xlsx"
        assert s.default_page_orientation == "portrait"
        assert s.paper_size == "A4"
        assert s.use_alternate_pdf_backend is False
        assert s.disable_preview is False

    def test_normalises_case(self) -> None:
        s = ExportSettings(default_format="CSV", default_page_orientation="Landscape", paper_size="letter")
        assert s.default_format == "csv"
        assert s.default_page_orientation == "landscape"
        assert s.paper_size == "LETTER"

    def test_rejects_unknown_format(self) -> None:
        with pytest.raises(InvalidSettingValueError, match="default_format"):
            ExportSettings(default_format="docx")

    def test_rejects_unknown_orientation(self) -> None:
        with pytest.raises(InvalidSettingValueError, match="default_page_orientation"):
            ExportSettings(default_page_orientation="diagonal")

    def test_rejects_unknown_paper(self) -> None:
        with pytest.raises(InvalidSettingValueError, match="paper_size"):
            ExportSettings(paper_size="B7")

    def test_rejects_multi_char_delimiter(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            ExportSettings(csv_delimiter=";;")

    def test_truncates_sheet_title(self) -> None:
        assert len(ExportSettings(xlsx_sheet_title="x" * 40).xlsx_sheet_title) == 31

    def test_invalid_value_is_config_error(self) -> None:
        with pytest.raises(ConfigError):
            ExportSettings(chunk_size=0)


# ---------------------------------------------------------------------------
# EnvSettingsLoader
# ---------------------------------------------------------------------------


class TestEnvSettingsLoader:
    def test_loads_string(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXPORT_DEFAULT_FORMAT", "pdf")
        assert EnvSettingsLoader().load(ExportSettings).default_format == "pdf"

    def test_loads_bool(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for truthy in ("1", "true", "Yes", "on"):
            monkeypatch.setenv("EXPORT_DISABLE_PREVIEW", truthy)
            assert EnvSettingsLoader().load(ExportSettings).disable_preview is True
        monkeypatch.setenv("EXPORT_DISABLE_PREVIEW", "off")
        assert EnvSettingsLoader().load(ExportSettings).disable_preview is False

    def test_loads_int(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXPORT_CHUNK_SIZE", "1024")
        assert EnvSettingsLoader().load(ExportSettings).chunk_size == 1024

    def test_bad_int_is_invalid_setting(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXPORT_CHUNK_SIZE", "lots")
        with pytest.raises(InvalidSettingValueError, match="EXPORT_CHUNK_SIZE"):
            EnvSettingsLoader().load(ExportSettings)

    def test_validation_error_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXPORT_DEFAULT_FORMAT", "docx")
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader().load(ExportSettings)

    def test_missing_required(self) -> None:
        with pytest.raises(MissingRequiredSettingError, match="REQ_TOKEN"):
            EnvSettingsLoader().load(RequiredSettings)

    def test_explicit_environ(self) -> None:
        settings = EnvSettingsLoader({"EXPORT_CSV_BOM": "yes", "EXPORT_PAPER_SIZE": "a3"}).load(ExportSettings)
        assert settings.csv_bom is True
        assert settings.paper_size == "A3"

    def test_bad_bool_is_invalid_setting(self) -> None:
        with pytest.raises(InvalidSettingValueError) as info:
            EnvSettingsLoader({"EXPORT_CSV_BOM": "maybe"}).load(ExportSettings)
        assert info.value.detail["setting"] == "EXPORT_CSV_BOM"

    def test_env_key(self) -> None:
        assert EnvSettingsLoader.env_key(ExportSettings, "chunk_size") == "EXPORT_CHUNK_SIZE"


class TestDotenvSettingsLoader:
    def test_reads_env_file(self, tmp_path: Path) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("EXPORT_DEFAULT_PAGE_ORIENTATION=landscape\n", encoding="utf-8")
        settings = DotenvSettingsLoader(str(env_file)).load(ExportSettings)
        assert settings.default_page_orientation == "landscape"
        assert "EXPORT_DEFAULT_PAGE_ORIENTATION" not in os.environ

    def test_process_env_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("EXPORT_DEFAULT_FORMAT=pdf\n", encoding="utf-8")
        monkeypatch.setenv("EXPORT_DEFAULT_FORMAT", "csv")
        assert DotenvSettingsLoader(str(env_file)).load(ExportSettings).default_format == "csv"
        assert DotenvSettingsLoader(str(env_file), override=True).load(ExportSettings).default_format == "pdf"

    def test_missing_file(self, tmp_path: Path) -> None:
        settings = DotenvSettingsLoader(str(tmp_path / "absent.env")).load(ExportSettings)
        assert settings == ExportSettings()


# ---------------------------------------------------------------------------
# SettingsFactory / load_export_settings
# ---------------------------------------------------------------------------


class _StaticLoader(SettingsLoader):
    def __init__(self, **values: object) -> None:
        self._values = values

    def load(self, settings_class):  # type: ignore[override]
        return settings_class(**self._values)


class _FailingLoader(SettingsLoader):
    def load(self, settings_class):  # type: ignore[override]
        raise ConfigError("unavailable")


class TestSettingsFactory:
    def test_later_loader_wins(self) -> None:
        s = SettingsFactory.create(
            ExportSettings,
            loaders=[_StaticLoader(default_format="csv"), _StaticLoader(default_format="pdf")],
        )
        assert s.default_format == "pdf"

    def test_defaults_do_not_reset_earlier_values(self) -> None:
        s = SettingsFactory.create(
            ExportSettings,
            loaders=[_StaticLoader(default_format="csv"), _StaticLoader()],
        )
        assert s.default_format == "csv"

    def test_failing_loader_is_skipped(self) -> None:
        s = SettingsFactory.create(
            ExportSettings,
            loaders=[_FailingLoader(), _StaticLoader(csv_bom=True)],
        )
        assert s.csv_bom is True

    def test_overrides_have_priority(self) -> None:
        s = SettingsFactory.create(
            ExportSettings,
            loaders=[_StaticLoader(default_format="csv")],
            overrides={"default_format": "xlsx"},
        )
        assert s.default_format == "xlsx"

    def test_missing_required_field(self) -> None:
        with pytest.raises(MissingRequiredSettingError):
            SettingsFactory.create(RequiredSettings, loaders=[])

    def test_invalid_value_is_not_skipped(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            SettingsFactory.create(
                ExportSettings,
                loaders=[EnvSettingsLoader({"EXPORT_DEFAULT_FORMAT": "docx"}), _StaticLoader()],
            )

    def test_invalid_override_raises(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            SettingsFactory.create(ExportSettings, overrides={"paper_size": "B9"})

    def test_load_export_settings_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EXPORT_USE_ALTERNATE_PDF_BACKEND", "true")
        s = load_export_settings(overrides={"time_format": "%Y"})
        assert s.use_alternate_pdf_backend is True
        assert s.time_format == "%Y"
