"""Config settings – 12-factor env-based configuration."""
from table_export.config.settings.base import Settings
from table_export.config.settings.export import ExportSettings, load_export_settings
from table_export.config.settings.factory import SettingsFactory
from table_export.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "ExportSettings",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
    "load_export_settings",
]
