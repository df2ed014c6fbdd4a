"""Config settings – 12-factor env-based configuration."""
from cellex_inbox.config.settings.base import CaptureSettings, Settings
from cellex_inbox.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader

__all__ = ["CaptureSettings", "DotenvSettingsLoader", "EnvSettingsLoader", "Settings", "SettingsLoader"]
