"""Config settings – shipper settings and their loaders."""
from logship.config.settings.base import Settings
from logship.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from logship.config.settings.shipper import CUSTOMER_TOKEN_LENGTH, DEFAULT_BASE_URL, ShipperSettings

__all__ = [
    "CUSTOMER_TOKEN_LENGTH",
    "DEFAULT_BASE_URL",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "Settings",
    "SettingsLoader",
    "ShipperSettings",
]
