# Settings package
from artmarket.settings.app import AppSettings, get_app_settings

__all__ = ["get_app_settings", "AppSettings"]
