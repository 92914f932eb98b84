# artmarket/settings/app.py
from functools import lru_cache

from artmarket.settings.sections import (
    MarketplaceSettings,
    PaystackSettings,
    SmtpSettings,
    TelegramSettings,
    TopshipSettings,
)


class AppSettings:
    """
    Central application settings aggregator.
    Settings are loaded lazily inside __init__
    to prevent eager evaluation at import time.
    """

    def __init__(self):
        self.marketplace = MarketplaceSettings()
        self.paystack = PaystackSettings()
        self.topship = TopshipSettings()

        self.telegram = TelegramSettings()
        self.smtp = SmtpSettings()


@lru_cache()
def get_app_settings() -> AppSettings:
    """Return cached global settings for the entire app."""
    return AppSettings()
