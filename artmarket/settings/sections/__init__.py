from artmarket.settings.sections.integrations import SmtpSettings, TelegramSettings
from artmarket.settings.sections.marketplace import MarketplaceSettings
from artmarket.settings.sections.payments import PaystackSettings
from artmarket.settings.sections.shipping import TopshipSettings

__all__ = [
    "MarketplaceSettings",
    "PaystackSettings",
    "SmtpSettings",
    "TelegramSettings",
    "TopshipSettings",
]
