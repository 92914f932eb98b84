from decimal import Decimal

from pydantic_settings import BaseSettings
from pydantic import Field


class MarketplaceSettings(BaseSettings):
    """
    Business settings for the order engine.
    """

    referral_percentage: Decimal = Field(default=Decimal("10"), alias="REFERRAL_PERCENTAGE", ge=0, le=100)
    http_timeout_seconds: float = Field(default=15.0, alias="HTTP_TIMEOUT_SECONDS", gt=0)
    admin_email: str = Field(default="", alias="ADMIN_EMAIL")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
