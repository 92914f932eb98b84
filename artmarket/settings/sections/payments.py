from pydantic_settings import BaseSettings
from pydantic import Field


class PaystackSettings(BaseSettings):
    """
    Paystack payment gateway settings.
    Loaded from .env file with exact variable name matching.
    """

    api_key: str = Field(default="", alias="PAYSTACK_API_KEY")
    base_url: str = Field(default="https://api.paystack.co", alias="PAYSTACK_BASE_URL")
    currency: str = Field(default="NGN", alias="PAYSTACK_CURRENCY")

    # Used to check the x-paystack-signature header; empty disables the check
    webhook_secret: str = Field(default="", alias="PAYSTACK_WEBHOOK_SECRET")

    # Re-verify charge.success events against the gateway before settling
    verify_webhooks: bool = Field(default=False, alias="PAYSTACK_VERIFY_WEBHOOKS")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
