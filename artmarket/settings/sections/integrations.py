from pydantic_settings import BaseSettings
from pydantic import Field


class TelegramSettings(BaseSettings):
    """
    Telegram operator channel settings.
    Loaded from .env file with exact variable name matching.
    """

    enabled: bool = Field(default=False, alias="ARTMARKET_TELEGRAM_ENABLED")
    token: str = Field(default="", alias="TELEGRAM_BOT_TOKEN")
    chat_id: str = Field(default="", alias="TELEGRAM_CHAT_ID")
    prefix: str = Field(default="[ARTMARKET]", alias="ARTMARKET_TELEGRAM_PREFIX")
    min_severity: int = Field(default=50, alias="ARTMARKET_TELEGRAM_MIN_SEVERITY")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


class SmtpSettings(BaseSettings):
    """
    SMTP settings for customer and admin emails.
    """

    enabled: bool = Field(default=False, alias="ARTMARKET_SMTP_ENABLED")
    host: str = Field(default="localhost", alias="SMTP_HOST")
    port: int = Field(default=587, alias="SMTP_PORT")
    username: str = Field(default="", alias="SMTP_USERNAME")
    password: str = Field(default="", alias="SMTP_PASSWORD")
    use_tls: bool = Field(default=True, alias="SMTP_USE_TLS")
    sender: str = Field(default="orders@localhost", alias="SMTP_SENDER")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
