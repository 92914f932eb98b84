from pydantic_settings import BaseSettings
from pydantic import Field


class TopshipSettings(BaseSettings):
    """
    Topship settings (shipping rates and carrier wallet payments).
    """

    api_key: str = Field(default="", alias="TOPSHIP_API_KEY")
    base_url: str = Field(default="https://api-topship.com/api", alias="TOPSHIP_BASE_URL")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }
