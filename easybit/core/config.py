from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="EASYBIT_", extra="ignore")

    URL: str = "https://api.easybit.com"
    API_KEY: Optional[SecretStr] = None

    TIMEOUT: float = 10.0

    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

settings = Settings()
