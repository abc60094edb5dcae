from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PKG_DIR = Path(__file__).resolve().parent
ENV_PATH = PKG_DIR / ".env"


class Settings(BaseSettings):
    # App
    app_env: str = Field("dev", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="LOG_LEVEL")

    # MongoDB
    mongodb_uri: Optional[str] = Field(default=None, validation_alias="MONGODB_URI")
    mongodb_db: Optional[str] = Field(default=None, validation_alias="MONGODB_DB")
    mongodb_max_pool_size: int = Field(10, validation_alias="MONGODB_MAX_POOL_SIZE")
    mongodb_server_selection_timeout_ms: int = Field(
        5000, validation_alias="MONGODB_SERVER_SELECTION_TIMEOUT_MS"
    )
    default_db_name: str = "devevents"

    # Listing page -> API
    base_url: str = Field("http://127.0.0.1:8000", validation_alias="BASE_URL")
    http_timeout_seconds: float = Field(8.0, validation_alias="HTTP_TIMEOUT_SECONDS")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"

    @property
    def auto_index(self) -> bool:
        # no automatic index builds in production
        return not self.is_production


settings = Settings()
