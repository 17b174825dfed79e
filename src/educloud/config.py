# src/educloud/config.py

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Central client settings (Pydantic v2).

    - Aliases match the .env keys:
      API_URL, ENV, LOG_LEVEL, LOG_FORMAT, SESSION_BACKEND, SESSION_FILE,
      REDIS_URL, REDIS_KEY_PREFIX, DEMO_LOGIN_ENABLED, DEMO_EMAIL
    - Sessions are the only thing persisted client-side.
    """

    # ------------------------------------------------------------------------------------
    # App / API
    # ------------------------------------------------------------------------------------
    PROJECT_NAME: str = Field(default="educloud-client", alias="APP_NAME")
    ENVIRONMENT: str = Field(default="dev", alias="ENV")  # dev|staging|prod
    API_URL: str = Field(default="http://localhost:5000/api")
    # None means no client-enforced timeout; requests resolve or fail on their own.
    HTTP_TIMEOUT_SECONDS: Optional[float] = Field(default=None)

    # ------------------------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------------------------
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FORMAT: Optional[str] = Field(default=None)  # json | console

    # ------------------------------------------------------------------------------------
    # Session persistence
    # ------------------------------------------------------------------------------------
    SESSION_BACKEND: str = Field(default="file")  # file | redis | memory
    SESSION_FILE: Path = Field(default=Path.home() / ".educloud" / "sessions.json")
    REDIS_URL: Optional[str] = Field(default="redis://localhost:6379/0")
    REDIS_KEY_PREFIX: str = Field(default="educloud")

    # ------------------------------------------------------------------------------------
    # Demo mode
    # ------------------------------------------------------------------------------------
    DEMO_LOGIN_ENABLED: bool = Field(default=True)
    DEMO_EMAIL: str = Field(default="admin@educloud.com")

    # ------------------------------------------------------------------------------------
    # Helper properties
    # ------------------------------------------------------------------------------------
    @property
    def is_dev(self) -> bool:
        return self.ENVIRONMENT.lower() in {"dev", "development", "local"}

    @property
    def is_staging(self) -> bool:
        return self.ENVIRONMENT.lower() in {"stage", "staging"}

    @property
    def is_prod(self) -> bool:
        return self.ENVIRONMENT.lower() in {"prod", "production"}

    @property
    def api_base_url(self) -> str:
        return self.API_URL.rstrip("/")

    # ------------------------------------------------------------------------------------
    # Pydantic v2 settings config
    # ------------------------------------------------------------------------------------
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "populate_by_name": True,   # enable aliases
        "extra": "ignore",          # don't crash on unrelated env keys
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
