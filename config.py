"""
Social Rankings Service - Configuration
"""
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class ConfigurationError(Exception):
    """Raised when required configuration is missing at startup."""
    pass


# Credential fields sent to the upstream auth endpoint, keyed by payload name
CREDENTIAL_FIELDS = {
    "email": "OWNER_EMAIL",
    "name": "OWNER_NAME",
    "rollNo": "ROLL_NO",
    "accessCode": "ACCESS_CODE",
    "clientID": "CLIENT_ID",
    "clientSecret": "CLIENT_SECRET",
}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Paths
    LOG_DIR: Optional[Path] = Field(default=None, description="Directory for log files")

    # Upstream data source
    TEST_SERVER_URL: str = Field(default="http://20.244.56.144/evaluation-service")
    REQUEST_TIMEOUT_SECONDS: float = Field(default=30.0)

    # Credentials
    OWNER_EMAIL: str = Field(default="")
    OWNER_NAME: str = Field(default="")
    ROLL_NO: str = Field(default="")
    ACCESS_CODE: str = Field(default="")
    CLIENT_ID: str = Field(default="")
    CLIENT_SECRET: str = Field(default="")
    TOKEN_REFRESH_MARGIN_SECONDS: int = Field(default=300, description="Renew token this long before expiry")

    # Cache
    CACHE_TTL_USERS: int = Field(default=300)
    CACHE_TTL_POSTS: int = Field(default=120)

    # Refresh jobs
    USERS_REFRESH_INTERVAL_SECONDS: int = Field(default=240)
    POSTS_REFRESH_INTERVAL_SECONDS: int = Field(default=90)
    INITIAL_REFRESH_DELAY_SECONDS: int = Field(default=2)

    # Rankings
    TOP_K: int = Field(default=5)
    FETCH_CONCURRENCY: int = Field(default=1, ge=1)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    # API
    API_HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    def credentials(self) -> dict[str, str]:
        """Auth payload for the upstream /auth endpoint."""
        return {key: getattr(self, attr) for key, attr in CREDENTIAL_FIELDS.items()}


# Global settings instance
settings = Settings()


def ensure_credentials(config: Settings) -> None:
    """
    Validate that every required credential is set.

    Raises:
        ConfigurationError: listing all missing environment variables
    """
    missing = [attr for attr in CREDENTIAL_FIELDS.values() if not getattr(config, attr)]
    if missing:
        raise ConfigurationError(
            f"Environment variable(s) required but not set: {', '.join(missing)}"
        )


def ensure_directories(config: Optional[Settings] = None) -> None:
    """Ensure all required directories exist."""
    config = config or settings
    if config.LOG_DIR:
        Path(config.LOG_DIR).mkdir(parents=True, exist_ok=True)
