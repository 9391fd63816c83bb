"""
Application configuration settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=[".env", "../.env"], case_sensitive=False, extra="ignore"
    )

    # Application
    app_name: str = Field("Slidetrack API", alias="APP_NAME")

    # Environment
    environment: str = Field("development", alias="ENVIRONMENT")
    debug: bool = Field(False, alias="DEBUG")
    disable_auth: bool = Field(False, alias="DISABLE_AUTH")

    # Server
    host: str = Field("0.0.0.0", alias="HOST")
    port: int = Field(8000, alias="PORT")

    # Database
    database_url: str = Field(
        "sqlite+aiosqlite:///./slidetrack.db", alias="DATABASE_URL"
    )
    debug_sql: bool = Field(False, alias="DATABASE_ECHO")

    # JWT Authentication
    jwt_secret_key: str = Field(
        "dev-secret-key-change-in-production", alias="JWT_SECRET_KEY"
    )
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    jwt_expires_minutes: int = Field(60, alias="JWT_EXPIRATION_MINUTES")

    # Sharing
    share_base_url: str = Field("http://localhost:5173/view", alias="SHARE_BASE_URL")
    share_token_bytes: int = Field(24, alias="SHARE_TOKEN_BYTES")

    # Analytics
    analytics_window_days: int = Field(30, alias="ANALYTICS_WINDOW_DAYS")
    recent_viewers_limit: int = Field(10, alias="RECENT_VIEWERS_LIMIT")

    # CORS
    cors_origins: str = Field("*", alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(True, alias="CORS_ALLOW_CREDENTIALS")

    # Logging
    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("json", alias="LOG_FORMAT")

    def get_cors_origins(self) -> list[str]:
        """Parse CORS origins from string."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",")]

    def share_url(self, public_token: str) -> str:
        """Build the public link handed to recipients."""
        return f"{self.share_base_url.rstrip('/')}/{public_token}"


_settings = None


def get_settings() -> Settings:
    """Get settings instance (useful for dependency injection)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
