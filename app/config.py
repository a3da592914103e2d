from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be configured via .env file or environment variables.
    """

    # Database
    DATABASE_URL: str
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    APPLY_MIGRATIONS: bool = False

    # Application JWT (issued after Google sign-in)
    SECRET_KEY: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Google identity
    GOOGLE_CLIENT_ID: str
    GOOGLE_JWKS_URL: str = "https://www.googleapis.com/oauth2/v3/certs"
    GOOGLE_ISSUERS: str = "accounts.google.com,https://accounts.google.com"
    GOOGLE_JWKS_CACHE_TTL: int = 3600
    GOOGLE_JWKS_TIMEOUT: float = 5.0

    # Application
    APP_NAME: str = "Fabric Library API"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: str = ""
    CORS_ALLOW_CREDENTIALS: bool = True

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS from comma-separated string"""
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]

    @property
    def google_issuers_list(self) -> list[str]:
        """Parse GOOGLE_ISSUERS from comma-separated string"""
        return [issuer.strip() for issuer in self.GOOGLE_ISSUERS.split(",") if issuer.strip()]


# Global settings instance
settings = Settings()
