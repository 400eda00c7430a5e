from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # PostgreSQL
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "linkpage"
    postgres_password: str = "changeme"
    postgres_db: str = "linkpage"

    @property
    def postgres_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def postgres_url_sync(self) -> str:
        """For Alembic migrations (sync driver)."""
        return (
            f"postgresql+psycopg2://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    # Auth
    jwt_secret_key: str = "change-this-to-a-random-string"
    jwt_algorithm: str = "HS256"
    session_token_expire_hours: int = 168
    password_reset_token_expire_minutes: int = 60

    # Frontend (used to build links in outgoing emails)
    frontend_url: str = "http://localhost:3000"

    # SMTP: leave smtp_host empty to disable outgoing mail
    smtp_host: str = ""
    smtp_port: int = 587
    smtp_username: str = ""
    smtp_password: str = ""
    smtp_from: str = "no-reply@linkpage.local"
    smtp_use_tls: bool = True
    smtp_timeout_seconds: int = 15

    # Analytics: leave empty to disable tracking
    mixpanel_token: str = ""

    # App
    app_version: str = "1.0.0"
    app_env: str = "development"
    app_debug: bool = True
    app_host: str = "0.0.0.0"
    app_port: int = 8000

    # CORS
    allowed_origins: str = "*"  # comma-separated

    # Logging
    log_level: str = "INFO"
    log_json: bool = False  # set True in production for structured JSON logs

    # Sentry
    sentry_dsn: str = ""  # leave empty to disable


settings = Settings()


def validate_settings_for_production() -> None:
    """Fail startup on settings that would leak sessions or break reset emails."""
    errors: list[str] = []

    if settings.app_env == "production":
        if settings.jwt_secret_key == "change-this-to-a-random-string" or len(settings.jwt_secret_key) < 32:
            errors.append("JWT_SECRET_KEY must be a random value of at least 32 characters")
        if settings.allowed_origins == "*":
            errors.append("ALLOWED_ORIGINS must list the frontend origin(s)")
        if settings.app_debug:
            errors.append("APP_DEBUG must be false")
        if not settings.smtp_host:
            errors.append("SMTP_HOST must be set, password reset emails would be dropped")

    if settings.smtp_host:
        if not settings.frontend_url.startswith(("http://", "https://")):
            errors.append("FRONTEND_URL must be an absolute URL")
        if not settings.smtp_from:
            errors.append("SMTP_FROM must be set")

    if settings.session_token_expire_hours <= 0 or settings.password_reset_token_expire_minutes <= 0:
        errors.append("Token lifetimes must be positive")

    if errors:
        raise SystemExit("Configuration errors:\n  - " + "\n  - ".join(errors))
