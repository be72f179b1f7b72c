"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Backend selections (document store, image storage)
are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings are optional with defaults except those validated in
    validate_backends (Firebase credentials for the firestore backend,
    bucket for the s3 storage backend).
    """

    # App
    app_name: str = "helpfromfounder"
    app_version: str = "1.0.0"
    debug: bool = False
    # Origin used to build links in notification emails (e.g. https://helpfromfounder.space)
    public_base_url: str = "http://localhost:3000"

    # Document store: "firestore" (REST API) or "memory" (local development and tests)
    database_backend: str = "firestore"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:5173"

    # Firebase / Firestore: use key (env) or path (file).
    firebase_service_account_key: SecretStr | None = None
    firebase_service_account_path: str | None = None
    # Web API key for the Identity Toolkit REST API (sign up / sign in)
    firebase_web_api_key: SecretStr | None = None

    # Notification dispatcher
    sendgrid_api_key: SecretStr | None = None
    sendgrid_api_url: str = "https://api.sendgrid.com/v3/mail/send"
    email_from_address: str = "contact@helpfromfounder.space"
    email_from_name: str = "Help From Founder"
    # Extra legacy route for the dispatcher (same handler as /api/send-email)
    send_email_path: str | None = None
    # When set, lifecycle notifications are POSTed to this URL instead of dispatched in-process
    notification_dispatcher_url: str | None = None
    notification_dedup_window_seconds: int = 3600
    thread_participant_limit: int = 5

    # Image storage
    storage_backend: str = "local"
    storage_root: str = "/var/helpfromfounder/images"
    s3_bucket: str | None = "helpfromfounder-bucket"
    s3_region: str = "auto"
    s3_endpoint_url: str | None = None
    # Cloudflare account id; builds the R2 endpoint when s3_endpoint_url is unset
    r2_account_id: str | None = None
    s3_access_key: str | None = None
    s3_secret_key: SecretStr | None = None
    max_upload_size: int = 10 * 1024 * 1024  # 10MB
    image_upload_url_expiry_seconds: int = 600
    image_cache_max_age: int = 31536000

    # Anonymous identity cookies
    anonymous_cookie_max_age: int = 365 * 24 * 3600
    anonymous_cookie_secure: bool = False

    # Request / middleware
    request_id_header: str = "X-Request-ID"

    # Redis (presence)
    redis_enabled: bool = False
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_max_connections: int = 10

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @property
    def resolved_s3_endpoint_url(self) -> str | None:
        """Explicit endpoint, else the R2 endpoint for r2_account_id, else None (AWS)."""
        if self.s3_endpoint_url:
            return self.s3_endpoint_url
        if self.r2_account_id:
            return f"https://{self.r2_account_id}.r2.cloudflarestorage.com"
        return None

    @model_validator(mode="after")
    def validate_backends(self) -> "Settings":
        """Validate backend selections.

        - Firestore: FIREBASE_SERVICE_ACCOUNT_KEY or FIREBASE_SERVICE_ACCOUNT_PATH required.
        - Memory: no requirements (data is lost on restart).
        - S3 storage: S3_BUCKET required.
        """
        if self.database_backend == "firestore":
            has_key = (
                self.firebase_service_account_key
                and self.firebase_service_account_key.get_secret_value()
            )
            if not has_key and not self.firebase_service_account_path:
                raise ValueError(
                    "When database_backend is 'firestore', set FIREBASE_SERVICE_ACCOUNT_KEY (full JSON string) "
                    "or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
                )
        elif self.database_backend != "memory":
            raise ValueError(
                f"database_backend must be 'firestore' or 'memory', got: {self.database_backend!r}"
            )
        if self.storage_backend == "s3":
            if not self.s3_bucket:
                raise ValueError(
                    "s3_bucket is required when storage_backend is 's3'. "
                    "Set S3_BUCKET environment variable or update .env file."
                )
        elif self.storage_backend != "local":
            raise ValueError(
                f"Invalid storage_backend '{self.storage_backend}'. "
                "Must be one of: 'local', 's3'"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Returns:
        Loaded and validated Settings instance.
    """
    return Settings()
