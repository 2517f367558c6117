"""Runtime configuration read from the environment (and an optional .env file)."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-backed settings; every field is keyed by its UPPER_SNAKE alias."""

    # Application metadata
    app_name: str = Field(default="Pulse Stage", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(alias="SECRET_KEY")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Database configuration
    database_url: str = Field(default="sqlite:///./pulse.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # JWT authentication settings
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )
    bcrypt_rounds: int = Field(default=12, alias="BCRYPT_ROUNDS")

    # Content limits
    post_content_max_length: int = Field(default=500, alias="POST_CONTENT_MAX_LENGTH")
    comment_content_max_length: int = Field(default=500, alias="COMMENT_CONTENT_MAX_LENGTH")
    post_images_max: int = Field(default=5, alias="POST_IMAGES_MAX")

    # Pagination
    posts_page_size_default: int = Field(default=5, alias="POSTS_PAGE_SIZE_DEFAULT")
    posts_page_size_max: int = Field(default=100, alias="POSTS_PAGE_SIZE_MAX")

    # Object storage (S3 or any S3-compatible endpoint)
    s3_bucket: str | None = Field(default=None, alias="AWS_S3_BUCKET")
    s3_region: str = Field(default="us-east-1", alias="AWS_S3_REGION")
    s3_endpoint_url: str | None = Field(default=None, alias="AWS_S3_ENDPOINT_URL")
    s3_access_key_id: str | None = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    s3_secret_access_key: str | None = Field(default=None, alias="AWS_SECRET_ACCESS_KEY")
    s3_key_prefix: str = Field(default="post-images", alias="S3_KEY_PREFIX")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def database_url_sync(self) -> str:
        """Return the effective URL with bare Postgres schemes bound to psycopg."""
        url = self.effective_database_url
        for scheme in ("postgres://", "postgresql://", "postgresql+asyncpg://"):
            if url.startswith(scheme):
                return "postgresql+psycopg://" + url[len(scheme):]
        return url

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()  # type: ignore[call-arg]
