"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. The pool itself never reads settings: startup turns them
into an immutable PoolConfiguration that is passed to its constructor.
"""

from functools import lru_cache

from pydantic import SecretStr, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from resource_pool import __version__
from resource_pool.domain.exceptions import ConfigurationError
from resource_pool.domain.value_objects import BackendConnection, PoolConfiguration

_SUPPORTED_PROVIDERS = ("local", "aws", "s3", "memory")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Provider-specific settings are only required when that provider is
    selected (validated in validate_provider).
    """

    # App
    app_name: str = "resource-pool"
    app_version: str = __version__
    debug: bool = False

    # Resource pool
    resource_pool_namespace_key: str = "cc-resources"
    resource_pool_maximum_size: int = 512 * 1024 * 1024  # 512MB
    resource_pool_provider: str = "local"
    resource_pool_local_root: str = "/var/vcap/store/resource_pool"
    resource_pool_max_workers: int = 8

    # Remote object store (S3-compatible)
    aws_access_key_id: str | None = None
    aws_secret_access_key: SecretStr | None = None
    aws_region: str = "us-east-1"
    s3_endpoint_url: str | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_provider(self) -> "Settings":
        """Validate pool settings and the selected provider."""
        provider = self.resource_pool_provider.lower()
        if provider not in _SUPPORTED_PROVIDERS:
            raise ValueError(
                f"Invalid resource_pool_provider '{self.resource_pool_provider}'. "
                f"Must be one of: {', '.join(repr(p) for p in _SUPPORTED_PROVIDERS)}"
            )
        if self.resource_pool_maximum_size < 0:
            raise ValueError("resource_pool_maximum_size must be non-negative")
        if self.resource_pool_max_workers < 1:
            raise ValueError("resource_pool_max_workers must be at least 1")
        if provider == "local" and not self.resource_pool_local_root:
            raise ValueError(
                "resource_pool_local_root is required when resource_pool_provider is 'local'. "
                "Set RESOURCE_POOL_LOCAL_ROOT environment variable or update .env file."
            )
        if provider in ("aws", "s3"):
            has_key = bool(self.aws_access_key_id)
            has_secret = bool(
                self.aws_secret_access_key
                and self.aws_secret_access_key.get_secret_value()
            )
            if has_key != has_secret:
                raise ValueError(
                    "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY must be set together"
                )
        return self

    def to_pool_configuration(self) -> PoolConfiguration:
        """Build the immutable pool configuration.

        Raises:
            ConfigurationError: If the values do not form a valid configuration.
        """
        credentials: dict[str, str] = {}
        if self.aws_access_key_id:
            credentials["aws_access_key_id"] = self.aws_access_key_id
        if self.aws_secret_access_key:
            credentials["aws_secret_access_key"] = (
                self.aws_secret_access_key.get_secret_value()
            )
        try:
            return PoolConfiguration(
                namespace_key=self.resource_pool_namespace_key,
                maximum_size=self.resource_pool_maximum_size,
                backend_connection=BackendConnection(
                    provider=self.resource_pool_provider,
                    credentials=credentials,
                    local_root=self.resource_pool_local_root,
                    region=self.aws_region,
                    endpoint_url=self.s3_endpoint_url,
                ),
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.

    Raises:
        ConfigurationError: If the environment does not validate.
    """
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
