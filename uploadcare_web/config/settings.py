"""
Application configuration using Pydantic settings.

Configuration is loaded from environment variables (prefixed with
UPLOADCARE_) and an optional .env file. The settings object is passed
explicitly into the resolver, the mount registry and the view helpers
instead of being looked up from module state, so tests can build their
own instance with whatever flags they need.

Mock mode enables local development without Uploadcare credentials.
"""

from functools import lru_cache
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Uploadcare integration settings.

    Field names mirror the options a Rails initializer would set,
    so an existing deployment can be configured by environment alone.
    """

    # API Configuration
    api_title: str = "Uploadcare Web Integration"
    api_version: str = "v1"
    api_keys: str = Field(
        default="dev-key-1",
        description="Comma-separated keys accepted in the X-API-Key header for store endpoints."
    )

    # Uploadcare credentials
    public_key: str = Field(
        default="demopublickey",
        description="Project public key, rendered into uc-config as pubkey."
    )
    secret_key: str = Field(
        default="",
        description="Project secret key. Required for REST calls unless in mock mode."
    )
    api_base_url: str = Field(
        default="https://api.uploadcare.com",
        description="Base URL of the Uploadcare REST API"
    )
    api_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds for REST calls"
    )
    api_mock_mode: bool = Field(
        default=False,
        description="Use an in-memory group client instead of the REST API."
    )

    # Caching of group info
    cache_files: bool = Field(
        default=True,
        description="Write group info to the cache after a group is stored."
    )
    cache_expires_in: int = Field(
        default=30 * 24 * 3600,
        description="Cache entry lifetime in seconds"
    )
    cache_namespace: str = Field(
        default="uploadcare",
        description="Prefix for every cache key"
    )

    # Store behaviour
    store_files_async: bool = Field(
        default=False,
        description="Queue store calls as background tasks instead of calling the API inline."
    )
    do_not_store: bool = Field(
        default=False,
        description="Never register the after-save store hook. Read once, at mount time."
    )

    # File Uploader defaults
    img_only: bool = Field(
        default=False,
        validation_alias=AliasChoices("img_only", "images_only", "uploadcare_img_only", "uploadcare_images_only"),
        description="Accept images only. Rendered as img-only on every uc-config."
    )
    locale: Optional[str] = Field(
        default=None,
        description="Default File Uploader locale"
    )
    uploader_version: str = Field(
        default="v1",
        description="File Uploader version loaded from the CDN by the include tag"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000",
        description="Comma-separated list of allowed CORS origins. Use * for development only."
    )

    model_config = SettingsConfigDict(
        env_prefix="UPLOADCARE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    @property
    def images_only(self) -> bool:
        """Old name for img_only, kept for existing configurations."""
        return self.img_only

    @property
    def api_keys_list(self) -> list[str]:
        """Parse comma-separated API keys into a list."""
        return [key.strip() for key in self.api_keys.split(",") if key.strip()]

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list."""
        if self.cors_origins == "*":
            return ["*"]
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    def validate_required_fields(self) -> list[str]:
        """
        Return the names of required settings that are missing.

        The secret key is only needed when we actually talk to the
        REST API, so mock mode skips it.
        """
        missing = []

        if not self.public_key:
            missing.append("UPLOADCARE_PUBLIC_KEY")

        if not self.api_mock_mode and not self.secret_key:
            missing.append("UPLOADCARE_SECRET_KEY")

        return missing


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Loaded once per process. For tests, call get_settings.cache_clear()
    or pass a Settings instance directly.
    """
    return Settings()
