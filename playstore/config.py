"""Configuration management with Pydantic settings."""

from pathlib import Path

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """playstore configuration settings.

    Precedence: CLI flag > environment variable > config file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="PLAYSTORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Online mode control
    online: bool = Field(
        default=False,
        description="Enable calls to the Google Play Developer API",
    )

    # Offline signature verification
    public_key: str | None = Field(
        default=None,
        description="Base64 RSA public key from the Play Console (Monetization setup)",
    )

    # Google Play Developer API
    service_account_key_path: Path | None = Field(
        default=None,
        description="Path to the service-account JSON key file",
    )

    service_account_json: SecretStr | None = Field(
        default=None,
        description="Inline service-account JSON key (takes precedence over the path)",
    )

    http_timeout_seconds: float = Field(
        default=10.0,
        gt=0.0,
        description="Socket timeout for Developer API requests (seconds)",
    )

    package_name: str | None = Field(
        default=None,
        description="Default application package name, e.g. com.example.app",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level used by the CLI",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in allowed:
            raise ValueError(f"Unsupported log_level '{v}'. Allowed values: {sorted(allowed)}")
        return level

    def has_service_account(self) -> bool:
        """Return True when Developer API credentials are configured."""
        return self.service_account_json is not None or self.service_account_key_path is not None

    def get_service_account_json(self) -> bytes | None:
        """Return the raw service-account JSON key, or None when unconfigured.

        Raises:
            FileNotFoundError: If ``service_account_key_path`` does not exist
        """
        if self.service_account_json is not None:
            return self.service_account_json.get_secret_value().encode("utf-8")

        if self.service_account_key_path is None:
            return None

        path = self.service_account_key_path.expanduser()
        if not path.is_file():
            raise FileNotFoundError(f"Service account key not found: {path}")
        return path.read_bytes()


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
