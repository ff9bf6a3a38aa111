"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class EmailConfig(BaseModel):
    """Transactional email delivery settings."""

    use_tls: Optional[bool] = Field(
        None, description="Override SMTP_SECURE (None = use the environment value)"
    )
    max_retries: int = Field(
        0,
        ge=0,
        le=5,
        description="Extra send attempts after a transport failure (0 = single attempt)",
    )
    retry_backoff_multiplier: float = Field(
        2.0, ge=1.0, le=5.0, description="Exponential backoff multiplier for retries"
    )
    retry_initial_delay: float = Field(
        1.0, ge=0.0, le=60.0, description="Initial retry delay in seconds"
    )


class OrganizationConfig(BaseModel):
    """Branding used by the email templates."""

    name: str = Field("Indian Infra", min_length=1, description="Organization name")
    sender_name: Optional[str] = Field(
        None, description="Display name in the From header (defaults to name)"
    )
    onboarding_form_url: str = Field(
        "https://forms.gle/bv9Lc6SXWn6MHW6WA",
        min_length=1,
        description="Link included in the congratulations email",
    )

    @field_validator("name", "onboarding_form_url")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped

    @property
    def display_sender(self) -> str:
        return self.sender_name or self.name


class ServerConfig(BaseModel):
    """HTTP server settings."""

    host: str = Field("0.0.0.0", min_length=1)
    port: int = Field(8000, ge=1, le=65535)


class NotificationsConfig(BaseModel):
    """Notification store and listener settings."""

    poll_interval_seconds: int = Field(
        15, ge=1, le=3600, description="How often live queries re-read the store"
    )
    ack_workers: int = Field(
        4, ge=1, le=32, description="Worker threads used for mark-viewed writes"
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True, "validate_default": True}


class AppConfig(BaseModel):
    """Root configuration object. Every section has usable defaults."""

    email: EmailConfig = Field(default_factory=EmailConfig)
    organization: OrganizationConfig = Field(default_factory=OrganizationConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    notifications: NotificationsConfig = Field(default_factory=NotificationsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
