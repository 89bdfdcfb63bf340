"""Application settings using Pydantic."""
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="SINDH_",
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="sqlite:///sindh.db",
        description="SQLAlchemy database URL",
    )

    # SMS gateway (optional; messages are only logged when unset)
    sms_gateway_url: Optional[str] = Field(
        default=None,
        description="HTTP endpoint of the SMS / missed-call gateway",
    )
    sms_gateway_api_key: Optional[str] = Field(
        default=None,
        description="Bearer token for the SMS gateway",
    )
    sms_sender_id: str = Field(
        default="SINDH",
        description="Sender ID shown on outgoing SMS",
    )

    # API server
    api_host: str = Field(default="0.0.0.0", description="API bind address")
    api_port: int = Field(default=5000, description="API port")

    # OTP login
    otp_ttl_minutes: int = Field(
        default=5,
        description="How long a one-time login code stays valid (minutes)",
    )
    otp_max_requests: int = Field(
        default=3,
        description="Codes a phone may request within otp_window_minutes",
    )
    otp_window_minutes: int = Field(
        default=10,
        description="Sliding window for otp_max_requests (minutes)",
    )

    # Scheduler intervals
    reminder_check_interval_minutes: int = Field(
        default=60,
        description="How often to look for jobs starting soon (minutes)",
    )
    reminder_window_hours: int = Field(
        default=24,
        description="Send a reminder when a job starts within this many hours",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")
    log_file: Optional[str] = Field(
        default="logs/sindh.log",
        description="Rotating log file path (empty to disable)",
    )

    # Paths
    config_dir: Path = Field(
        default=Path(__file__).parent,
        description="Configuration directory",
    )

    @property
    def scoring_config_path(self) -> Path:
        """Path to the scoring.yaml file."""
        return self.config_dir / "scoring.yaml"

    @property
    def project_root(self) -> Path:
        """Project root directory."""
        return self.config_dir.parent


# Global settings instance
settings = Settings()
