"""Application configuration."""

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./ideation.db",
        description="Database connection URL"
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed CORS origins"
    )

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Event stream
    event_queue_max_size: int = Field(
        default=1000,
        description="Per-subscriber event queue bound (0 = unbounded)"
    )

    # Report performance thresholds
    report_p95_threshold_ms: float = Field(
        default=5000.0,
        description="Acceptable p95 report generation time in milliseconds"
    )
    report_p99_threshold_ms: float = Field(
        default=8000.0,
        description="Acceptable p99 report generation time in milliseconds"
    )
    max_metric_samples: int = Field(
        default=1000,
        description="Number of timing samples kept by the metrics collector"
    )

    # Session policy
    enforce_progress_monotonic: bool = Field(
        default=True,
        description="Reject session updates that lower progress on a running session"
    )

    # Development Settings
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Log level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v_upper

    @field_validator("event_queue_max_size")
    @classmethod
    def validate_queue_size(cls, v: int) -> int:
        """Validate queue bound is non-negative."""
        if v < 0:
            raise ValueError("event_queue_max_size must be zero or positive")
        return v

    @field_validator("max_metric_samples")
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        """Validate integer is positive."""
        if v <= 0:
            raise ValueError(f"Value must be positive, got {v}")
        return v

    @field_validator("report_p95_threshold_ms", "report_p99_threshold_ms")
    @classmethod
    def validate_threshold(cls, v: float) -> float:
        """Validate thresholds are positive durations."""
        if v <= 0:
            raise ValueError("Report thresholds must be positive")
        return v

    @model_validator(mode="after")
    def validate_threshold_order(self) -> "Settings":
        """Validate p95 threshold does not exceed p99 threshold."""
        if self.report_p95_threshold_ms > self.report_p99_threshold_ms:
            raise ValueError(
                "report_p95_threshold_ms must be less than or equal to report_p99_threshold_ms"
            )
        return self


# Global settings instance
settings = Settings()
