"""Application configuration settings."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from functools import lru_cache

from pydantic import BaseModel, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class HotelOverride(BaseModel):
    """Per-hotel values that replace the global notification policy."""

    coalescing_window_seconds: int | None = Field(default=None, gt=0)
    high_value_inventory_threshold: float | None = Field(default=None, ge=0)
    high_cost_maintenance_threshold: float | None = Field(default=None, ge=0)
    quiet_hours_start: int | None = Field(default=None, ge=0, le=23)
    quiet_hours_end: int | None = Field(default=None, ge=0, le=23)
    quiet_hours_release: int | None = Field(default=None, ge=0, le=23)


@dataclass(frozen=True)
class HotelPolicy:
    """Effective notification policy for a single hotel."""

    timezone: str
    quiet_hours_start: int
    quiet_hours_end: int
    quiet_hours_release: int
    coalescing_window: timedelta
    high_value_inventory_threshold: float
    high_cost_maintenance_threshold: float


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./hotel_ops.db",
        description="Async SQLAlchemy URL of the notification and task store",
        min_length=1,
    )
    database_echo: bool = Field(default=False, description="Log emitted SQL statements")
    secret_key: str = Field(
        default="change-me",
        description="Secret key used to verify access tokens",
        min_length=1,
    )
    token_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(default=60, gt=0)
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used by the email notification channel",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Sender address of notification emails",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200"],
        description="Origins allowed to call the API from a browser",
    )
    app_timezone: str = Field(
        default="UTC",
        description="Default hotel-local timezone used for quiet hours",
    )
    hotel_timezones: dict[int, str] = Field(
        default_factory=dict,
        description="Timezone per hotel identifier, overriding APP_TIMEZONE",
    )
    hotel_overrides: dict[int, HotelOverride] = Field(
        default_factory=dict,
        description="Per-hotel overrides of the notification policy",
    )
    quiet_hours_start: int = Field(default=22, ge=0, le=23)
    quiet_hours_end: int = Field(default=6, ge=0, le=23)
    quiet_hours_release: int = Field(default=7, ge=0, le=23)
    coalescing_window_seconds: int = Field(
        default=300,
        gt=0,
        description="Window in which notifications sharing a suppression key are merged",
    )
    high_value_inventory_threshold: float = Field(
        default=50,
        ge=0,
        description="Inventory total consumed by a housekeeping task that raises an alert",
    )
    high_cost_maintenance_threshold: float = Field(
        default=500,
        ge=0,
        description="Actual maintenance cost that raises a high-cost alert",
    )
    push_timeout_seconds: float = Field(
        default=2.0,
        gt=0,
        description="Upper bound for a single realtime fan-out call",
    )
    scheduler_enabled: bool = Field(
        default=True, description="Start the periodic jobs with the application"
    )
    scheduler_interval_seconds: int = Field(default=60, gt=0)
    overdue_sweep_interval_seconds: int = Field(default=1800, gt=0)
    daily_summary_hour: int = Field(default=6, ge=0, le=23)
    guest_service_overdue_minutes: int = Field(default=120, gt=0)
    guest_service_urgent_overdue_minutes: int = Field(default=30, gt=0)

    @model_validator(mode="after")
    def _validate_settings(self) -> "Settings":
        if self.quiet_hours_start == self.quiet_hours_end:
            raise ValueError("QUIET_HOURS_START and QUIET_HOURS_END must differ")
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    def policy_for(self, hotel_id: int) -> HotelPolicy:
        """Return the notification policy that applies to ``hotel_id``."""

        override = self.hotel_overrides.get(hotel_id) or HotelOverride()

        def pick(name: str):
            value = getattr(override, name)
            return getattr(self, name) if value is None else value

        return HotelPolicy(
            timezone=self.hotel_timezones.get(hotel_id) or self.app_timezone,
            quiet_hours_start=pick("quiet_hours_start"),
            quiet_hours_end=pick("quiet_hours_end"),
            quiet_hours_release=pick("quiet_hours_release"),
            coalescing_window=timedelta(seconds=pick("coalescing_window_seconds")),
            high_value_inventory_threshold=pick("high_value_inventory_threshold"),
            high_cost_maintenance_threshold=pick("high_cost_maintenance_threshold"),
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = [
    "HotelOverride",
    "HotelPolicy",
    "Settings",
    "get_settings",
    "reset_settings_cache",
]
