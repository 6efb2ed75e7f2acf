"""Centralized configuration using Pydantic Settings.

Single source of truth for service endpoints, geocoding, form
defaults, submission timing and logging.

Configuration can be overridden via environment variables:
- TRIP_SERVICE_URL=http://otp.example.org/otp/routers/default/plan
- TRIP_GEO_ENABLED=false
- TRIP_FORM_SHOW_WHEELCHAIR=false
- TRIP_SUBMIT_MAX_GEOCODE_POLLS=80
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import OptimizeType, TravelMode


class ServiceConfig(BaseSettings):
    """Trip-planning service configuration.

    Environment variables prefixed with TRIP_SERVICE_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIP_SERVICE_")

    url: str = "http://localhost:8080/otp-rest-servlet/ws/plan"
    timeout_seconds: float = 30.0
    router_id: Optional[str] = None


class GeocodingConfig(BaseSettings):
    """Geocoding configuration.

    Environment variables prefixed with TRIP_GEO_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIP_GEO_")

    enabled: bool = True
    user_agent: str = "trip-request-coordinator"
    timeout_seconds: int = 10
    rate_limit_delay: float = 1.0
    max_retries: int = 2
    error_wait_seconds: float = 2.0
    cache_ttl_seconds: Optional[float] = 3600.0
    country_codes: Optional[str] = None


class FormConfig(BaseSettings):
    """Defaults and feature switches of the trip request form.

    Environment variables prefixed with TRIP_FORM_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIP_FORM_")

    show_wheelchair: bool = True
    default_mode: TravelMode = TravelMode.TRANSIT
    default_optimize: OptimizeType = OptimizeType.QUICK
    default_max_walk_distance: float = 840.0


class SubmissionConfig(BaseSettings):
    """Submission timing.

    Environment variables prefixed with TRIP_SUBMIT_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIP_SUBMIT_")

    geocode_poll_interval_seconds: float = 0.25
    max_geocode_polls: int = 40
    blocked_message_seconds: float = 3.0
    error_message_seconds: float = 5.0

    @field_validator("geocode_poll_interval_seconds")
    @classmethod
    def _positive_interval(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("geocode_poll_interval_seconds must be positive")
        return value


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with TRIP_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIP_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.service.url)
        print(config.submission.geocode_poll_interval_seconds)

    Environment variables prefixed with TRIP_.
    """

    model_config = SettingsConfigDict(env_prefix="TRIP_")

    service: ServiceConfig = Field(default_factory=ServiceConfig)
    geocoding: GeocodingConfig = Field(default_factory=GeocodingConfig)
    form: FormConfig = Field(default_factory=FormConfig)
    submission: SubmissionConfig = Field(default_factory=SubmissionConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache."""
    get_config.cache_clear()
