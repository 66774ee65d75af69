"""
Pydantic-based configuration for the autodiscover client.

Knobs are exposed via AUTODISCOVER_* environment variables (or a .env
file) so the CLI and the API can be tuned without code changes. The
probing functions only read these as defaults.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=False, env_file=".env", env_prefix="AUTODISCOVER_")

    # Timeouts (per HTTP exchange, not per discovery)
    http_timeout_s: float = Field(10.0, description="seconds per HTTP exchange")

    # Redirect chasing during authenticated probes
    max_redirects: int = Field(5, description="302 hops followed per probe")

    # TLS
    verify_tls: bool = Field(True, description="verify server certificates on https candidates")

    # HTTP user agent
    user_agent: str = Field("AutodiscoverProbe/0.1 (+mobilesync autodiscover client)")

    @field_validator("http_timeout_s")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("http_timeout_s must be positive")
        return v

    @field_validator("max_redirects")
    @classmethod
    def validate_max_redirects(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max_redirects must be >= 0")
        return v


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
