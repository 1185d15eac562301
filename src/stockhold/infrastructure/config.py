"""Application settings, read from ``STOCKHOLD_*`` environment variables or ``.env``."""

from __future__ import annotations

from datetime import timedelta
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):

    # Where the JSON persistence adapters keep their files
    data_dir: Path = Field(default=Path("data"))

    # Holds placed directly on a product
    reservation_ttl_minutes: int = Field(default=30, gt=0)
    # Holds placed by order creation (the payment window)
    order_hold_ttl_minutes: int = Field(default=15, gt=0)
    # Kept well below both TTLs so expired capacity comes back quickly
    sweep_interval_seconds: float = Field(default=60.0, gt=0)

    log_level: str = Field(default="INFO")
    json_logs: bool = Field(default=False)

    model_config = SettingsConfigDict(
        env_prefix="STOCKHOLD_", env_file=".env", extra="ignore"
    )

    @property
    def reservation_ttl(self) -> timedelta:
        return timedelta(minutes=self.reservation_ttl_minutes)

    @property
    def order_hold_ttl(self) -> timedelta:
        return timedelta(minutes=self.order_hold_ttl_minutes)


@lru_cache
def get_settings() -> Settings:
    return Settings()
