"""
Application configuration using Pydantic Settings.
All environment-specific values are centralized here.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "Safeguard Capability Mapper"
    app_version: str = "0.1.0"
    debug: bool = False
    framework_name: str = "CIS Controls v8.1"

    # ── Catalog data ─────────────────────────────────────
    safeguard_data_path: str = ""  # empty = bundled catalog/data/safeguards.json

    # ── Catalog cache ────────────────────────────────────
    cache_ttl_seconds: float = 5 * 60
    cache_max_entries: int = 1000
    cache_cleanup_interval_seconds: float = 30 * 60
    background_cleanup_seconds: float = 10 * 60

    # ── Claim validation ─────────────────────────────────
    min_text_length: int = 10
    max_text_length: int = 10_000

    # ── Rules ────────────────────────────────────────────
    rules_config_path: str = ""  # optional JSON override of keyword tables / thresholds

    # ── API ──────────────────────────────────────────────
    api_host: str = "0.0.0.0"
    api_port: int = 8080
    allowed_origins: list[str] = ["http://localhost:3000"]

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Return cached application settings (singleton)."""
    return Settings()
