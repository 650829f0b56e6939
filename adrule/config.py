"""ADRULE — Central Configuration via Pydantic Settings."""

from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables / .env file."""

    # ── Rules Backend ──
    rules_api_base_url: str = "http://localhost:3000/api"
    rules_api_token: Optional[str] = None
    rules_api_timeout: float = 30.0
    rules_api_max_retries: int = 3
    rules_api_rules_path: str = "/automation-rules"
    rules_api_campaigns_path: str = "/campaigns/shopee"

    # ── App ──
    log_level: str = "INFO"

    # ── Compiler ──
    currency_threshold: float = 1000  # Values at or above render as Rupiah

    # ── Rule Builder ──
    max_actions_per_rule: int = 1  # <= 0 means unlimited
    min_interval_seconds: int = 300

    # ── Evaluation ──
    group_evaluation_mode: str = "all"  # all | connectors
    equality_epsilon: float = 0.01

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
