"""Application configuration."""

import os

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Countdown
    target_date: str = os.getenv("TARGET_DATE", "2026-01-30T16:00:00")
    anchor_date: str = os.getenv("ANCHOR_DATE", "2018-10-01T00:00:00")
    tick_interval: float = float(os.getenv("TICK_INTERVAL", "1.0"))  # seconds

    # Storage
    store_path: str = os.getenv("STORE_PATH", "data/countdown.db")
    store_key: str = os.getenv("STORE_KEY", "retirementDate")

    # Static files
    static_dir: str = os.getenv("STATIC_DIR", "static")
    dashboard_image: str = os.getenv("DASHBOARD_IMAGE", "images/countdown.png")

    # Server
    server_host: str = os.getenv("SERVER_HOST", "0.0.0.0")
    server_port: int = int(os.getenv("SERVER_PORT", "8000"))
    rate_limit_requests: int = int(os.getenv("RATE_LIMIT_REQUESTS", "100"))
    rate_limit_window: float = float(
        os.getenv("RATE_LIMIT_WINDOW", "60")
    )  # seconds

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = False


settings = Settings()
