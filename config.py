"""
Scraper Configuration.

Centralized configuration with environment variable support
and sensible defaults for the OpenSea scraper.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


@dataclass
class ScraperConfig:
    """OpenSea scraper configuration."""

    # Target site
    base_url: str = os.getenv("OPENSEA_BASE_URL", "https://opensea.io")

    # Browser settings
    default_mode: str = os.getenv("SCRAPE_MODE", "headless")
    timeout_ms: int = int(os.getenv("TIMEOUT_MS", "30000"))
    challenge_timeout_ms: int = int(os.getenv("CHALLENGE_TIMEOUT_MS", "60000"))

    # Rankings scrolling
    scroll_step_px: int = int(os.getenv("SCROLL_STEP_PX", "50"))
    scroll_interval_ms: int = int(os.getenv("SCROLL_INTERVAL_MS", "5"))
    max_scroll_ticks: int = int(os.getenv("MAX_SCROLL_TICKS", "5000"))

    # Stealth
    enable_stealth: bool = os.getenv("STEALTH", "true").lower() == "true"
    custom_user_agent: Optional[str] = os.getenv("USER_AGENT")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: Optional[str] = os.getenv("LOG_FILE")


config = ScraperConfig()


def configure_logging(settings: ScraperConfig = config) -> None:
    """Apply the configured log level and optional log file to the root logger."""
    handlers = [logging.StreamHandler()]
    if settings.log_file:
        handlers.append(logging.FileHandler(settings.log_file, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
    )
