"""Environment-driven settings and log sinks."""

import os
import sys
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from loguru import logger

from legrecon.pipeline.strategy_engine import OPTION_MULTIPLIER

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    allow_broken_close: bool = False    # Close partial structures without operator override
    option_multiplier: int = OPTION_MULTIPLIER
    log_level: str = "INFO"
    log_dir: Optional[str] = None


def load_settings() -> Settings:
    load_dotenv()
    return Settings(
        allow_broken_close=os.getenv("LEGRECON_ALLOW_BROKEN_CLOSE", "").strip().lower() in _TRUE,
        option_multiplier=int(os.getenv("LEGRECON_OPTION_MULTIPLIER", str(OPTION_MULTIPLIER))),
        log_level=os.getenv("LEGRECON_LOG_LEVEL", "INFO").upper(),
        log_dir=os.getenv("LEGRECON_LOG_DIR") or None,
    )


def configure_logging(settings: Settings) -> None:
    """Replace loguru's default sink with stderr at the configured level, plus files if asked."""
    logger.remove()
    logger.add(sys.stderr, level=settings.log_level)
    if settings.log_dir:
        logger.add(
            os.path.join(settings.log_dir, "legrecon_{time}.log"),
            rotation="1 day",
            retention="7 days",
            level=settings.log_level,
        )
