"""Configuration management"""
import logging
import os
from typing import Dict, Optional

from dotenv import load_dotenv

from src.exceptions import ConfigurationError

load_dotenv()

# Settings that failed to parse at import, keyed by env var name.
# validate_config() reports them; the defaults stay in effect meanwhile.
INVALID_SETTINGS: Dict[str, str] = {}


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        INVALID_SETTINGS[name] = raw
        return default


# Logging
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# XP awards
# - XP_MINIMUM_AWARD: floor applied to every experiment award (default 0)
# - XP_MAXIMUM_AWARD: optional ceiling; unset or empty means no ceiling
XP_MINIMUM_AWARD: int = _env_int("XP_MINIMUM_AWARD", 0)
XP_MAXIMUM_AWARD: Optional[int] = _env_int("XP_MAXIMUM_AWARD", None)


def validate_config() -> None:
    """Validate configuration, raising ConfigurationError on the first problem"""
    if INVALID_SETTINGS:
        key, raw = next(iter(INVALID_SETTINGS.items()))
        raise ConfigurationError(
            f"{key} must be an integer, got {raw!r}",
            config_key=key,
            value=raw,
        )
    if not isinstance(logging.getLevelName(LOG_LEVEL.upper()), int):
        raise ConfigurationError(
            f"LOG_LEVEL must be a logging level name, got {LOG_LEVEL!r}",
            config_key="LOG_LEVEL",
            value=LOG_LEVEL,
        )
    if XP_MINIMUM_AWARD < 0:
        raise ConfigurationError(
            "XP_MINIMUM_AWARD cannot be negative",
            config_key="XP_MINIMUM_AWARD",
            value=str(XP_MINIMUM_AWARD),
        )
    if XP_MAXIMUM_AWARD is not None and XP_MAXIMUM_AWARD < XP_MINIMUM_AWARD:
        raise ConfigurationError(
            "XP_MAXIMUM_AWARD must be at least XP_MINIMUM_AWARD",
            config_key="XP_MAXIMUM_AWARD",
            value=str(XP_MAXIMUM_AWARD),
        )


def configure_logging() -> None:
    """Configure root logging for applications embedding the engine"""
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, LOG_LEVEL.upper())
    )
