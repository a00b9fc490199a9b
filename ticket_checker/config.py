"""
Ticket Checker Configuration
============================

Settings come from config/config.ini, then environment variables override them.
Environment variables (usually loaded from .env at startup):

- GEMINI_API_KEY         credential for the Gemini vision model
- GEMINI_MODEL           model name
- POWERBALL_RESULTS_URL  results page to read the latest drawing from
- RECEIPTS_DIR           directory holding receipt images
- LOG_LEVEL              loguru level (DEBUG, INFO, ...)
- TICKET_CHECKER_CONFIG  config file path used by the HTTP API
"""

import configparser
import os
import sys
from dataclasses import dataclass
from typing import Optional, Tuple

from loguru import logger

from ticket_checker.draw_source import DEFAULT_RESULTS_URL
from ticket_checker.exceptions import ConfigurationError
from ticket_checker.gemini_service import DEFAULT_MAX_OUTPUT_TOKENS, DEFAULT_MODEL
from ticket_checker.image_source import DEFAULT_EXTENSIONS

DEFAULT_CONFIG_PATH = os.path.join("config", "config.ini")
# set by `main.py serve --config` for the API process
CONFIG_PATH_ENV = "TICKET_CHECKER_CONFIG"
LOG_LEVELS = {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    results_url: str = DEFAULT_RESULTS_URL
    request_timeout: float = 15.0
    gemini_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_MODEL
    max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS
    request_delay: float = 0.0
    receipts_dir: str = "images"
    image_extensions: Tuple[str, ...] = DEFAULT_EXTENSIONS
    log_level: str = "INFO"


def _parse_extensions(raw: str) -> Tuple[str, ...]:
    parts = [p.strip().lower() for p in raw.split(",") if p.strip()]
    return tuple(p if p.startswith(".") else f".{p}" for p in parts)


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Load settings from an INI file plus environment overrides.

    A missing file is not an error; built-in defaults are used instead.

    Raises:
        ConfigurationError: a value in the file cannot be converted
    """
    path = config_path or DEFAULT_CONFIG_PATH
    config = configparser.ConfigParser()
    read_files = config.read(path)
    if read_files:
        logger.debug(f"Loaded configuration from {path}")
    else:
        logger.debug(f"No configuration file at {path}, using defaults")

    defaults = Settings()
    try:
        results_url = config.get("draws", "results_url", fallback=defaults.results_url)
        request_timeout = config.getfloat("draws", "request_timeout", fallback=defaults.request_timeout)
        gemini_model = config.get("recognition", "model", fallback=defaults.gemini_model)
        max_output_tokens = config.getint("recognition", "max_output_tokens",
                                          fallback=defaults.max_output_tokens)
        request_delay = config.getfloat("recognition", "request_delay", fallback=defaults.request_delay)
        receipts_dir = config.get("receipts", "directory", fallback=defaults.receipts_dir)
        raw_extensions = config.get("receipts", "extensions", fallback="")
        log_level = config.get("logging", "level", fallback=defaults.log_level)
    except ValueError as e:
        raise ConfigurationError(f"Invalid value in {path}: {e}") from e

    if request_delay < 0:
        raise ConfigurationError(f"request_delay must not be negative, got {request_delay}")

    log_level = os.getenv("LOG_LEVEL", log_level).upper()
    if log_level not in LOG_LEVELS:
        logger.warning(f"Unknown LOG_LEVEL {log_level!r}, falling back to INFO")
        log_level = "INFO"

    return Settings(
        results_url=os.getenv("POWERBALL_RESULTS_URL", results_url),
        request_timeout=request_timeout,
        gemini_api_key=os.getenv("GEMINI_API_KEY") or None,
        gemini_model=os.getenv("GEMINI_MODEL", gemini_model),
        max_output_tokens=max_output_tokens,
        request_delay=request_delay,
        receipts_dir=os.getenv("RECEIPTS_DIR", receipts_dir),
        image_extensions=_parse_extensions(raw_extensions) or defaults.image_extensions,
        log_level=log_level,
    )


def configure_logging(level: str = "INFO") -> None:
    """Replace loguru's default sink with a stderr sink at the given level."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {name}:{line} - {message}",
    )
