"""
Configuration for the storefront analytics dashboard.
Values come from the environment (or a local .env file).
"""

import os
import logging
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from models import Thresholds


DEFAULT_API_URL = "http://localhost:3000"
DEFAULT_TIMEOUT = 30.0

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_logging_configured = False


def _parse_float(name: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def parse_thresholds(name: str, raw: Optional[str]) -> Optional[Thresholds]:
    """
    Parse a "low,medium,high" triple from an environment variable.

    Returns None when the variable is unset or blank.
    """
    if not raw or not raw.strip():
        return None

    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 3:
        raise ValueError(f"{name} must have three comma separated values (low,medium,high)")

    low, medium, high = (_parse_float(name, p) for p in parts)
    return Thresholds(low=low, medium=medium, high=high)


def resolve_api_url(environ=None) -> str:
    """VITE_API_URL wins over API_URL, falling back to the local backend."""
    environ = os.environ if environ is None else environ
    url = environ.get("VITE_API_URL") or environ.get("API_URL") or DEFAULT_API_URL
    return url.rstrip("/")


@dataclass
class AppConfig:
    """Runtime settings for the dashboard."""
    api_url: str = DEFAULT_API_URL
    timeout: float = DEFAULT_TIMEOUT
    max_retries: int = 0
    log_level: str = "INFO"
    fixed_thresholds: Optional[Thresholds] = None
    percentage_thresholds: Optional[Thresholds] = None

    @classmethod
    def from_env(cls, environ=None, dotenv: bool = True) -> "AppConfig":
        if dotenv and environ is None:
            load_dotenv()
        environ = os.environ if environ is None else environ

        timeout = _parse_float("API_TIMEOUT", environ.get("API_TIMEOUT", str(DEFAULT_TIMEOUT)))

        raw_retries = environ.get("API_MAX_RETRIES", "0")
        try:
            max_retries = int(raw_retries)
        except ValueError:
            raise ValueError(f"API_MAX_RETRIES must be an integer, got {raw_retries!r}")

        return cls(
            api_url=resolve_api_url(environ),
            timeout=timeout,
            max_retries=max_retries,
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
            fixed_thresholds=parse_thresholds(
                "SUCCESS_FIXED_THRESHOLDS", environ.get("SUCCESS_FIXED_THRESHOLDS")
            ),
            percentage_thresholds=parse_thresholds(
                "SUCCESS_PERCENTAGE_THRESHOLDS", environ.get("SUCCESS_PERCENTAGE_THRESHOLDS")
            ),
        )

    @property
    def has_success_thresholds(self) -> bool:
        return self.fixed_thresholds is not None or self.percentage_thresholds is not None


def configure_logging(level: str = "INFO") -> None:
    """Set up root logging once per process (Streamlit reruns the script)."""
    global _logging_configured
    if _logging_configured:
        return
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
    _logging_configured = True
