"""
Logging configuration with masking of credentials
"""
import logging
import re
from typing import Any

from casevault.core.config import settings


# Patterns to mask in logs
MASK_PATTERNS = [
    (r"Bearer\s+[A-Za-z0-9\-._~+/]+=*", "Bearer ***"),
    (r'"(api_token|token|access_token)":\s*"[^"]*"', r'"\1": "***"'),
    (r"'(api_token|token|access_token)':\s*'[^']*'", r"'\1': '***'"),
]


class MaskingFormatter(logging.Formatter):
    """Custom formatter that masks credentials."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        for pattern, replacement in MASK_PATTERNS:
            message = re.sub(pattern, replacement, message, flags=re.IGNORECASE)
        return message


def setup_logging() -> logging.Logger:
    """Configure client logging."""
    logger = logging.getLogger("casevault")
    logger.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)

    if not logger.handlers:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG if settings.DEBUG else logging.INFO)
        console_handler.setFormatter(
            MaskingFormatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(console_handler)

    return logger


# Global logger instance
logger = setup_logging()


def get_logger(name: str) -> logging.Logger:
    """Child logger under the casevault namespace."""
    if name == "casevault" or name.startswith("casevault."):
        return logging.getLogger(name)
    return logger.getChild(name)


def log_access_event(
    event_type: str,
    case_id: str,
    details: dict[str, Any],
) -> None:
    """Log a client-side access event (requests, history views, downloads)."""
    logger.info(f"AUDIT: {event_type} | case={case_id} | details={details}")
