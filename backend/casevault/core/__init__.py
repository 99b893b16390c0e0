"""
Core module exports
"""
from casevault.core.config import settings, get_settings, Settings
from casevault.core.exceptions import (
    CaseVaultError,
    FetchError,
    DownloadFailedError,
    DuplicateRequestError,
    NotAuthorizedError,
    UnknownActionError,
)
from casevault.core.logging import logger, get_logger, log_access_event

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "CaseVaultError",
    "FetchError",
    "DownloadFailedError",
    "DuplicateRequestError",
    "NotAuthorizedError",
    "UnknownActionError",
    "logger",
    "get_logger",
    "log_access_event",
]
