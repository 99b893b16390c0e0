"""
Backend API package
"""
from casevault.api.client import ApiClient, RawPayload
from casevault.api.cases import CaseService
from casevault.api.evidence import EvidenceService
from casevault.api.logs import LogService
from casevault.api.files import FileService

__all__ = [
    "ApiClient",
    "RawPayload",
    "CaseService",
    "EvidenceService",
    "LogService",
    "FileService",
]
