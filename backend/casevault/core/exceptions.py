"""
Client error taxonomy.

Local precondition violations (duplicate submissions, missing entitlement)
and transport failures are kept apart so that callers can absorb the former
and surface the latter.
"""
from typing import Optional


class CaseVaultError(RuntimeError):
    """Base class for all client errors."""


class FetchError(CaseVaultError):
    """Transport or server failure while talking to the backend."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class DownloadFailedError(FetchError):
    """An evidence file could not be fetched or saved."""


class DuplicateRequestError(CaseVaultError):
    """An access request for the case is in flight, pending or approved."""

    def __init__(self, case_id: str, reason: str):
        super().__init__(f"Access request for case {case_id} not submitted: {reason}")
        self.case_id = case_id
        self.reason = reason


class NotAuthorizedError(CaseVaultError):
    """Case data was requested without an APPROVED access request."""

    def __init__(self, case_id: str, entitlement: str):
        super().__init__(
            f"Case {case_id} is not accessible (entitlement: {entitlement})"
        )
        self.case_id = case_id
        self.entitlement = entitlement


class UnknownActionError(CaseVaultError):
    """An audit record carries an action code outside the known set."""

    def __init__(self, code: object):
        super().__init__(f"Unknown evidence history action code: {code!r}")
        self.code = code
