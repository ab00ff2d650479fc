# keyledger/errors.py
"""
Failures raised by the document workflow.

Each error carries the HTTP status the API layer answers with, so routers
never have to translate them one by one.
"""

from typing import Optional


class KeyLedgerError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class NotFound(KeyLedgerError):
    status_code = 404


class ValidationFailure(KeyLedgerError):
    status_code = 400


class AuthorizationFailure(KeyLedgerError):
    status_code = 401


class PersistenceFailure(KeyLedgerError):
    status_code = 500


class UpstreamFailure(KeyLedgerError):
    status_code = 502
