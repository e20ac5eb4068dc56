"""Domain exceptions raised by the ledger helpers and translated to HTTP responses in main.py."""

from typing import Optional


class ValidationError(ValueError):
    """Input fails a local invariant. Nothing has been persisted."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class SplitMismatchError(ValidationError):
    """Manual shares do not add up to the expense total.

    `discrepancy` is total minus the sum of the shares, in cents.
    """

    def __init__(self, detail: str, discrepancy: int):
        super().__init__(detail)
        self.discrepancy = discrepancy


class ExternalServiceError(Exception):
    """A call to an outside service (email delivery) failed or is not configured."""

    status_code = 503

    def __init__(self, detail: str, service: Optional[str] = None):
        super().__init__(detail)
        self.detail = detail
        self.service = service
