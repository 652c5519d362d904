"""Exception taxonomy for the webhook pipeline.

Every error carries the HTTP status code and the plain-text message returned
to the caller. Client errors mean the request itself was rejected; server
errors mean a well-formed report could not be processed or delivered.
"""

from typing import Optional


class WebhookError(Exception):
    """Base class for failures surfaced to the webhook caller."""

    status_code = 500
    detail = "Error processing report"

    def __init__(self, message: Optional[str] = None, *, detail: Optional[str] = None):
        super().__init__(message or self.detail)
        if detail is not None:
            self.detail = detail


class ClientRequestError(WebhookError):
    status_code = 400


class EmptyBodyError(ClientRequestError):
    detail = "Empty request body"


class InvalidJSONError(ClientRequestError):
    detail = "Invalid JSON"


class UnknownReportKindError(ClientRequestError):
    """Raised when the envelope names a report kind with no registered handler."""

    def __init__(self, kind: Optional[str]):
        self.kind = kind
        super().__init__(f"unknown report type: {kind}", detail=f"unknown report type: {kind}")


class ReportDecodeError(WebhookError):
    """Raised when a report of a known kind does not match its schema."""


class ReportPreconditionError(WebhookError):
    """Raised when a decoded report lacks structure the mapper depends on."""


class IdentityResolutionError(WebhookError):
    """Raised when the AWS account or region cannot be determined."""


class ExportError(WebhookError):
    """Raised when a batch submission to Security Hub fails.

    Batches submitted before the failing one are not rolled back, so
    ``delivered`` findings may already be present in Security Hub.
    """

    detail = "Error importing findings to Security Hub"

    def __init__(self, message: str, *, delivered: int = 0):
        self.delivered = delivered
        super().__init__(message)
