"""
Error taxonomy for the handbook services.

Services raise these; ``main`` maps them to an HTTP response exactly once.
Client errors (4xx) show their detail to the caller. Server errors only ever
show the class-level ``message``; the detail stays in the logs.
"""

from typing import Optional


class HandbookError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.message
        super().__init__(self.detail)

    @property
    def public_message(self) -> str:
        if self.status_code < 500:
            return self.detail
        return self.message


class InvalidClickRequestError(HandbookError):
    """Missing or invalid click payload"""
    status_code = 400
    message = "Invalid policy ID"


class TrackingUnavailableError(HandbookError):
    """Click tables could not be read or written"""


class ExportError(HandbookError):
    message = "Error exporting policies"


class ContentUnavailableError(HandbookError):
    """Published content source cannot be reached"""


class ContentTreeError(HandbookError):
    """Published content document is malformed"""
