"""
Ticket Checker Exceptions
=========================

Error taxonomy for the checking run.

Fatal (stop the run before any ticket is touched):
- MalformedDrawResult, DrawSourceError, ConfigurationError, ReceiptDirectoryError

Recovered (recorded in the batch summary, never raised past the aggregator):
- RecognitionFailure (one image), InvalidTicketShape (one ticket)
"""

from typing import Optional


class TicketCheckerError(Exception):
    """Base class for all ticket checker errors."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.component = component
        self.original_error = original_error
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        msg = self.message
        if self.component:
            msg += f" (component: {self.component})"
        if self.original_error:
            msg += f" [{type(self.original_error).__name__}: {self.original_error}]"
        return msg


class MalformedDrawResult(TicketCheckerError):
    """The drawing block could not be turned into a valid DrawResult."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, component="draw_parser", original_error=original_error)


class DrawSourceError(TicketCheckerError):
    """The results page could not be fetched or had no drawing block."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message, component="draw_source", original_error=original_error)


class RecognitionFailure(TicketCheckerError):
    """Ticket numbers could not be read from one receipt image."""

    def __init__(self, image_id: str, reason: str, original_error: Optional[Exception] = None):
        self.image_id = image_id
        self.reason = reason
        super().__init__(f"{image_id}: {reason}", component="recognition", original_error=original_error)


class InvalidTicketShape(TicketCheckerError):
    """A recognized ticket failed field validation."""

    def __init__(self, line_id: str, reason: str):
        self.line_id = line_id
        self.reason = reason
        super().__init__(f"Ticket {line_id}: {reason}", component="ticket_validation")


class ConfigurationError(TicketCheckerError):
    """Missing credential or unusable configuration."""

    def __init__(self, message: str):
        super().__init__(message, component="config")


class ReceiptDirectoryError(TicketCheckerError):
    """The receipts directory does not exist or is not a directory."""

    def __init__(self, message: str):
        super().__init__(message, component="image_source")
