"""
Custom exceptions for the Gmail wrappers.

Transport failures raised by ``googleapiclient`` are not wrapped; they reach
the caller unchanged. The exceptions below cover the conditions this library
detects on its own: bad input, missing preconditions and unparseable dates.
"""


class GmailError(Exception):
    """Base exception class for library errors."""

    def __init__(self, message: str = "Gmail error occurred", original_error=None):
        self.message = message
        self.original_error = original_error
        super().__init__(self.message)


class PreconditionError(GmailError):
    """Raised when an operation needs state that is not there yet."""

    def __init__(self, message: str = "Operation precondition not met", original_error=None):
        super().__init__(message, original_error)


class AttachmentNotFoundError(GmailError):
    """Raised when a message does not carry the requested attachment."""

    def __init__(self, attachment_id: str = None):
        message = (
            f"Attachment not found: {attachment_id}" if attachment_id else "Attachment not found"
        )
        super().__init__(message)
        self.attachment_id = attachment_id


class InvalidRecipientError(ValueError):
    """Raised when a recipient list contains an invalid email address."""


class InvalidEmbedError(ValueError):
    """Raised when an inline embed is not given as a (path, name) pair."""


class DateParseError(ValueError):
    """Raised when a date input or a Date header cannot be parsed."""

    def __init__(self, value=None):
        self.value = value
        super().__init__(f"Unable to parse date: {value!r}")
