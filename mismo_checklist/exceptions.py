"""
Exceptions raised by the checklist engine.
"""


class ChecklistError(Exception):
    """Base class for checklist engine errors."""


class MISMOParseError(ChecklistError, ValueError):
    """
    Raised when the supplied XML is not well-formed.

    The underlying parser message is kept verbatim in ``detail``.
    """

    def __init__(self, detail: str):
        super().__init__(f"Unable to parse MISMO XML: {detail}")
        self.detail = detail


class UnsupportedFileError(ChecklistError):
    """Raised when an uploaded file has a disallowed extension or size."""

    def __init__(self, message: str, status_code: int = 415):
        super().__init__(message)
        self.status_code = status_code
