"""
Custom exceptions for trial file processing and export.
"""


class TrialExtractorError(Exception):
    """Base exception for extractor errors."""

    pass


class TrialParseError(TrialExtractorError):
    """Raised when an uploaded file is not valid JSON."""

    def __init__(self, file_name: str, reason: str):
        self.file_name = file_name
        self.reason = reason
        super().__init__(f"{file_name}: {reason}")


class InvalidRecordError(TrialExtractorError, TypeError):
    """Raised when a parsed document is not a JSON object."""

    pass


class ExportPreconditionError(TrialExtractorError):
    """Raised when an export is requested without any extracted data."""

    pass
