"""
Errors raised at the edges of the parsing core.

The parser and detector never raise; these cover the collaborators around
them (uploads, delimiter selection, table operations).
"""


class DSVError(Exception):
    """Base class for dsv-normalizer errors."""

    status_code = 422

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UnsupportedFileError(DSVError):
    pass


class UploadTooLargeError(DSVError):
    status_code = 413


class InvalidDelimiterError(DSVError):
    pass


class InvalidColumnError(DSVError):
    pass
