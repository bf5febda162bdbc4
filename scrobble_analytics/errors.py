"""Exception taxonomy for scrobble ingestion and analytics"""
from pathlib import Path
from typing import Union


class ScrobbleAnalyticsError(Exception):
    """Base class for errors raised by the ingestion and build pipelines"""


class InputError(ScrobbleAnalyticsError):
    """The input handed to an ingestion run cannot be used"""


class UsageError(InputError):
    """A required argument was not supplied"""


class InputFormatError(InputError):
    """The input file is not valid JSON or its top level is not an array"""


class StoreCorruptionError(ScrobbleAnalyticsError):
    """A line of the persisted scrobble log does not decode into a record.

    The log is written only by this package, so a bad line means tampering
    or a bug. It is never skipped.
    """

    def __init__(self, path: Union[str, Path], line_number: int, reason: str = ""):
        self.path = Path(path)
        self.line_number = line_number
        self.reason = reason
        message = f"Invalid NDJSON at line {line_number} of {self.path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
