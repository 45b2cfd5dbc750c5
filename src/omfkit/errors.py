"""
omfkit Error Hierarchy
======================

This module defines the exception hierarchy for omfkit. All exceptions
inherit from OMFError, allowing callers to catch every toolkit error with
a single except clause if desired.

Exception Hierarchy
-------------------
OMFError (base)
├── ObjectFileReadError - object file cannot be opened or read
├── OMFFormatError - malformed object module
│   └── TruncatedRecordError - record header or body runs past the buffer
└── UnknownFilterKindError - record filter names no known kind

A record kind without a field decoder is not an error: the decoders
return an UnsupportedRecord marker for it and processing continues.
"""

from pathlib import Path
from typing import Optional, Union


# =============================================================================
# Base Exception Class
# =============================================================================

class OMFError(Exception):
    """
    Base exception for all omfkit errors.

        try:
            module = ObjectModule.from_file("hello.obj")
        except OMFError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# I/O Exceptions
# =============================================================================

class ObjectFileReadError(OMFError):
    """
    The object file could not be opened or read.

    Attributes:
        path: The file that failed
        reason: The underlying OS error message
    """

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"cannot read '{self.path}': {reason}")


# =============================================================================
# Format Exceptions
# =============================================================================

class OMFFormatError(OMFError):
    """
    Invalid object module format.

    Raised when the byte stream cannot be framed into records or a record
    payload is too short for the fields its kind requires.
    """
    pass


class TruncatedRecordError(OMFFormatError):
    """
    A record header or its declared body extends past the end of the buffer.

    The scanner stops at the failing record. Records framed before it are
    kept on the exception so callers can still report them.

    Attributes:
        offset: Buffer offset at which the read would have overrun
        records: Records successfully scanned before the failure
        detail: Optional description of what was being read
    """

    def __init__(
        self,
        offset: int,
        records: tuple = (),
        detail: Optional[str] = None,
    ):
        self.offset = offset
        self.records = tuple(records)
        self.detail = detail
        message = f"truncated record at offset 0x{offset:04X}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


# =============================================================================
# Filter Exceptions
# =============================================================================

class UnknownFilterKindError(OMFError):
    """
    A record filter token does not name any kind in the catalog.

    Attributes:
        token: The offending filter token, exactly as given
    """

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"unknown record kind '{token}'")
