"""
omfkit - Object Module Format Inspection Toolkit
================================================

This package decodes relocatable object modules in the Object Module
Format (OMF) produced by 16/32-bit x86 compilers and assemblers, and
renders selected records as readable field listings.

Main Components
---------------
- **omf**: Record catalog, scanner and field decoders
- **cli**: The omfdump command-line tool

Quick Start
-----------
Scan an object file:
    >>> from omfkit import ObjectModule
    >>> module = ObjectModule.from_file("hello.obj")
    >>> print(len(module.records))

Or use the command-line tool:
    $ omfdump hello.obj
    $ omfdump --headers hello.obj
    $ omfdump -r SEGDEF,PUBDEF hello.obj
"""

__version__ = "0.1.0"

# =============================================================================
# Public API Exports
# =============================================================================

from omfkit.errors import (
    OMFError,
    ObjectFileReadError,
    OMFFormatError,
    TruncatedRecordError,
    UnknownFilterKindError,
)

from omfkit.omf import (
    RecordKind,
    WidthClass,
    RawRecord,
    ObjectModule,
    scan,
    decode_record,
    parse_filter,
)

__all__ = [
    "__version__",
    # Errors
    "OMFError",
    "ObjectFileReadError",
    "OMFFormatError",
    "TruncatedRecordError",
    "UnknownFilterKindError",
    # OMF
    "RecordKind",
    "WidthClass",
    "RawRecord",
    "ObjectModule",
    "scan",
    "decode_record",
    "parse_filter",
]
