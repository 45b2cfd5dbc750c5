"""
OMF Object Module Handling
==========================

This module provides support for reading relocatable object modules in
the Object Module Format (OMF) used by 16/32-bit x86 linkers.

This module provides:
- **scan / ObjectModule**: Frame a buffer into raw records
- **Record catalog**: Type byte to record kind mapping and filters
- **Field decoders**: Structured bodies for the supported record kinds

Quick Start
-----------
Listing the records of an object file:

    >>> from omfkit.omf import ObjectModule
    >>> module = ObjectModule.from_file("hello.obj")
    >>> for record in module.records:
    ...     print(f"{record.index:>3} {record.name:>7} {record.payload_length:04x}")

Decoding selected records:

    >>> from omfkit.omf import parse_filter
    >>> for record, body in module.iter_bodies(parse_filter("THEADR,LNAMES")):
    ...     print(body)

Supported Records
-----------------
THEADR, LHEADR, COMENT, LNAMES, LLNAMES, SEGDEF, PUBDEF, LPUBDEF and
LEDATA are decoded. Every other kind decodes to UnsupportedRecord.
"""

# =============================================================================
# Public API Exports
# =============================================================================

# Record catalog
from omfkit.omf.catalog import (
    RecordKind,
    WidthClass,
    WILDCARD,
    resolve,
    kind_of,
    name_of,
    kind_of_name,
    all_kinds,
    expand_filter,
    parse_filter,
)

# Record data structures
from omfkit.omf.records import (
    RECORD_HEADER_SIZE,
    RawRecord,
    Alignment,
    Combination,
    ModuleHeader,
    Comment,
    NameTable,
    SegmentFrame,
    SegmentDef,
    PublicEntry,
    PublicDef,
    LogicalData,
    UnsupportedRecord,
    RecordBody,
)

# Field decoders
from omfkit.omf.decoders import (
    DECODERS,
    PayloadCursor,
    decode_text,
    decode_record,
    is_supported,
)

# Scanner
from omfkit.omf.scanner import (
    ObjectModule,
    scan,
    scan_file,
)

__all__ = [
    # Catalog
    "RecordKind",
    "WidthClass",
    "WILDCARD",
    "resolve",
    "kind_of",
    "name_of",
    "kind_of_name",
    "all_kinds",
    "expand_filter",
    "parse_filter",
    # Records
    "RECORD_HEADER_SIZE",
    "RawRecord",
    "Alignment",
    "Combination",
    "ModuleHeader",
    "Comment",
    "NameTable",
    "SegmentFrame",
    "SegmentDef",
    "PublicEntry",
    "PublicDef",
    "LogicalData",
    "UnsupportedRecord",
    "RecordBody",
    # Decoders
    "DECODERS",
    "PayloadCursor",
    "decode_text",
    "decode_record",
    "is_supported",
    # Scanner
    "ObjectModule",
    "scan",
    "scan_file",
]
