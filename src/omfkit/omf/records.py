"""
OMF Record Definitions
======================

This module defines the data structures for relocatable object module
(OMF) records: the raw record descriptor produced by the scanner and the
decoded body shapes produced by the field decoders.

Record Format
-------------
Every record has the same framing:

    Byte 0:     Record type
    Byte 1-2:   Record length (little-endian), counts payload + checksum
    Byte 3+:    Payload (length - 1 bytes)
    Last byte:  Checksum

A record length of zero marks the end of the module.

Decoded Bodies
--------------
- ModuleHeader: THEADR / LHEADR module name
- Comment: COMENT flags, class and text
- NameTable: LNAMES / LLNAMES name list
- SegmentDef: SEGDEF attributes, length and name indices
- PublicDef: PUBDEF / LPUBDEF base and public symbol entries
- LogicalData: LEDATA segment, offset and data bytes
- UnsupportedRecord: any kind with no field decoder

All bodies are frozen dataclasses holding copies of the bytes they
describe; none of them refer back into the scanned buffer.

Reference
---------
- OMF specification: "Relocatable Object Module Format (OMF) v1.1",
  Tool Interface Standard (TIS)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from omfkit.omf.catalog import RecordKind, WidthClass, name_of


# Bytes in a record header: type byte + 16-bit length
RECORD_HEADER_SIZE = 3

# Bytes in the trailing checksum
RECORD_CHECKSUM_SIZE = 1


# =============================================================================
# Raw Record
# =============================================================================

@dataclass(frozen=True)
class RawRecord:
    """
    A framed record located in the scanned buffer.

    Attributes:
        index: Position of the record in the module (0-based)
        offset: Buffer offset of the record's type byte
        type_byte: The raw type byte
        kind: Record kind resolved from the type byte
        width: Field width class resolved from the type byte
        data: Half-open payload range in the buffer (header and checksum
            excluded)
    """
    index: int
    offset: int
    type_byte: int
    kind: RecordKind
    width: WidthClass
    data: range

    @property
    def payload_length(self) -> int:
        """Number of payload bytes (record length minus checksum)."""
        return len(self.data)

    @property
    def end(self) -> int:
        """Buffer offset just past this record, checksum included."""
        return self.data.stop + RECORD_CHECKSUM_SIZE

    @property
    def name(self) -> str:
        """Listing name of the record kind."""
        return name_of(self.kind)

    def payload(self, buffer: bytes) -> bytes:
        """Copy this record's payload bytes out of the buffer."""
        return bytes(buffer[self.data.start:self.data.stop])


# =============================================================================
# Segment Attributes
# =============================================================================

class Alignment(Enum):
    """SEGDEF alignment, bits 7-5 of the attribute byte."""
    ABSOLUTE = 0
    BYTE = 1
    WORD = 2
    PARAGRAPH = 3
    PAGE = 4
    DWORD = 5
    UNSUPPORTED = 6
    UNDEFINED = 7

    @classmethod
    def from_attributes(cls, attributes: int) -> "Alignment":
        return cls((attributes >> 5) & 0x07)

    def get_description(self) -> str:
        descriptions = {
            Alignment.ABSOLUTE: "absolute",
            Alignment.BYTE: "byte",
            Alignment.WORD: "word",
            Alignment.PARAGRAPH: "paragraph",
            Alignment.PAGE: "page",
            Alignment.DWORD: "double word",
            Alignment.UNSUPPORTED: "unsupported",
        }
        return descriptions.get(self, "undefined")


class Combination(Enum):
    """
    SEGDEF combination, bits 4-2 of the attribute byte.

    Several bit patterns share a meaning (1 and 3 are reserved; 2, 4 and 7
    all combine as public), so members are looked up through a table
    rather than by value.
    """
    PRIVATE = "private"
    RESERVED = "reserved"
    PUBLIC = "public"
    STACK = "stack"
    COMMON = "common"
    UNDEFINED = "undefined"

    @classmethod
    def from_attributes(cls, attributes: int) -> "Combination":
        return _COMBINATIONS.get((attributes >> 2) & 0x07, cls.UNDEFINED)

    def get_description(self) -> str:
        return self.value


_COMBINATIONS = {
    0: Combination.PRIVATE,
    1: Combination.RESERVED,
    2: Combination.PUBLIC,
    3: Combination.RESERVED,
    4: Combination.PUBLIC,
    5: Combination.STACK,
    6: Combination.COMMON,
    7: Combination.PUBLIC,
}


# =============================================================================
# Decoded Bodies
# =============================================================================

@dataclass(frozen=True)
class ModuleHeader:
    """
    THEADR / LHEADR body.

    Structure:
        Offset  Size    Description
        ------  ----    -----------
        0       1       Name length L
        1       L       Module name
    """
    kind: RecordKind
    name: str


@dataclass(frozen=True)
class Comment:
    """
    COMENT body.

    Structure:
        Offset  Size    Description
        ------  ----    -----------
        0       1       Comment type (bit 7 no purge, bit 6 no list)
        1       1       Comment class
        2       n       Commentary text
    """
    no_purge: bool
    no_list: bool
    comment_class: int
    text: str

    kind: RecordKind = RecordKind.COMENT


@dataclass(frozen=True)
class NameTable:
    """LNAMES / LLNAMES body: a run of Pascal-style strings."""
    kind: RecordKind
    names: tuple[str, ...] = ()


@dataclass(frozen=True)
class SegmentFrame:
    """Frame number and offset of an absolute segment."""
    number: int
    offset: int


@dataclass(frozen=True)
class SegmentDef:
    """
    SEGDEF body.

    Structure (W = 2 narrow / 4 wide, I = 1 narrow / 2 wide):
        Offset  Size    Description
        ------  ----    -----------
        0       1       Attributes (A:3 C:3 B:1 P:1)
        [1      2       Frame number      (absolute alignment only)]
        [3      1       Frame offset      (absolute alignment only)]
        n       W       Segment length
        n+W     I       Segment name index
        ...     I       Class name index
        ...     I       Overlay name index
    """
    alignment: Alignment
    combination: Combination
    big: bool
    use32: bool
    frame: Optional[SegmentFrame]
    length: int
    segment_name_index: int
    class_name_index: int
    overlay_name_index: int

    kind: RecordKind = RecordKind.SEGDEF


@dataclass(frozen=True)
class PublicEntry:
    """One public symbol of a PUBDEF / LPUBDEF record."""
    name: str
    offset: int
    type_index: int


@dataclass(frozen=True)
class PublicDef:
    """
    PUBDEF / LPUBDEF body.

    Structure (W = 2 narrow / 4 wide, I = 1 narrow / 2 wide):
        Offset  Size    Description
        ------  ----    -----------
        0       I       Base group index
        I       I       Base segment index
        [2I     2       Base frame        (base segment index 0 only)]
        then repeated until the payload ends:
                1+L     Public name (Pascal string)
                W       Public offset
                I       Type index
    """
    kind: RecordKind
    base_group_index: int
    base_segment_index: int
    base_frame: Optional[int]
    entries: tuple[PublicEntry, ...] = ()


@dataclass(frozen=True)
class LogicalData:
    """
    LEDATA body.

    Structure (W = 2 narrow / 4 wide, I = 1 narrow / 2 wide):
        Offset  Size    Description
        ------  ----    -----------
        0       I       Segment index
        I       W       Enumerated data offset
        I+W     n       Data bytes
    """
    segment_index: int
    data_offset: int
    payload: bytes = b""

    kind: RecordKind = RecordKind.LEDATA


@dataclass(frozen=True)
class UnsupportedRecord:
    """Marker for a record kind that has no field decoder."""
    kind: RecordKind


RecordBody = Union[
    ModuleHeader,
    Comment,
    NameTable,
    SegmentDef,
    PublicDef,
    LogicalData,
    UnsupportedRecord,
]
