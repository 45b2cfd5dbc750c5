"""
OMF Field Decoders
==================

This module decodes the payload of a raw record into a structured body.
There is one decoder per supported record layout; decode_record() picks
the decoder from the DECODERS table by record kind and returns an
UnsupportedRecord marker for kinds without one.

Field Widths
------------
All multi-byte integers are little-endian. SEGDEF, PUBDEF and LEDATA
records size their index and length fields from the record's width
class:

    Width    Index field    Length/offset field
    -----    -----------    -------------------
    NARROW   1 byte         2 bytes
    WIDE     2 bytes        4 bytes

Bounds
------
Every read goes through a PayloadCursor limited to the record payload. A
payload too short for its fields raises TruncatedRecordError naming the
buffer offset of the overrun; no decoder ever indexes past its record.

Text
----
Names and comment text are untrusted bytes. decode_text() decodes them as
UTF-8 and substitutes U+FFFD for invalid sequences.
"""

from types import MappingProxyType
from typing import Callable
import logging

from omfkit.errors import TruncatedRecordError
from omfkit.omf.catalog import RecordKind
from omfkit.omf.records import (
    Alignment,
    Combination,
    Comment,
    LogicalData,
    ModuleHeader,
    NameTable,
    PublicDef,
    PublicEntry,
    RawRecord,
    RecordBody,
    SegmentDef,
    SegmentFrame,
    UnsupportedRecord,
)

# Logger for this module
logger = logging.getLogger(__name__)

# COMENT type byte flags
COMMENT_NO_PURGE = 0x80
COMMENT_NO_LIST = 0x40

# SEGDEF attribute byte flags
SEGMENT_BIG = 0x02
SEGMENT_USE32 = 0x01


def decode_text(raw: bytes) -> str:
    """Decode untrusted bytes as text, replacing invalid sequences."""
    return bytes(raw).decode("utf-8", errors="replace")


# =============================================================================
# Payload Cursor
# =============================================================================

class PayloadCursor:
    """
    Sequential little-endian reader over one record's payload.

    Attributes:
        position: Absolute buffer offset of the next byte to read
        end: Absolute buffer offset just past the payload
    """

    def __init__(self, record: RawRecord, buffer: bytes):
        self.record = record
        self.buffer = buffer
        self.position = record.data.start
        self.end = record.data.stop

    @property
    def remaining(self) -> int:
        return self.end - self.position

    def at_end(self) -> bool:
        return self.position >= self.end

    def _take(self, count: int, what: str) -> bytes:
        if count > self.remaining:
            raise TruncatedRecordError(
                self.position,
                detail=(
                    f"{self.record.name} {what} needs {count} bytes, "
                    f"{self.remaining} left in payload"
                ),
            )
        chunk = bytes(self.buffer[self.position:self.position + count])
        self.position += count
        return chunk

    def read_byte(self, what: str = "field") -> int:
        return self._take(1, what)[0]

    def read_int(self, size: int, what: str = "field") -> int:
        """Read a little-endian unsigned integer of `size` bytes."""
        return int.from_bytes(self._take(size, what), "little")

    def read_index(self, what: str = "index") -> int:
        return self.read_int(self.record.width.index_size, what)

    def read_length(self, what: str = "length") -> int:
        return self.read_int(self.record.width.length_size, what)

    def read_name(self, what: str = "name") -> str:
        """Read a Pascal-style string (length byte followed by text)."""
        length = self.read_byte(what)
        return decode_text(self._take(length, what))

    def read_rest(self) -> bytes:
        return self._take(self.remaining, "data")


# =============================================================================
# Decoders
# =============================================================================

def decode_module_header(record: RawRecord, buffer: bytes) -> ModuleHeader:
    """
    Decode a THEADR / LHEADR record.

    The name length byte is authoritative. The name is read up to the end
    of the record (checksum byte included) and never beyond it.
    """
    cursor = PayloadCursor(record, buffer)
    length = cursor.read_byte("name length")
    start = cursor.position
    stop = min(start + length, record.end, len(buffer))
    return ModuleHeader(kind=record.kind, name=decode_text(buffer[start:stop]))


def decode_comment(record: RawRecord, buffer: bytes) -> Comment:
    """Decode a COMENT record."""
    cursor = PayloadCursor(record, buffer)
    flags = cursor.read_byte("comment type")
    comment_class = cursor.read_byte("comment class")
    return Comment(
        no_purge=bool(flags & COMMENT_NO_PURGE),
        no_list=bool(flags & COMMENT_NO_LIST),
        comment_class=comment_class,
        text=decode_text(cursor.read_rest()),
    )


def decode_name_table(record: RawRecord, buffer: bytes) -> NameTable:
    """Decode an LNAMES / LLNAMES record. An empty table is valid."""
    cursor = PayloadCursor(record, buffer)
    names = []
    while not cursor.at_end():
        names.append(cursor.read_name())
    return NameTable(kind=record.kind, names=tuple(names))


def decode_segment_def(record: RawRecord, buffer: bytes) -> SegmentDef:
    """
    Decode a SEGDEF record.

    Attribute byte layout:
        Bits 7-5: Alignment
        Bits 4-2: Combination
        Bit 1:    Big (segment length is exactly 64K / 4G)
        Bit 0:    USE32
    """
    cursor = PayloadCursor(record, buffer)
    attributes = cursor.read_byte("attributes")
    alignment = Alignment.from_attributes(attributes)

    frame = None
    if alignment is Alignment.ABSOLUTE:
        frame = SegmentFrame(
            number=cursor.read_int(2, "frame number"),
            offset=cursor.read_byte("frame offset"),
        )

    return SegmentDef(
        alignment=alignment,
        combination=Combination.from_attributes(attributes),
        big=bool(attributes & SEGMENT_BIG),
        use32=bool(attributes & SEGMENT_USE32),
        frame=frame,
        length=cursor.read_length("segment length"),
        segment_name_index=cursor.read_index("segment name index"),
        class_name_index=cursor.read_index("class name index"),
        overlay_name_index=cursor.read_index("overlay name index"),
    )


def decode_public_def(record: RawRecord, buffer: bytes) -> PublicDef:
    """
    Decode a PUBDEF / LPUBDEF record.

    A base segment index of 0 means the publics are absolute and a 16-bit
    base frame follows the indices.
    """
    cursor = PayloadCursor(record, buffer)
    base_group_index = cursor.read_index("base group index")
    base_segment_index = cursor.read_index("base segment index")

    base_frame = None
    if base_segment_index == 0:
        base_frame = cursor.read_int(2, "base frame")

    entries = []
    while not cursor.at_end():
        entries.append(PublicEntry(
            name=cursor.read_name("public name"),
            offset=cursor.read_length("public offset"),
            type_index=cursor.read_index("type index"),
        ))

    return PublicDef(
        kind=record.kind,
        base_group_index=base_group_index,
        base_segment_index=base_segment_index,
        base_frame=base_frame,
        entries=tuple(entries),
    )


def decode_logical_data(record: RawRecord, buffer: bytes) -> LogicalData:
    """Decode an LEDATA record, keeping every data byte."""
    cursor = PayloadCursor(record, buffer)
    return LogicalData(
        segment_index=cursor.read_index("segment index"),
        data_offset=cursor.read_length("data offset"),
        payload=cursor.read_rest(),
    )


# =============================================================================
# Dispatch
# =============================================================================

Decoder = Callable[[RawRecord, bytes], RecordBody]

DECODERS: "MappingProxyType[RecordKind, Decoder]" = MappingProxyType({
    RecordKind.THEADR: decode_module_header,
    RecordKind.LHEADR: decode_module_header,
    RecordKind.COMENT: decode_comment,
    RecordKind.LNAMES: decode_name_table,
    RecordKind.LLNAMES: decode_name_table,
    RecordKind.SEGDEF: decode_segment_def,
    RecordKind.PUBDEF: decode_public_def,
    RecordKind.LPUBDEF: decode_public_def,
    RecordKind.LEDATA: decode_logical_data,
})


def is_supported(kind: RecordKind) -> bool:
    """Check if a record kind has a field decoder."""
    return kind in DECODERS


def decode_record(record: RawRecord, buffer: bytes) -> RecordBody:
    """
    Decode a raw record into its body.

    Args:
        record: A record framed by scan() from `buffer`
        buffer: The buffer the record was scanned from

    Returns:
        The decoded body, or UnsupportedRecord if the kind has no decoder

    Raises:
        TruncatedRecordError: If the payload is too short for its fields
    """
    decoder = DECODERS.get(record.kind)
    if decoder is None:
        logger.debug(f"No decoder for {record.name} record {record.index}")
        return UnsupportedRecord(kind=record.kind)
    return decoder(record, buffer)
