"""
OMF Record Scanner
==================

This module splits an object module buffer into its records.

scan()
------
The scan() function walks the buffer once, from offset 0, reading one
3-byte header per record (type byte + little-endian length) and emitting
a RawRecord that locates the payload. It never reads past the end of the
buffer: a header or record body that would overrun it raises
TruncatedRecordError, which carries the records framed so far.

ObjectModule
------------
The ObjectModule class wraps a buffer and its record index and offers
query methods to select and decode records by kind.

Usage Examples
--------------
Listing records:
    >>> from omfkit.omf import ObjectModule
    >>> module = ObjectModule.from_file("hello.obj")
    >>> for record in module.records:
    ...     print(record.index, record.name, record.payload_length)

Decoding comments:
    >>> for body in module.iter_bodies([RecordKind.COMENT]):
    ...     print(body.text)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union
import logging

from omfkit.errors import ObjectFileReadError, TruncatedRecordError
from omfkit.omf.catalog import RecordKind, resolve
from omfkit.omf.decoders import decode_record
from omfkit.omf.records import (
    RECORD_HEADER_SIZE,
    RawRecord,
    RecordBody,
)

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Scanner
# =============================================================================

def scan(buffer: bytes) -> tuple[RawRecord, ...]:
    """
    Frame a buffer into an ordered tuple of raw records.

    Scanning stops at a record whose length field is zero (the end of
    module marker), at the exact end of the buffer, or at a tail made up
    only of zero bytes (block padding after the last record).

    Args:
        buffer: The complete object module contents

    Returns:
        Tuple of RawRecord in file order

    Raises:
        TruncatedRecordError: If a record header or its declared body
            extends past the end of the buffer

    Example:
        >>> records = scan(bytes([0x80, 0x02, 0x00, 0x00, 0x7E, 0x8A, 0x00, 0x00]))
        >>> [r.name for r in records]
        ['THEADR']
    """
    records: list[RawRecord] = []
    size = len(buffer)
    offset = 0

    while offset < size:
        if not any(buffer[offset:offset + RECORD_HEADER_SIZE]) and not any(buffer[offset:]):
            logger.debug(f"Zero padding at offset 0x{offset:04X}, end of module")
            break

        if offset + RECORD_HEADER_SIZE > size:
            logger.warning(f"Truncated record header at offset 0x{offset:04X}")
            raise TruncatedRecordError(
                offset, records,
                f"header needs {RECORD_HEADER_SIZE} bytes, {size - offset} left",
            )

        type_byte = buffer[offset]
        length = buffer[offset + 1] | (buffer[offset + 2] << 8)

        if length == 0:
            logger.debug(f"End of module marker at offset 0x{offset:04X}")
            break

        start = offset + RECORD_HEADER_SIZE
        if start + length > size:
            logger.warning(
                f"Truncated record type 0x{type_byte:02X} at offset 0x{offset:04X}: "
                f"declares {length} bytes, {size - start} left"
            )
            raise TruncatedRecordError(
                offset, records,
                f"declared length {length} exceeds the {size - start} bytes left",
            )

        kind, width = resolve(type_byte)
        record = RawRecord(
            index=len(records),
            offset=offset,
            type_byte=type_byte,
            kind=kind,
            width=width,
            data=range(start, start + length - 1),
        )
        records.append(record)
        logger.debug(
            f"Record {record.index}: {record.name} (0x{type_byte:02X}) "
            f"at 0x{offset:04X}, {record.payload_length} payload bytes"
        )

        offset = start + length

    return tuple(records)


# =============================================================================
# Object Module
# =============================================================================

@dataclass
class ObjectModule:
    """
    An object module buffer together with its record index.

    Scanning happens at construction. A truncated module still constructs:
    the records framed before the failure are kept and the error is stored
    in `truncation` so the caller can report both.

    Attributes:
        data: The raw object module bytes
        records: Records framed from the buffer, in file order
        truncation: The scan failure, if the module is truncated

    Example:
        >>> module = ObjectModule.from_bytes(data)
        >>> module.raise_for_truncation()
        >>> print(len(module.records))
    """
    # Raw object module data (not exposed in repr)
    data: bytes = field(repr=False)

    records: tuple[RawRecord, ...] = field(default=(), init=False)

    truncation: Optional[TruncatedRecordError] = field(default=None, init=False)

    def __post_init__(self) -> None:
        """Scan the buffer after initialization."""
        try:
            self.records = scan(self.data)
        except TruncatedRecordError as e:
            self.records = e.records
            self.truncation = e

    @classmethod
    def from_bytes(cls, data: bytes) -> "ObjectModule":
        """Create an ObjectModule from raw bytes."""
        return cls(data=bytes(data))

    @classmethod
    def from_file(cls, filepath: Union[str, Path]) -> "ObjectModule":
        """
        Read an object file from disk and scan it.

        The whole file is read before scanning begins.

        Args:
            filepath: Path to the object file

        Returns:
            An ObjectModule with its record index

        Raises:
            ObjectFileReadError: If the file cannot be opened or read
        """
        filepath = Path(filepath)
        try:
            data = filepath.read_bytes()
        except OSError as e:
            raise ObjectFileReadError(filepath, e.strerror or str(e)) from e
        logger.debug(f"Read {len(data)} bytes from {filepath}")
        return cls(data=data)

    @property
    def is_truncated(self) -> bool:
        return self.truncation is not None

    def raise_for_truncation(self) -> None:
        """Re-raise the scan failure, if any."""
        if self.truncation is not None:
            raise self.truncation

    # =========================================================================
    # Public Query Methods
    # =========================================================================

    def select(self, kinds: Iterable[RecordKind]) -> list[RawRecord]:
        """
        Get the records whose kind is in `kinds`, in file order.

        Args:
            kinds: Record kinds to keep

        Returns:
            List of matching RawRecord
        """
        wanted = set(kinds)
        return [record for record in self.records if record.kind in wanted]

    def decode(self, record: RawRecord) -> RecordBody:
        """Decode one record of this module into its body."""
        return decode_record(record, self.data)

    def iter_bodies(
        self, kinds: Iterable[RecordKind]
    ) -> Iterator[tuple[RawRecord, RecordBody]]:
        """
        Iterate over (record, body) pairs for the selected kinds.

        Bodies are decoded on demand and not cached.

        Yields:
            (RawRecord, decoded body) tuples in file order
        """
        for record in self.select(kinds):
            yield record, self.decode(record)

    def get_info(self) -> dict:
        """
        Get summary information about the module.

        Returns:
            Dictionary with record counts per kind
        """
        counts: dict[str, int] = {}
        for record in self.records:
            counts[record.name] = counts.get(record.name, 0) + 1

        return {
            "size": len(self.data),
            "total_records": len(self.records),
            "kinds": counts,
            "truncated_at": self.truncation.offset if self.truncation else None,
        }


# =============================================================================
# Convenience Functions
# =============================================================================

def scan_file(filepath: Union[str, Path]) -> ObjectModule:
    """
    Read and scan an object file from disk.

    This is a convenience function that creates an ObjectModule.

    Raises:
        ObjectFileReadError: If the file cannot be opened or read
    """
    return ObjectModule.from_file(filepath)
