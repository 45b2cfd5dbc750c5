"""
OMF Record Type Catalog
=======================

This module maps the one-byte record type codes of a relocatable object
module to symbolic record kinds, and resolves the field width class that
goes with each code.

Record Type Codes
-----------------
Most record kinds own a pair of adjacent codes. The even code is the
original 16-bit form, the odd code the 32-bit form of the same record:

    $80       THEADR    translator header
    $82       LHEADR    library module header
    $88       COMENT    comment
    $8A/$8B   MODEND    module end
    $8C       EXTDEF    external names
    $90/$91   PUBDEF    public names
    $94/$95   LINNUM    line numbers
    $96       LNAMES    list of names
    $98/$99   SEGDEF    segment definition
    $9A       GRPDEF    group definition
    $9C/$9D   FIXUPP    fixups
    $A0/$A1   LEDATA    logical enumerated data
    $A2/$A3   LIDATA    logical iterated data
    ...
    $F0/$F1   LIBHEAD / LIBEND  library header and trailer

Any other code is reported as UNKNOWN (displayed as "UNKNWN").

Width Class
-----------
Index and length fields inside SEGDEF, PUBDEF and LEDATA records are
narrow (1-byte index, 2-byte length) when the type byte is even and wide
(2-byte index, 4-byte length) when it is odd. The width is resolved here,
together with the kind, so the scanner never has to look at the type
byte again.

Filters
-------
A record filter is a list of kind names. The token "*" stands for every
known kind in catalog order:

    >>> expand_filter(["COMENT", "*"])[:3]
    (<RecordKind.COMENT: 'COMENT'>, <RecordKind.THEADR: 'THEADR'>, <RecordKind.LHEADR: 'LHEADR'>)
"""

from enum import Enum
from types import MappingProxyType
from typing import Iterable, Union

from omfkit.errors import UnknownFilterKindError


# =============================================================================
# Enumerations
# =============================================================================

class RecordKind(Enum):
    """
    Symbolic record kinds.

    The value of each member is the name printed in listings and accepted
    by record filters. Declaration order is the catalog order used to
    expand the "*" filter.
    """
    THEADR = "THEADR"
    LHEADR = "LHEADR"
    COMENT = "COMENT"
    MODEND = "MODEND"
    EXTDEF = "EXTDEF"
    PUBDEF = "PUBDEF"
    LINNUM = "LINNUM"
    LNAMES = "LNAMES"
    SEGDEF = "SEGDEF"
    GRPDEF = "GRPDEF"
    FIXUPP = "FIXUPP"
    LEDATA = "LEDATA"
    LIDATA = "LIDATA"
    COMDEF = "COMDEF"
    BAKPAT = "BAKPAT"
    LEXTDEF = "LEXTDEF"
    LPUBDEF = "LPUBDEF"
    LCOMDEF = "LCOMDEF"
    CEXTDEF = "CEXTDEF"
    COMDAT = "COMDAT"
    LINSYM = "LINSYM"
    ALIAS = "ALIAS"
    NBKPAT = "NBKPAT"
    LLNAMES = "LLNAMES"
    VERNUM = "VERNUM"
    VENDEXT = "VENDEXT"
    LIBHEAD = "LIBHEAD"
    LIBEND = "LIBEND"
    UNKNOWN = "UNKNWN"


class WidthClass(Enum):
    """
    Field width class of a record, selected by the parity of its type byte.

    Attributes:
        index_size: Bytes in an index field (1 narrow, 2 wide)
        length_size: Bytes in a length or offset field (2 narrow, 4 wide)
    """
    NARROW = 2
    WIDE = 4

    @classmethod
    def from_type_byte(cls, type_byte: int) -> "WidthClass":
        """Odd type bytes select the wide (32-bit) record form."""
        return cls.WIDE if type_byte & 0x01 else cls.NARROW

    @property
    def length_size(self) -> int:
        return self.value

    @property
    def index_size(self) -> int:
        return self.value // 2


# =============================================================================
# Code Table
# =============================================================================

_CODES: dict[int, RecordKind] = {
    0x80: RecordKind.THEADR,
    0x82: RecordKind.LHEADR,
    0x88: RecordKind.COMENT,
    0x8A: RecordKind.MODEND,
    0x8B: RecordKind.MODEND,
    0x8C: RecordKind.EXTDEF,
    0x90: RecordKind.PUBDEF,
    0x91: RecordKind.PUBDEF,
    0x94: RecordKind.LINNUM,
    0x95: RecordKind.LINNUM,
    0x96: RecordKind.LNAMES,
    0x98: RecordKind.SEGDEF,
    0x99: RecordKind.SEGDEF,
    0x9A: RecordKind.GRPDEF,
    0x9C: RecordKind.FIXUPP,
    0x9D: RecordKind.FIXUPP,
    0xA0: RecordKind.LEDATA,
    0xA1: RecordKind.LEDATA,
    0xA2: RecordKind.LIDATA,
    0xA3: RecordKind.LIDATA,
    0xB0: RecordKind.COMDEF,
    0xB2: RecordKind.BAKPAT,
    0xB3: RecordKind.BAKPAT,
    0xB4: RecordKind.LEXTDEF,
    0xB6: RecordKind.LPUBDEF,
    0xB7: RecordKind.LPUBDEF,
    0xB8: RecordKind.LCOMDEF,
    0xBC: RecordKind.CEXTDEF,
    0xC2: RecordKind.COMDAT,
    0xC3: RecordKind.COMDAT,
    0xC4: RecordKind.LINSYM,
    0xC5: RecordKind.LINSYM,
    0xC6: RecordKind.ALIAS,
    0xC8: RecordKind.NBKPAT,
    0xC9: RecordKind.NBKPAT,
    0xCA: RecordKind.LLNAMES,
    0xCC: RecordKind.VERNUM,
    0xCE: RecordKind.VENDEXT,
    0xF0: RecordKind.LIBHEAD,
    0xF1: RecordKind.LIBEND,
}

# Every byte value resolved once at import time; read-only afterwards.
TYPE_TABLE = MappingProxyType({
    code: (_CODES.get(code, RecordKind.UNKNOWN), WidthClass.from_type_byte(code))
    for code in range(0x100)
})

_BY_NAME = MappingProxyType({kind.value: kind for kind in RecordKind})

_ALL_KINDS = tuple(kind for kind in RecordKind if kind is not RecordKind.UNKNOWN)

WILDCARD = "*"


# =============================================================================
# Lookups
# =============================================================================

def resolve(type_byte: int) -> tuple[RecordKind, WidthClass]:
    """
    Resolve a raw type byte to its record kind and width class.

    Args:
        type_byte: The first byte of a record header (0x00-0xFF)

    Returns:
        (kind, width) tuple; unknown codes resolve to RecordKind.UNKNOWN
    """
    return TYPE_TABLE[type_byte & 0xFF]


def kind_of(type_byte: int) -> RecordKind:
    """Get the record kind for a type byte (UNKNOWN if not catalogued)."""
    return resolve(type_byte)[0]


def name_of(kind: RecordKind) -> str:
    """Get the listing name of a record kind."""
    return kind.value


def kind_of_name(name: str) -> RecordKind:
    """
    Look up a record kind by its listing name.

    Matching is exact and case-sensitive. Names that match nothing give
    RecordKind.UNKNOWN.
    """
    return _BY_NAME.get(name, RecordKind.UNKNOWN)


def all_kinds() -> tuple[RecordKind, ...]:
    """All known record kinds in catalog order (UNKNOWN excluded)."""
    return _ALL_KINDS


# =============================================================================
# Filter Expansion
# =============================================================================

def expand_filter(tokens: Iterable[str]) -> tuple[RecordKind, ...]:
    """
    Expand a list of filter tokens into an ordered tuple of record kinds.

    Each token is a kind name or "*". Duplicates are dropped, keeping the
    first occurrence. A "*" appends every catalog kind not already listed
    and ends the expansion, since nothing after it can add a kind.

    Args:
        tokens: Kind names and/or "*"

    Returns:
        Tuple of distinct record kinds in request order

    Raises:
        UnknownFilterKindError: If an explicit token names no known kind

    Example:
        >>> expand_filter(["*", "THEADR"]) == expand_filter(["*"])
        True
    """
    selected: list[RecordKind] = []

    for token in tokens:
        if token == WILDCARD:
            selected.extend(kind for kind in _ALL_KINDS if kind not in selected)
            break

        kind = kind_of_name(token)
        if kind is RecordKind.UNKNOWN:
            raise UnknownFilterKindError(token)
        if kind not in selected:
            selected.append(kind)

    return tuple(selected)


def parse_filter(values: Union[str, Iterable[str]]) -> tuple[RecordKind, ...]:
    """
    Parse comma-separated filter text into record kinds.

    Accepts a single string such as "THEADR,COMENT" or several such
    strings (one per repeated command-line option). Blank tokens are
    ignored and surrounding whitespace is stripped.

    Raises:
        UnknownFilterKindError: If a token names no known kind
    """
    if isinstance(values, str):
        values = [values]

    tokens = [
        token.strip()
        for value in values
        for token in value.split(",")
        if token.strip()
    ]
    return expand_filter(tokens)
