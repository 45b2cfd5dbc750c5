"""
omfkit - Dump Configuration
===========================

Rendering defaults for the omfdump listing. The CLI uses DEFAULT_CONFIG;
library callers can build their own DumpConfig and pass it to the
formatting functions.
"""

from dataclasses import dataclass, field, replace

from omfkit.omf.catalog import RecordKind


@dataclass(frozen=True)
class DumpConfig:
    """
    Configuration for record body rendering.

    Attributes:
        default_kinds: Kinds whose bodies are printed when no filter is
            given (module headers and comments)
        preview_bytes: LEDATA bytes shown before the listing elides the
            rest with "..." (0 shows everything)
        label_width: Column width labels are right-aligned to
        verbose: Log scanning and decoding at DEBUG level
    """

    default_kinds: tuple[RecordKind, ...] = field(default=(
        RecordKind.THEADR,
        RecordKind.LHEADR,
        RecordKind.COMENT,
    ))
    preview_bytes: int = 16
    label_width: int = 12
    verbose: bool = False

    def with_overrides(self, **kwargs) -> "DumpConfig":
        """Copy of this configuration with the given fields replaced."""
        return replace(self, **kwargs)


DEFAULT_CONFIG = DumpConfig()
