"""
omfdump - Object Module Dump Command-Line Interface
===================================================

This module implements the command-line interface for inspecting OMF
object files. It lists record headers and prints decoded record bodies.

Usage Examples
--------------
Print module headers and comments (default):
    $ omfdump hello.obj

List every record header:
    $ omfdump --headers hello.obj

Decode selected record kinds:
    $ omfdump -r SEGDEF,PUBDEF hello.obj

Decode every known record kind:
    $ omfdump -r '*' hello.obj

Output Format
-------------
The header listing prints one line per record:

    Idx    Type Size
      0  THEADR 0009
      1  COMENT 0011

Bodies start with the record kind followed by right-aligned label/value
lines:

    THEADR:
            name hello.asm
"""

import logging
from pathlib import Path
from typing import Optional, Sequence

import click

from omfkit import __version__
from omfkit.cli.errors import ExitCode, handle_cli_exception
from omfkit.config import DEFAULT_CONFIG, DumpConfig
from omfkit.errors import OMFError, OMFFormatError
from omfkit.omf import (
    Comment,
    LogicalData,
    ModuleHeader,
    NameTable,
    ObjectModule,
    PublicDef,
    RawRecord,
    RecordBody,
    SegmentDef,
    UnsupportedRecord,
    parse_filter,
)

logger = logging.getLogger(__name__)

UNSUPPORTED_PLACEHOLDER = "(unsupported record kind)"


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


# =============================================================================
# Formatting
# =============================================================================

def format_headers(records: Sequence[RawRecord]) -> list[str]:
    """
    Format the record index listing.

    Returns:
        A title line followed by one "index kind payload-length" line per
        record
    """
    lines = ["Idx    Type Size"]
    for record in records:
        lines.append(f"{record.index:>3} {record.name:>7} {record.payload_length:04x}")
    return lines


def _flag(value: bool) -> str:
    return "1" if value else "0"


def format_body(
    record: RawRecord,
    body: RecordBody,
    config: DumpConfig = DEFAULT_CONFIG,
) -> list[str]:
    """
    Format one decoded record body as text lines.

    The first line is "<KIND>:"; the rest are label/value pairs with the
    label right-aligned to config.label_width.
    """
    width = config.label_width
    lines = [f"{record.name}:"]

    def field_line(label: object, value: object) -> None:
        lines.append(f"{label!s:>{width}} {value}")

    if isinstance(body, ModuleHeader):
        field_line("name", body.name)

    elif isinstance(body, Comment):
        field_line("NP", _flag(body.no_purge))
        field_line("NL", _flag(body.no_list))
        field_line("class", f"{body.comment_class:x}")
        field_line("commentary", body.text)

    elif isinstance(body, NameTable):
        field_line("count", len(body.names))
        # Name indices are 1-based in the records that refer to them
        for number, name in enumerate(body.names, start=1):
            field_line(number, name)

    elif isinstance(body, SegmentDef):
        field_line("alignment", body.alignment.get_description())
        field_line("combination", body.combination.get_description())
        field_line("big", _flag(body.big))
        field_line("use32", _flag(body.use32))
        if body.frame is not None:
            field_line("frame", f"{body.frame.number:04x}:{body.frame.offset:02x}")
        field_line("length", f"{body.length:x}")
        field_line("segment name", body.segment_name_index)
        field_line("class name", body.class_name_index)
        field_line("overlay name", body.overlay_name_index)

    elif isinstance(body, PublicDef):
        field_line("group", body.base_group_index)
        field_line("segment", body.base_segment_index)
        if body.base_frame is not None:
            field_line("frame", f"{body.base_frame:04x}")
        for entry in body.entries:
            field_line(entry.name, f"{entry.offset:08x} type {entry.type_index}")

    elif isinstance(body, LogicalData):
        field_line("segment", body.segment_index)
        field_line("offset", f"{body.data_offset:x}")
        field_line("length", f"{len(body.payload):x}")
        limit = config.preview_bytes or len(body.payload)
        preview = " ".join(f"{b:02x}" for b in body.payload[:limit])
        if len(body.payload) > limit:
            preview += " ..."
        field_line("data", preview)

    elif isinstance(body, UnsupportedRecord):
        field_line("", UNSUPPORTED_PLACEHOLDER)

    return lines


# =============================================================================
# CLI Definition
# =============================================================================

@click.command(context_settings={"help_option_names": ["--help"]})
@click.argument(
    "objfile",
    type=click.Path(dir_okay=False, path_type=Path),
)
@click.option(
    "-h", "--headers",
    is_flag=True,
    help="Print record header information",
)
@click.option(
    "-r", "--records",
    "record_filters",
    multiple=True,
    metavar="LIST",
    help="Print record types listed (separated by ',', '*' for all)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (debug logging)",
)
@click.version_option(__version__, "--version", "-V", prog_name="omfdump")
def main(
    objfile: Path,
    headers: bool,
    record_filters: tuple[str, ...],
    verbose: bool,
    config: Optional[DumpConfig] = None,
) -> None:
    """
    Dump the records of an OMF object file.

    OBJFILE is the object file to dump. Without options, the module
    header and comment records are decoded and printed.

    \b
    Examples:
      omfdump hello.obj
      omfdump --headers hello.obj
      omfdump -r LNAMES,SEGDEF hello.obj
      omfdump -r '*' hello.obj
    """
    config = (config or DEFAULT_CONFIG).with_overrides(verbose=verbose)
    setup_logging(config.verbose)

    # Argument and file errors abort before any output
    try:
        kinds = parse_filter(record_filters) if record_filters else ()
        module = ObjectModule.from_file(objfile)
    except OMFError as e:
        handle_cli_exception(e, verbose=verbose)

    if not headers and not record_filters:
        kinds = config.default_kinds

    failed = False

    if headers:
        for line in format_headers(module.records):
            click.echo(line)

    for record in module.select(kinds):
        try:
            body = module.decode(record)
        except OMFFormatError as e:
            logger.warning(f"Cannot decode {record.name} record {record.index}: {e}")
            click.echo(f"{record.name}:")
            click.echo(f"{'':>{config.label_width}} (malformed: {e})")
            click.echo()
            failed = True
            continue

        for line in format_body(record, body, config):
            click.echo(line)
        click.echo()

    if module.truncation is not None:
        handle_cli_exception(module.truncation, verbose=verbose)

    if failed:
        raise SystemExit(ExitCode.FORMAT_ERROR)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
