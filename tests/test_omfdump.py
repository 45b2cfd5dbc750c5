"""
omfdump CLI Tests
=================

Tests for the omfdump command-line tool: header listing, record body
output, filters and error exit codes.
"""

import pytest
from click.testing import CliRunner

from omfkit.cli.errors import ExitCode, exit_code_for
from omfkit.cli.omfdump import format_body, format_headers, main
from omfkit.config import DumpConfig
from omfkit.errors import (
    ObjectFileReadError,
    TruncatedRecordError,
    UnknownFilterKindError,
)
from omfkit.omf import LogicalData, decode_record, scan


# =============================================================================
# Helpers
# =============================================================================

def make_record(type_byte: int, payload: bytes) -> bytes:
    """Build one framed record with a valid checksum."""
    length = len(payload) + 1
    body = bytes([type_byte]) + length.to_bytes(2, "little") + payload
    return body + bytes([(-sum(body)) & 0xFF])


def pascal(text: str) -> bytes:
    raw = text.encode("ascii")
    return bytes([len(raw)]) + raw


@pytest.fixture
def object_file(tmp_path):
    """Write a small object module and return its path."""
    data = b"".join([
        make_record(0x80, pascal("hello.asm")),
        make_record(0x88, bytes([0x80, 0x00]) + b"Turbo Assembler"),
        make_record(0x96, pascal("") + pascal("CODE") + pascal("_TEXT")),
        make_record(0x98, bytes([0x68, 0x20, 0x00, 0x03, 0x02, 0x01])),
        make_record(0x90, bytes([0x00, 0x01]) + pascal("_main") + bytes([0x00, 0x00, 0x00])),
        make_record(0xA0, bytes([0x01, 0x00, 0x00]) + bytes(range(20))),
        make_record(0x9C, bytes([0xC4, 0x01, 0x54, 0x01])),
        bytes([0x8A, 0x00, 0x00]),
    ])
    path = tmp_path / "hello.obj"
    path.write_bytes(data)
    return path


# =============================================================================
# Formatting Tests
# =============================================================================

class TestFormatting:
    """Tests for the listing formatters."""

    def test_format_headers(self, object_file):
        records = scan(object_file.read_bytes())
        lines = format_headers(records)
        assert lines[0] == "Idx    Type Size"
        assert lines[1] == "  0  THEADR 000a"
        assert lines[2] == "  1  COMENT 0011"
        assert lines[7] == "  6  FIXUPP 0004"
        assert len(lines) == 8

    def test_format_module_header(self, object_file):
        data = object_file.read_bytes()
        record = scan(data)[0]
        lines = format_body(record, decode_record(record, data))
        assert lines == ["THEADR:", "        name hello.asm"]

    def test_data_preview_elided(self):
        data = make_record(0xA0, bytes([0x01, 0x00, 0x00]) + bytes(range(20)))
        record = scan(data)[0]
        body = LogicalData(segment_index=1, data_offset=0, payload=bytes(range(20)))
        lines = format_body(record, body, DumpConfig(preview_bytes=4))
        assert lines[-1].endswith("data 00 01 02 03 ...")

    def test_data_preview_everything(self):
        data = make_record(0xA0, bytes([0x01, 0x00, 0x00, 0xAA]))
        record = scan(data)[0]
        body = LogicalData(segment_index=1, data_offset=0, payload=b"\xAA")
        lines = format_body(record, body, DumpConfig(preview_bytes=0))
        assert lines[-1].endswith("data aa")


# =============================================================================
# CLI Tests
# =============================================================================

class TestOmfdumpCLI:
    """Tests for the omfdump command."""

    def test_cli_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Dump the records" in result.output

    def test_cli_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "omfdump" in result.output

    def test_default_prints_headers_and_comments(self, object_file):
        runner = CliRunner()
        result = runner.invoke(main, [str(object_file)])
        assert result.exit_code == 0
        assert "THEADR:" in result.output
        assert "hello.asm" in result.output
        assert "COMENT:" in result.output
        assert "Turbo Assembler" in result.output
        assert "SEGDEF:" not in result.output
        assert "Idx    Type Size" not in result.output

    def test_comment_flags(self, object_file):
        runner = CliRunner()
        result = runner.invoke(main, [str(object_file)])
        lines = result.output.splitlines()
        assert "          NP 1" in lines
        assert "          NL 0" in lines

    def test_headers_flag(self, object_file):
        """Test that -h lists headers instead of showing help."""
        runner = CliRunner()
        result = runner.invoke(main, ["-h", str(object_file)])
        assert result.exit_code == 0
        assert "Idx    Type Size" in result.output
        assert "  3  SEGDEF 0006" in result.output
        assert "THEADR:" not in result.output

    def test_records_filter(self, object_file):
        runner = CliRunner()
        result = runner.invoke(main, ["-r", "LNAMES,SEGDEF", str(object_file)])
        assert result.exit_code == 0
        assert "LNAMES:" in result.output
        assert "_TEXT" in result.output
        assert "SEGDEF:" in result.output
        assert "paragraph" in result.output
        assert "THEADR:" not in result.output

    def test_records_repeated_option(self, object_file):
        runner = CliRunner()
        result = runner.invoke(main, ["-r", "PUBDEF", "--records", "LEDATA", str(object_file)])
        assert result.exit_code == 0
        assert "PUBDEF:" in result.output
        assert "_main" in result.output
        assert "LEDATA:" in result.output
        assert "..." in result.output

    def test_records_wildcard(self, object_file):
        runner = CliRunner()
        result = runner.invoke(main, ["-r", "*", str(object_file)])
        assert result.exit_code == 0
        for name in ("THEADR:", "COMENT:", "LNAMES:", "SEGDEF:", "PUBDEF:", "LEDATA:", "FIXUPP:"):
            assert name in result.output
        assert "(unsupported record kind)" in result.output

    def test_headers_and_records(self, object_file):
        runner = CliRunner()
        result = runner.invoke(main, ["-h", "-r", "THEADR", str(object_file)])
        assert result.exit_code == 0
        assert result.output.index("Idx    Type Size") < result.output.index("THEADR:")

    def test_unknown_filter_kind(self, object_file):
        """Test that an unknown kind fails before any output."""
        runner = CliRunner()
        result = runner.invoke(main, ["-h", "-r", "THEADR,BOGUS", str(object_file)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "BOGUS" in result.output
        assert "Idx" not in result.output
        assert "THEADR:" not in result.output

    def test_missing_file(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [str(tmp_path / "missing.obj")])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "cannot read" in result.output

    def test_truncated_file(self, tmp_path, object_file):
        """Test that parsed records are printed before the truncation error."""
        path = tmp_path / "short.obj"
        path.write_bytes(object_file.read_bytes()[:-10])
        runner = CliRunner()
        result = runner.invoke(main, ["-h", str(path)])
        assert result.exit_code == ExitCode.FORMAT_ERROR
        assert "  5  LEDATA" in result.output
        assert "truncated record" in result.output

    def test_malformed_record_continues(self, tmp_path):
        path = tmp_path / "bad.obj"
        path.write_bytes(
            make_record(0x98, bytes([0x68, 0x01]))
            + make_record(0x80, pascal("after"))
        )
        runner = CliRunner()
        result = runner.invoke(main, ["-r", "SEGDEF,THEADR", str(path)])
        assert result.exit_code == ExitCode.FORMAT_ERROR
        assert "malformed" in result.output
        assert "after" in result.output


class TestExitCodes:
    """Tests for exception to exit code mapping."""

    def test_exit_codes(self):
        assert exit_code_for(UnknownFilterKindError("X")) == ExitCode.INVALID_ARGS
        assert exit_code_for(ObjectFileReadError("a.obj", "gone")) == ExitCode.INVALID_ARGS
        assert exit_code_for(TruncatedRecordError(0)) == ExitCode.FORMAT_ERROR
        assert exit_code_for(RuntimeError("boom")) == ExitCode.INTERNAL_ERROR
