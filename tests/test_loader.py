# =============================================================================
# test_loader.py - Source Loader Unit Tests
# =============================================================================
# Tests for turning raw source lines into SourceRecord objects.
#
# Test coverage includes:
#   - Comment stripping, trimming and blank line removal
#   - Positional field layout and the label-less line repair (legacy)
#   - Colon-terminated labels (colon syntax)
#   - Origin directive detection
#   - Source locations and the record limit
#   - Reading from files
# =============================================================================

import pytest
from pathlib import Path

from tracs_asm.assembler.loader import SourceLoader, SourceRecord, load_file, load_lines
from tracs_asm.config import AssemblerConfig
from tracs_asm.errors import CapacityExceededError, SourceUnavailableError


# =============================================================================
# Helper Function
# =============================================================================

def fields(records: list[SourceRecord]) -> list[tuple[str, str, str]]:
    """Reduce records to (label, operation, operand) tuples."""
    return [(r.label, r.operation, r.operand) for r in records]


# =============================================================================
# Line Cleanup Tests
# =============================================================================

class TestLineCleanup:
    """Test comment, whitespace and blank line handling."""

    def test_empty_source(self):
        assert load_lines([]) == []

    def test_blank_lines_dropped(self):
        records = load_lines(["", "   ", "\t\t", "\n"])
        assert records == []

    def test_comment_only_lines_dropped(self):
        records = load_lines(["; header comment", "   ; indented comment"])
        assert records == []

    def test_trailing_comment_stripped(self):
        records = load_lines(["LOOP WM 0x1F ; write memory"])
        assert fields(records) == [("LOOP", "WM", "0x1F")]

    def test_comment_without_space(self):
        records = load_lines(["ADD;comment"])
        assert fields(records) == [("", "ADD", "")]

    def test_surrounding_whitespace(self):
        records = load_lines(["   \tWM   0x10  \t\r\n"])
        assert fields(records) == [("", "WM", "0x10")]

    def test_order_preserved(self):
        records = load_lines(["ADD", "", "SUB", "; c", "MUL"])
        assert [r.operation for r in records] == ["ADD", "SUB", "MUL"]


# =============================================================================
# Legacy Field Layout Tests
# =============================================================================

class TestLegacyLayout:
    """Test positional fields and the mnemonic-first repair."""

    def test_label_operation_operand(self):
        assert fields(load_lines(["LOOP BR LOOP"])) == [("LOOP", "BR", "LOOP")]

    def test_label_operation(self):
        assert fields(load_lines(["LOOP WB"])) == [("LOOP", "WB", "")]

    def test_mnemonic_first_is_shifted(self):
        """A leading mnemonic means the line has no label."""
        assert fields(load_lines(["BR LOOP"])) == [("", "BR", "LOOP")]

    def test_mnemonic_alone(self):
        assert fields(load_lines(["EOP"])) == [("", "EOP", "")]

    @pytest.mark.parametrize("mnemonic", [
        "WB", "WM", "RM", "WACC", "WIB", "WIO", "RACC", "ADD", "SUB", "MUL",
        "AND", "OR", "NOT", "XOR", "SHL", "SHR", "BR", "BRE", "BRNE", "BRGT",
        "BRLT", "EOP", "SWAP",
    ])
    def test_every_mnemonic_is_recognized(self, mnemonic):
        assert fields(load_lines([f"{mnemonic} 0x01"])) == [("", mnemonic, "0x01")]

    def test_unknown_first_token_is_label(self):
        """A misspelled mnemonic is read as a label."""
        assert fields(load_lines(["ADDD 0x01"])) == [("ADDD", "0x01", "")]

    def test_lowercase_mnemonic_is_label(self):
        assert fields(load_lines(["add"])) == [("add", "", "")]

    def test_extra_tokens_ignored(self):
        assert fields(load_lines(["LOOP WM 0x1F 0x20"])) == [("LOOP", "WM", "0x1F")]

    def test_extra_token_after_shift_ignored(self):
        assert fields(load_lines(["WM 0x1F junk"])) == [("", "WM", "0x1F")]

    def test_origin_line(self):
        records = load_lines(["ORG 0x10"])
        assert fields(records) == [("ORG", "0x10", "")]
        assert records[0].origin_literal() == "0x10"

    def test_label_only_line(self):
        assert fields(load_lines(["DONE"])) == [("DONE", "", "")]


# =============================================================================
# Colon Syntax Tests
# =============================================================================

class TestColonLayout:
    """Test colon-terminated labels."""

    def setup_method(self):
        self.loader = SourceLoader(AssemblerConfig(syntax="colon"))

    def test_label_with_colon(self):
        records = self.loader.load(["LOOP: WB"])
        assert fields(records) == [("LOOP", "WB", "")]

    def test_label_operation_operand(self):
        records = self.loader.load(["LOOP: BRNE LOOP"])
        assert fields(records) == [("LOOP", "BRNE", "LOOP")]

    def test_no_label(self):
        records = self.loader.load(["WM 0x1F"])
        assert fields(records) == [("", "WM", "0x1F")]

    def test_label_named_like_mnemonic(self):
        """Colon syntax needs no mnemonic lookup, so any name works."""
        records = self.loader.load(["ADD: ADD"])
        assert fields(records) == [("ADD", "ADD", "")]

    def test_origin_line(self):
        records = self.loader.load(["ORG 0x10"])
        assert fields(records) == [("", "ORG", "0x10")]
        assert records[0].origin_literal() == "0x10"

    def test_extra_tokens_ignored(self):
        records = self.loader.load(["WM 0x1F 0x20"])
        assert fields(records) == [("", "WM", "0x1F")]


# =============================================================================
# Source Record Tests
# =============================================================================

class TestSourceRecord:
    """Test SourceRecord helpers and location tracking."""

    def test_is_empty(self):
        assert SourceRecord().is_empty()
        assert not SourceRecord(operation="ADD").is_empty()

    def test_origin_literal_none_for_instruction(self):
        assert SourceRecord(label="LOOP", operation="WB").origin_literal() is None
        assert SourceRecord(label="START", operation="ORG", operand="0x10").origin_literal() is None

    def test_colon_label_named_like_marker(self):
        """In colon syntax only the operation field can hold ORG."""
        record = SourceRecord(label="ORG", operation="WB")
        assert record.origin_literal(syntax="colon") is None
        assert record.origin_literal(syntax="legacy") == "WB"

    def test_custom_origin_marker(self):
        record = SourceRecord(label="BASE", operation="0x20")
        assert record.origin_literal("BASE") == "0x20"

    def test_locations(self):
        records = load_lines(["; comment", "", "  LOOP WM 0x1F"], filename="prog.asm")
        record = records[0]
        assert record.location.filename == "prog.asm"
        assert record.location.line == 3
        assert record.location.column == 3
        assert record.operand_column == 11
        assert record.text == "  LOOP WM 0x1F"

    def test_operand_location(self):
        record = load_lines(["BR LOOP"])[0]
        location = record.operand_location()
        assert location.line == 1
        assert location.column == 4

    def test_operand_location_without_operand(self):
        record = load_lines(["ADD"])[0]
        assert record.operand_location() == record.location

    def test_str_format(self):
        record = SourceRecord("LOOP", "WB", "")
        assert str(record) == "Label: LOOP, Operation: WB, Operand: "


# =============================================================================
# Capacity Tests
# =============================================================================

class TestCapacity:
    """Test the configurable record limit."""

    def test_limit_reached_exactly(self):
        loader = SourceLoader(AssemblerConfig(max_records=3))
        assert len(loader.load(["ADD", "SUB", "EOP"])) == 3

    def test_limit_exceeded(self):
        loader = SourceLoader(AssemblerConfig(max_records=2))
        with pytest.raises(CapacityExceededError):
            loader.load(["ADD", "SUB", "EOP"])

    def test_blank_lines_do_not_count(self):
        loader = SourceLoader(AssemblerConfig(max_records=2))
        assert len(loader.load(["ADD", "", "; c", "EOP"])) == 2


# =============================================================================
# File Loading Tests
# =============================================================================

class TestLoadFile:
    """Test reading records from disk."""

    def test_load_file(self, tmp_path: Path):
        source = tmp_path / "script.asm"
        source.write_text("ORG 0x10\nLOOP WB\nBR LOOP\nEOP\n")
        records = load_file(source)
        assert fields(records) == [
            ("ORG", "0x10", ""),
            ("LOOP", "WB", ""),
            ("", "BR", "LOOP"),
            ("", "EOP", ""),
        ]
        assert records[0].location.filename == str(source)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(SourceUnavailableError) as exc_info:
            load_file(tmp_path / "missing.asm")
        assert "missing.asm" in str(exc_info.value)

    def test_directory_is_unavailable(self, tmp_path: Path):
        with pytest.raises(SourceUnavailableError):
            load_file(tmp_path)
