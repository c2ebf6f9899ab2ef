# =============================================================================
# test_validator.py - Validation Rule Tests
# =============================================================================
# Tests for the three pass 2a rules: unknown labels, invalid instructions
# and label operands outside the branch family.
# =============================================================================

import pytest

from tracs_asm.assembler.loader import load_lines
from tracs_asm.assembler.resolver import resolve_labels
from tracs_asm.assembler.validator import Validator, validate
from tracs_asm.errors import (
    InvalidInstructionError,
    InvalidOperandError,
    UnknownLabelError,
)


def check(source: str):
    """Resolve a source string and return its validation errors."""
    return validate(resolve_labels(load_lines(source.splitlines())))


# =============================================================================
# Valid Program Tests
# =============================================================================

class TestValidPrograms:
    """Programs that pass every rule."""

    def test_terminator_only(self):
        assert not check("EOP").has_errors()

    def test_literal_operands(self):
        assert not check("WM 0x1F\nRM 0x00\nWIO 0xff\nEOP").has_errors()

    @pytest.mark.parametrize("branch", ["BR", "BRE", "BRNE", "BRGT", "BRLT"])
    def test_branch_to_label(self, branch):
        assert not check(f"LOOP WB\n{branch} LOOP\nEOP").has_errors()

    def test_branch_to_literal(self):
        assert not check("BR 0x04\nEOP").has_errors()

    def test_literal_spelled_like_label(self):
        """A 0x literal stays a literal even if a label has the same name."""
        assert not check("0x10 WB\nWM 0x10\nADD 0x10\nEOP").has_errors()

    def test_class_interface(self):
        resolution = resolve_labels(load_lines(["ADD", "EOP"]))
        assert Validator(resolution).validate().error_count() == 0


# =============================================================================
# Unknown Label Tests
# =============================================================================

class TestUnknownLabels:
    """Rule 1: operands must be literals or defined labels."""

    def test_undefined_label(self):
        errors = check("BR NOWHERE\nEOP")
        found = errors.errors_of_type(UnknownLabelError)
        assert len(found) == 1
        assert found[0].label == "NOWHERE"

    def test_malformed_literal(self):
        """0xZZ is not a literal, so it is treated as a label name."""
        errors = check("WM 0xZZ\nEOP")
        assert errors.errors_of_type(UnknownLabelError)

    def test_uppercase_prefix_is_not_literal(self):
        errors = check("WM 0X1F\nEOP")
        assert errors.errors_of_type(UnknownLabelError)

    def test_suggestion_for_typo(self):
        errors = check("LOOP WB\nBR LOPP\nEOP")
        error = errors.errors_of_type(UnknownLabelError)[0]
        assert error.similar_labels == ["LOOP"]
        assert "did you mean 'LOOP'?" in str(error)

    def test_error_points_at_operand(self):
        errors = check("ADD\n   BR LOPP\nEOP")
        error = errors.errors[0]
        assert error.location.line == 2
        assert error.location.column == 7


# =============================================================================
# Invalid Instruction Tests
# =============================================================================

class TestInvalidInstructions:
    """Rule 2: operations must be in the opcode table."""

    def test_unknown_mnemonic(self):
        # "LOOP JMP" is read as label LOOP, operation JMP
        errors = check("LOOP JMP\nEOP")
        found = errors.errors_of_type(InvalidInstructionError)
        assert len(found) == 1
        assert found[0].mnemonic == "JMP"

    def test_label_without_operation(self):
        errors = check("DONE\nEOP")
        found = errors.errors_of_type(InvalidInstructionError)
        assert found[0].mnemonic == ""
        assert "<missing>" in str(found[0])

    def test_lowercase_mnemonic(self):
        errors = check("LOOP add\nEOP")
        assert errors.errors_of_type(InvalidInstructionError)


# =============================================================================
# Invalid Operand Tests
# =============================================================================

class TestInvalidOperands:
    """Rule 3: only branch instructions may take a label operand."""

    @pytest.mark.parametrize("mnemonic", ["WM", "RM", "WIO", "ADD", "WB"])
    def test_label_on_non_branch(self, mnemonic):
        errors = check(f"LOOP WB\n{mnemonic} LOOP\nEOP")
        found = errors.errors_of_type(InvalidOperandError)
        assert len(found) == 1
        assert found[0].mnemonic == mnemonic
        assert found[0].operand == "LOOP"

    def test_hint_lists_branches(self):
        errors = check("LOOP WB\nWM LOOP\nEOP")
        assert "BR, BRE, BRNE, BRGT, BRLT" in str(errors.errors[0])


# =============================================================================
# Collection Tests
# =============================================================================

class TestErrorCollection:
    """All violations are reported from one run, grouped by rule."""

    def test_all_errors_collected(self):
        errors = check("LOOP WB\nBR MISSING\nX JMP\nWM LOOP\nEOP")
        assert errors.error_count() == 3

    def test_grouped_by_rule(self):
        errors = check("LOOP WB\nWM LOOP\nX JMP\nBR MISSING\nEOP")
        kinds = [type(e) for e in errors.errors]
        assert kinds == [UnknownLabelError, InvalidInstructionError, InvalidOperandError]

    def test_source_order_within_rule(self):
        errors = check("BR FIRST\nBR SECOND\nEOP")
        assert [e.label for e in errors.errors] == ["FIRST", "SECOND"]

    def test_report_summary(self):
        errors = check("BR A\nBR B\nEOP")
        assert errors.report().endswith("2 errors, 0 warnings")
