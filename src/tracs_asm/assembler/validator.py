"""
TRACS Validator (Pass 2a)
=========================

Checks every instruction record against three rules and collects all
violations before anything is encoded:

1. **Unknown label**: the operand is neither a ``0x`` hex literal nor a
   defined label
2. **Invalid instruction**: the operation is not in the opcode table
3. **Invalid operand**: a label operand on an instruction outside the
   branch family (BR, BRE, BRNE, BRGT, BRLT)

Errors are grouped by rule, in source order within each rule, so a report
lists every unknown label first, then every bad mnemonic, then every
misplaced label operand.
"""

import difflib
import logging

from tracs_asm.assembler.resolver import Resolution
from tracs_asm.cpu import (
    BRANCH_INSTRUCTIONS,
    is_branch_instruction,
    is_hex_literal,
    is_valid_instruction,
)
from tracs_asm.errors import (
    ErrorCollector,
    InvalidInstructionError,
    InvalidOperandError,
    UnknownLabelError,
)

logger = logging.getLogger(__name__)


class Validator:
    """
    Runs pass 2a over a Resolution.

    Usage:
        errors = Validator(resolution).validate()
        if errors.has_errors():
            print(errors.report())
    """

    def __init__(self, resolution: Resolution):
        self._resolution = resolution

    def validate(self) -> ErrorCollector:
        """
        Apply all rules to every record.

        Returns:
            ErrorCollector holding every violation found (possibly empty)
        """
        errors = ErrorCollector()
        for check in (self._check_labels, self._check_instructions, self._check_operands):
            check(errors)
        logger.debug(f"Validation found {errors.error_count()} errors")
        return errors

    def _check_labels(self, errors: ErrorCollector) -> None:
        """Rule 1: operands must be literals or defined labels."""
        labels = list(self._resolution.labels)
        for record in self._resolution.records:
            operand = record.operand
            if not operand or is_hex_literal(operand) or self._resolution.is_label(operand):
                continue
            errors.add(UnknownLabelError(
                operand,
                location=record.operand_location(),
                source_line=record.text,
                similar_labels=difflib.get_close_matches(operand, labels, n=3),
            ))

    def _check_instructions(self, errors: ErrorCollector) -> None:
        """Rule 2: operations must be in the opcode table."""
        for record in self._resolution.records:
            if not is_valid_instruction(record.operation):
                errors.add(InvalidInstructionError(
                    record.operation,
                    location=record.location,
                    source_line=record.text,
                ))

    def _check_operands(self, errors: ErrorCollector) -> None:
        """Rule 3: only branch instructions may take a label."""
        for record in self._resolution.records:
            # A 0x literal is never a label reference, whatever labels exist
            if is_hex_literal(record.operand):
                continue
            if not self._resolution.is_label(record.operand):
                continue
            if is_branch_instruction(record.operation):
                continue
            errors.add(InvalidOperandError(
                record.operation,
                record.operand,
                location=record.operand_location(),
                source_line=record.text,
                branch_mnemonics=list(BRANCH_INSTRUCTIONS),
            ))


def validate(resolution: Resolution) -> ErrorCollector:
    """Convenience wrapper around Validator.validate()."""
    return Validator(resolution).validate()


