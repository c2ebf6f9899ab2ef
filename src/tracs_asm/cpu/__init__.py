"""
TRACS Assembler CPU Package
===========================

This package contains the TRACS instruction set definition shared by the
loader (which needs the mnemonic list to repair label-less lines), the
validator and the encoder.

Modules:
    tracs: Opcode table, branch family and operand literal helpers.

Usage:
    from tracs_asm.cpu import (
        OpcodeEntry,
        OPCODE_TABLE,
        lookup,
    )
"""

# =============================================================================
# Public API Exports
# =============================================================================

from tracs_asm.cpu.tracs import (
    # Core types
    OpcodeEntry,
    # Master instruction database
    OPCODE_TABLE,
    # Instruction set reference lists
    MNEMONICS,
    BRANCH_INSTRUCTIONS,
    TERMINATOR,
    HEX_PREFIX,
    # Lookup functions
    lookup,
    is_valid_instruction,
    is_branch_instruction,
    # Operand literals
    is_hex_literal,
    parse_hex_literal,
)

__all__ = [
    # Core types
    "OpcodeEntry",
    # Master instruction database
    "OPCODE_TABLE",
    # Instruction set reference lists
    "MNEMONICS",
    "BRANCH_INSTRUCTIONS",
    "TERMINATOR",
    "HEX_PREFIX",
    # Lookup functions
    "lookup",
    "is_valid_instruction",
    "is_branch_instruction",
    # Operand literals
    "is_hex_literal",
    "parse_hex_literal",
]
