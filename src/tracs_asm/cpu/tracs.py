"""
TRACS Instruction Set Definition
================================

This module defines the closed TRACS instruction set: every mnemonic the
assembler accepts, its opcode byte, and whether it carries an operand.

Instruction Format
------------------
Every instruction occupies exactly two bytes, whatever its operand:

1. **No operand**: opcode byte, then an operand byte
   - The operand byte is 0x00, a 0x literal, or a label address
   - Example: EOP -> $F8 $00

2. **With operand**: (opcode << 8) | literal, split into two bytes
   - Example: WM 0x1F -> $08 $1F

3. **Branch**: opcode byte, then the destination address
   - Example: BR LOOP -> $18 <address of LOOP>

Operands
--------
An operand is either a hexadecimal literal with a lowercase ``0x`` prefix
(``0x1F``) or the bare name of a label. Only the branch family
(BR, BRE, BRNE, BRGT, BRLT) may take a label.
"""

import re
from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Opcode Entry
# =============================================================================

@dataclass(frozen=True)
class OpcodeEntry:
    """
    Encoding information for one mnemonic.

    Attributes:
        mnemonic: The instruction name (e.g., "WM")
        code: The opcode byte
        has_operand: True if the operand is packed into the opcode word
    """
    mnemonic: str
    code: int
    has_operand: bool

    def __repr__(self) -> str:
        return (
            f"OpcodeEntry({self.mnemonic}, code=${self.code:02X}, "
            f"has_operand={self.has_operand})"
        )


# =============================================================================
# Opcode Table
# =============================================================================
# Key: mnemonic (case-sensitive)
# Value: OpcodeEntry(mnemonic, opcode, has_operand)
# =============================================================================

OPCODE_TABLE: dict[str, OpcodeEntry] = {
    entry.mnemonic: entry for entry in (
        # Memory and I/O
        OpcodeEntry("WB", 0x30, False),     # Write bus
        OpcodeEntry("WM", 0x08, True),      # Write memory
        OpcodeEntry("RM", 0x10, True),      # Read memory
        OpcodeEntry("WACC", 0x48, False),   # Write accumulator
        OpcodeEntry("WIB", 0x38, False),    # Write input buffer
        OpcodeEntry("WIO", 0x28, True),     # Write I/O
        OpcodeEntry("RACC", 0x58, False),   # Read accumulator
        OpcodeEntry("SWAP", 0x70, False),

        # ALU
        OpcodeEntry("ADD", 0xF0, False),
        OpcodeEntry("SUB", 0xE8, False),
        OpcodeEntry("MUL", 0xD8, False),
        OpcodeEntry("AND", 0xD0, False),
        OpcodeEntry("OR", 0xC8, False),
        OpcodeEntry("NOT", 0xC0, False),
        OpcodeEntry("XOR", 0xB8, False),
        OpcodeEntry("SHL", 0xB0, False),
        OpcodeEntry("SHR", 0xA8, False),

        # Branches
        OpcodeEntry("BR", 0x18, True),      # Branch always
        OpcodeEntry("BRE", 0xA0, True),     # Branch if equal
        OpcodeEntry("BRNE", 0x98, True),    # Branch if not equal
        OpcodeEntry("BRGT", 0x90, True),    # Branch if greater than
        OpcodeEntry("BRLT", 0x88, True),    # Branch if less than

        # Program control
        OpcodeEntry("EOP", 0xF8, False),    # End of program
    )
}


# =============================================================================
# Instruction Set Reference Lists
# =============================================================================

MNEMONICS: frozenset[str] = frozenset(OPCODE_TABLE)

# The only instructions allowed to take a label operand
BRANCH_INSTRUCTIONS: tuple[str, ...] = ("BR", "BRE", "BRNE", "BRGT", "BRLT")

TERMINATOR = "EOP"

HEX_PREFIX = "0x"

_HEX_LITERAL = re.compile(r"0x[0-9A-Fa-f]+")


# =============================================================================
# Lookup Functions
# =============================================================================

def lookup(mnemonic: str) -> Optional[OpcodeEntry]:
    """
    Look up the opcode entry for a mnemonic.

    Args:
        mnemonic: The instruction mnemonic (e.g., "ADD"); case-sensitive

    Returns:
        OpcodeEntry if found, None if the mnemonic is not in the table
    """
    return OPCODE_TABLE.get(mnemonic)


def is_valid_instruction(mnemonic: str) -> bool:
    """Check if a mnemonic is a TRACS instruction."""
    return mnemonic in MNEMONICS


def is_branch_instruction(mnemonic: str) -> bool:
    """Check if an instruction belongs to the branch family."""
    return mnemonic in BRANCH_INSTRUCTIONS


def is_hex_literal(operand: str) -> bool:
    """
    Check if an operand is a complete hexadecimal literal.

    Only ``0x`` followed by at least one hex digit qualifies; ``0x``
    alone or ``0xZZ`` does not.
    """
    return _HEX_LITERAL.fullmatch(operand) is not None


def parse_hex_literal(operand: str) -> int:
    """
    Convert a hexadecimal literal to its integer value.

    Args:
        operand: A literal accepted by is_hex_literal()

    Returns:
        The literal's value

    Raises:
        ValueError: If the operand is not a hexadecimal literal
    """
    if not is_hex_literal(operand):
        raise ValueError(f"not a hexadecimal literal: {operand!r}")
    return int(operand[len(HEX_PREFIX):], 16)
