"""
TRACS Encoder (Pass 2b)
=======================

Encodes each validated instruction record into two byte pairs and renders
them as listing lines.

Encoding Rules
--------------
For an instruction at address ``A``:

- **No operand in the opcode** (ADD, WB, EOP, ...)::

      (A, opcode)   (A+1, operand byte)

  The operand byte is the label's address, 0x00 when there is no operand,
  or the value of a ``0x`` literal.

- **Operand packed into the opcode** (WM, RM, WIO)::

      word = (opcode << 8) | literal
      (A, word >> 8)   (A+1, word & 0xFF)

- **Branches** (BR, BRE, BRNE, BRGT, BRLT) pack like the previous case, but
  a label operand replaces the low byte with the label's address.

Listing Format
--------------
One line per instruction, two tab-separated ``address value`` pairs::

    0x00 0xf8\t0x01 0x00

Values use ``0x%02x`` formatting: lowercase, at least two digits.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from tracs_asm.assembler.loader import SourceRecord
from tracs_asm.assembler.resolver import Resolution
from tracs_asm.cpu import (
    OpcodeEntry,
    is_branch_instruction,
    is_hex_literal,
    lookup,
    parse_hex_literal,
)
from tracs_asm.errors import InternalAssemblerError

logger = logging.getLogger(__name__)


# =============================================================================
# Encoded Instruction
# =============================================================================

@dataclass(frozen=True)
class EncodedInstruction:
    """
    One assembled instruction.

    Attributes:
        address: Address of the first byte
        byte0: Opcode, or the high byte of the packed opcode word
        byte1: Operand byte, low byte of the packed word, or branch target
        resolved_operand: Address of the label operand, if any
        record: The source record this was encoded from
        placeholder: Diagnostic text written instead of byte1 when the
            operand could not be resolved (lenient mode only)
    """
    address: int
    byte0: int
    byte1: int = 0
    resolved_operand: Optional[int] = None
    record: Optional[SourceRecord] = None
    placeholder: Optional[str] = None

    def pairs(self) -> tuple[tuple[int, int], tuple[int, int]]:
        """Return ((address, byte0), (address + 1, byte1))."""
        return (self.address, self.byte0), (self.address + 1, self.byte1)

    def is_degraded(self) -> bool:
        """True if the second pair was replaced by a diagnostic."""
        return self.placeholder is not None


# =============================================================================
# Encoder
# =============================================================================

class Encoder:
    """
    Runs pass 2b over a validated Resolution.

    Args:
        resolution: Pass 1 output
        strict: Raise InternalAssemblerError for operands that are neither a
            literal nor a label. When False, emit the legacy
            "Unknown Label" placeholder line instead.
    """

    def __init__(self, resolution: Resolution, strict: bool = True):
        self._resolution = resolution
        self._strict = strict

    def encode(self) -> list[EncodedInstruction]:
        """
        Encode every instruction record.

        Records whose mnemonic is not in the opcode table are skipped with a
        logged diagnostic; the addresses of the remaining instructions are
        the ones assigned in pass 1.

        Returns:
            Encoded instructions in program order

        Raises:
            InternalAssemblerError: In strict mode, for unresolvable operands
        """
        encoded = []
        for address, record in self._resolution.instructions():
            entry = lookup(record.operation)
            if entry is None:
                logger.error(f"{record.location}: invalid instruction '{record.operation}', skipped")
                continue

            if entry.has_operand:
                instruction = self._encode_packed(address, entry, record)
            else:
                instruction = self._encode_plain(address, entry, record)

            logger.debug(f"{record.location}: {format_instruction(instruction)}")
            encoded.append(instruction)
        return encoded

    def _encode_plain(self, address: int, entry: OpcodeEntry,
                      record: SourceRecord) -> EncodedInstruction:
        """Opcode byte followed by a separate operand byte."""
        operand = record.operand
        if not operand:
            return EncodedInstruction(address, entry.code, 0x00, None, record)
        if is_hex_literal(operand):
            return EncodedInstruction(address, entry.code, parse_hex_literal(operand), None, record)

        target = self._resolution.address_of(operand)
        if target is not None:
            return EncodedInstruction(address, entry.code, target, target, record)
        return self._degraded(address, entry.code, record)

    def _encode_packed(self, address: int, entry: OpcodeEntry,
                       record: SourceRecord) -> EncodedInstruction:
        """Opcode and literal packed into one 16-bit word."""
        operand = record.operand
        literal = is_hex_literal(operand)
        target = None if literal or not operand else self._resolution.address_of(operand)

        if literal:
            value = parse_hex_literal(operand)
        elif not operand or (target is not None and is_branch_instruction(entry.mnemonic)):
            value = 0
        else:
            return self._degraded(address, entry.code, record)

        word = ((entry.code << 8) | value) & 0xFFFF
        high, low = (word >> 8) & 0xFF, word & 0xFF

        if target is not None and is_branch_instruction(entry.mnemonic):
            return EncodedInstruction(address, high, target, target, record)
        return EncodedInstruction(address, high, low, None, record)

    def _degraded(self, address: int, byte0: int,
                  record: SourceRecord) -> EncodedInstruction:
        """Handle an operand that is neither a literal nor a usable label."""
        if self._strict:
            raise InternalAssemblerError(
                f"operand '{record.operand}' of '{record.operation}' "
                f"is neither a literal nor a label",
                location=record.operand_location(),
                source_line=record.text,
            )
        placeholder = f"Unknown Label: {record.operand} Writing opcode {record.operation}"
        logger.warning(f"{record.location}: {placeholder}")
        return EncodedInstruction(address, byte0, 0, None, record, placeholder)


# =============================================================================
# Listing Output
# =============================================================================

def format_instruction(instruction: EncodedInstruction) -> str:
    """
    Render one instruction as a listing line (without newline).

    Example:
        0x02 0x18\t0x03 0x00
    """
    (addr0, byte0), (addr1, byte1) = instruction.pairs()
    first = f"0x{addr0:02x} 0x{byte0:02x}"
    if instruction.placeholder is not None:
        return f"{first}\t{instruction.placeholder}"
    return f"{first}\t0x{addr1:02x} 0x{byte1:02x}"


def format_listing(instructions: Iterable[EncodedInstruction]) -> str:
    """Render instructions as listing text, one newline-terminated line each."""
    return "".join(f"{format_instruction(i)}\n" for i in instructions)


def encode(resolution: Resolution, strict: bool = True) -> list[EncodedInstruction]:
    """Convenience wrapper around Encoder.encode()."""
    return Encoder(resolution, strict).encode()
