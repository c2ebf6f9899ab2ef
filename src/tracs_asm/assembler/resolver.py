"""
TRACS Label Resolver (Pass 1)
=============================

Pass 1 walks the loaded records once and produces everything pass 2 needs:

- The origin (starting address), from an optional ``ORG`` directive
- An address for every instruction record, ``origin + 2 * index``
- The label table, binding each label to the address of its instruction
- Whether the program contains the ``EOP`` terminator

The result is returned as a Resolution object rather than kept as state, so
the validator and encoder can be run (and tested) on their own.

Example
-------
>>> resolution = resolve_labels(load_lines(["LOOP WB", "BR LOOP", "EOP"]))
>>> resolution.address_of("LOOP")
0
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Iterator, Optional

from tracs_asm.assembler.loader import SourceRecord
from tracs_asm.config import AssemblerConfig
from tracs_asm.cpu import TERMINATOR
from tracs_asm.errors import (
    AssemblyFailedError,
    CapacityExceededError,
    DirectiveError,
    DuplicateLabelError,
    ErrorCollector,
    MissingTerminatorError,
    SourceLocation,
)

logger = logging.getLogger(__name__)

# Every instruction is two bytes: opcode word, operand word
INSTRUCTION_SIZE = 2

ADDRESS_SPACE = 0x10000

# Leading-zero octal, as accepted by C strtol with base 0
_C_OCTAL = re.compile(r"0[0-7]+")


# =============================================================================
# Pass 1 Results
# =============================================================================

@dataclass(frozen=True)
class LabelBinding:
    """
    A label and the address of the instruction it annotates.

    Attributes:
        name: Label name (case-sensitive)
        address: Address of the labelled instruction
        location: Where the label was defined
    """
    name: str
    address: int
    location: Optional[SourceLocation] = None


@dataclass
class Resolution:
    """
    Output of pass 1.

    Attributes:
        origin: Starting address (0 when there is no ORG directive)
        records: Instruction records in program order (origin excluded)
        addresses: Address of each record, parallel to records
        labels: Label table, name -> LabelBinding
        has_terminator: True if EOP appears as a label or operation
        warnings: Non-fatal diagnostics raised during the pass
    """
    origin: int = 0
    records: list[SourceRecord] = field(default_factory=list)
    addresses: list[int] = field(default_factory=list)
    labels: dict[str, LabelBinding] = field(default_factory=dict)
    has_terminator: bool = False
    warnings: list[str] = field(default_factory=list)

    def address_of(self, name: str) -> Optional[int]:
        """Return the address bound to a label, or None if undefined."""
        binding = self.labels.get(name)
        return binding.address if binding is not None else None

    def is_label(self, name: str) -> bool:
        """Return True if name is a defined label."""
        return name in self.labels

    def instructions(self) -> Iterator[tuple[int, SourceRecord]]:
        """Iterate over (address, record) pairs in program order."""
        return zip(self.addresses, self.records)

    def symbols(self) -> dict[str, int]:
        """Return the label table as a plain name -> address mapping."""
        return {name: binding.address for name, binding in self.labels.items()}


# =============================================================================
# Label Resolver
# =============================================================================

class LabelResolver:
    """
    Runs pass 1 over a list of source records.

    Usage:
        resolver = LabelResolver(config)
        resolution = resolver.resolve(records)
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self._config = config or AssemblerConfig()

    def resolve(self, records: list[SourceRecord]) -> Resolution:
        """
        Assign addresses and bind labels.

        Args:
            records: Output of the source loader, in program order

        Returns:
            The Resolution for this program

        Raises:
            DirectiveError: If the ORG value cannot be parsed
            CapacityExceededError: If the program runs past address 0xFFFF
            MissingTerminatorError: If no EOP is present
            AssemblyFailedError: If labels are duplicated (strict mode) or
                more than one ORG directive is present
        """
        errors = ErrorCollector()
        resolution = Resolution()
        origin_record: Optional[SourceRecord] = None
        marker = self._config.origin_marker

        for record in records:
            literal = record.origin_literal(marker, self._config.syntax)
            if literal is None:
                resolution.records.append(record)
            elif origin_record is None:
                origin_record = record
                resolution.origin = self._parse_origin(literal, record)
            else:
                errors.add(DirectiveError(
                    f"multiple {marker} directives",
                    location=record.location,
                    hint=f"the first {marker} is at {origin_record.location}",
                    source_line=record.text,
                ))

        end = resolution.origin + INSTRUCTION_SIZE * len(resolution.records)
        if end > ADDRESS_SPACE:
            raise CapacityExceededError(
                f"program ends at 0x{end:x}, past the end of the address space",
                hint=f"{len(resolution.records)} instructions starting at "
                     f"0x{resolution.origin:02x} need {end - resolution.origin} bytes",
            )

        address = resolution.origin
        for record in resolution.records:
            if TERMINATOR in (record.label, record.operation):
                resolution.has_terminator = True
            if record.label:
                self._bind(resolution, record, address, errors)
            resolution.addresses.append(address)
            address += INSTRUCTION_SIZE

        if not resolution.has_terminator:
            raise MissingTerminatorError(TERMINATOR)

        resolution.warnings.extend(errors.warnings)
        if errors.has_errors():
            raise AssemblyFailedError(errors)

        for binding in resolution.labels.values():
            logger.debug(f"Label: {binding.name}, Address: {binding.address:x}")

        return resolution

    def _parse_origin(self, literal: str, record: SourceRecord) -> int:
        """
        Parse an ORG value.

        Accepts 0x, 0o and 0b prefixes, plain decimal, and C-style octal
        with a leading zero (``010`` is 8).
        """
        marker = self._config.origin_marker
        if not literal:
            raise DirectiveError(
                f"{marker} requires an address",
                location=record.location,
                source_line=record.text,
            )
        try:
            if _C_OCTAL.fullmatch(literal):
                value = int(literal, 8)
            else:
                value = int(literal, 0)
        except ValueError:
            raise DirectiveError(
                f"invalid {marker} address '{literal}'",
                location=record.location,
                hint="use a number such as 0x10, 16 or 020",
                source_line=record.text,
            ) from None
        if not 0 <= value < ADDRESS_SPACE:
            raise DirectiveError(
                f"{marker} address {literal} out of range",
                location=record.location,
                hint="addresses range from 0x0000 to 0xFFFF",
                source_line=record.text,
            )
        return value

    def _bind(self, resolution: Resolution, record: SourceRecord,
              address: int, errors: ErrorCollector) -> None:
        """Bind record.label to address, handling redefinitions."""
        existing = resolution.labels.get(record.label)
        if existing is None:
            resolution.labels[record.label] = LabelBinding(record.label, address, record.location)
            return

        if self._config.strict:
            errors.add(DuplicateLabelError(
                record.label,
                location=record.location,
                original_location=existing.location,
                source_line=record.text,
            ))
        else:
            message = (
                f"{record.location}: label '{record.label}' redefined, "
                f"keeping address 0x{existing.address:02x}"
            )
            logger.warning(message)
            errors.add_warning(message)


def resolve_labels(records: list[SourceRecord],
                   config: Optional[AssemblerConfig] = None) -> Resolution:
    """Convenience wrapper around LabelResolver.resolve()."""
    return LabelResolver(config).resolve(records)
