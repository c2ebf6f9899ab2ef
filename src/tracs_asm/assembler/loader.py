"""
TRACS Source Loader
===================

This module turns raw assembly text into an ordered list of SourceRecord
objects, one per line that carries an instruction or directive.

Line Processing
---------------
Each input line goes through the same steps:

1. Cut everything from the first comment character (``;``) onward
2. Trim leading and trailing whitespace
3. Discard the line if nothing is left
4. Split the remainder on whitespace into at most three fields

Field Layout
------------
In **legacy** syntax the fields are positional::

    LOOP  WM  0x1F      ; label, operation, operand
          WM  0x1F      ; first token is a mnemonic: no label
    ORG   0x10          ; origin directive: label=ORG, operation=0x10

A line whose first token is a mnemonic has been read one field too far to
the left, so its fields are shifted right (operand <- operation,
operation <- first token, label <- empty).

In **colon** syntax a label carries a trailing colon, so no shifting is
needed::

    LOOP: WM 0x1F
          BR LOOP
          ORG 0x10      ; origin directive: operation=ORG, operand=0x10
"""

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from tracs_asm.config import AssemblerConfig
from tracs_asm.cpu import MNEMONICS
from tracs_asm.errors import (
    CapacityExceededError,
    SourceLocation,
    SourceUnavailableError,
)

logger = logging.getLogger(__name__)

_TOKEN = re.compile(r"\S+")


# =============================================================================
# Source Record
# =============================================================================

@dataclass
class SourceRecord:
    """
    One instruction or directive line of the program.

    Empty fields are empty strings, never None, so that comparisons and
    formatting work without special cases.

    Attributes:
        label: Label defined on this line ("" if none)
        operation: Mnemonic, or the ORG value in legacy syntax
        operand: Literal or label operand ("" if none)
        location: Source position of the line (column of the first token)
        text: The line as written, without its newline
        operand_column: 1-indexed column of the operand (0 if none)
    """
    label: str = ""
    operation: str = ""
    operand: str = ""
    location: Optional[SourceLocation] = None
    text: str = ""
    operand_column: int = 0

    def is_empty(self) -> bool:
        """Return True if all three fields are empty."""
        return not (self.label or self.operation or self.operand)

    def origin_literal(self, marker: str = "ORG",
                       syntax: str = "legacy") -> Optional[str]:
        """
        Return the base-address literal if this record is an origin directive.

        Legacy syntax reads ``ORG 0x10`` as label=ORG, operation=0x10; colon
        syntax reads it as operation=ORG, operand=0x10. In colon syntax a
        label spelled ``ORG:`` is an ordinary label.

        Returns:
            The literal text, or None if this is not an origin directive
        """
        if syntax == "legacy" and self.label == marker:
            return self.operation
        if not self.label and self.operation == marker:
            return self.operand
        return None

    def operand_location(self) -> Optional[SourceLocation]:
        """Location pointing at the operand, falling back to the line."""
        if self.location is None or not self.operand_column:
            return self.location
        return SourceLocation(self.location.filename, self.location.line, self.operand_column)

    def __str__(self) -> str:
        return f"Label: {self.label}, Operation: {self.operation}, Operand: {self.operand}"


# =============================================================================
# Loader
# =============================================================================

@dataclass
class _Token:
    text: str
    column: int


class SourceLoader:
    """
    Loads assembly source lines into SourceRecord objects.

    Usage:
        loader = SourceLoader(AssemblerConfig(syntax="legacy"))
        records = loader.load(["LOOP WB", "BR LOOP", "EOP"])
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        self._config = config or AssemblerConfig()

    def load(self, lines: Iterable[str], filename: str = "<input>") -> list[SourceRecord]:
        """
        Convert source lines to records.

        Args:
            lines: The source text, one line per item (newlines allowed)
            filename: Name used in source locations

        Returns:
            Records in program order, blank and comment lines removed

        Raises:
            CapacityExceededError: If there are more records than max_records
        """
        records: list[SourceRecord] = []
        limit = self._config.max_records

        for line_number, raw in enumerate(lines, start=1):
            record = self.parse_line(raw, line_number, filename)
            if record is None or record.is_empty():
                continue
            if len(records) >= limit:
                raise CapacityExceededError(
                    f"program has more than {limit} records",
                    location=record.location,
                    hint="raise max_records (TRACS_ASM_MAX_RECORDS) or split the program",
                )
            records.append(record)
            logger.debug(f"{record.location}: {record}")

        return records

    def parse_line(self, raw: str, line_number: int = 1,
                   filename: str = "<input>") -> Optional[SourceRecord]:
        """
        Parse one source line.

        Returns:
            A SourceRecord, or None for blank and comment-only lines
        """
        text = raw.rstrip("\r\n")
        code = text.split(self._config.comment_char, 1)[0]
        if not code.strip():
            return None

        tokens = [_Token(m.group(), m.start() + 1) for m in _TOKEN.finditer(code)]
        location = SourceLocation(filename, line_number, tokens[0].column)

        if self._config.syntax == "colon":
            label, fields, used = self._split_colon(tokens)
        else:
            label, fields, used = self._split_legacy(tokens)

        if used < len(tokens):
            ignored = " ".join(t.text for t in tokens[used:])
            logger.warning(f"{location}: ignoring extra tokens '{ignored}'")

        operation = fields[0] if fields else None
        operand = fields[1] if len(fields) > 1 else None

        return SourceRecord(
            label=label.text if label else "",
            operation=operation.text if operation else "",
            operand=operand.text if operand else "",
            location=location,
            text=text,
            operand_column=operand.column if operand else 0,
        )

    # Both splitters return (label, [operation, operand], tokens consumed)

    @staticmethod
    def _split_legacy(tokens: list[_Token]) -> tuple[Optional[_Token], list[_Token], int]:
        """Positional fields; a leading mnemonic means there is no label."""
        fields = tokens[:3]
        if fields[0].text in MNEMONICS:
            return None, fields[:2], min(len(tokens), 2)
        return fields[0], fields[1:], len(fields)

    @staticmethod
    def _split_colon(tokens: list[_Token]) -> tuple[Optional[_Token], list[_Token], int]:
        """A first token ending in ':' is the label."""
        first = tokens[0]
        if first.text.endswith(":"):
            name = first.text[:-1]
            label = _Token(name, first.column) if name else None
            rest = tokens[1:3]
            return label, rest, 1 + len(rest)
        return None, tokens[:2], min(len(tokens), 2)


# =============================================================================
# Convenience Functions
# =============================================================================

def load_lines(lines: Iterable[str], filename: str = "<input>",
               config: Optional[AssemblerConfig] = None) -> list[SourceRecord]:
    """Load records from an iterable of source lines."""
    return SourceLoader(config).load(lines, filename)


def load_file(filepath: str | Path,
              config: Optional[AssemblerConfig] = None) -> list[SourceRecord]:
    """
    Load records from a source file.

    Raises:
        SourceUnavailableError: If the file cannot be opened or decoded
        CapacityExceededError: If there are more records than max_records
    """
    filepath = Path(filepath)
    try:
        with open(filepath, "r") as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as e:
        raise SourceUnavailableError(str(filepath), getattr(e, "strerror", None) or str(e)) from e
    return load_lines(lines, str(filepath), config)
