"""
TRACS Assembler - Main Interface
================================

This module provides the Assembler class, the primary interface for
assembling TRACS source code. It runs the loader and the two passes and
keeps their results for inspection and output.

Example Usage
-------------
>>> from tracs_asm.assembler import Assembler
>>>
>>> asm = Assembler()
>>> instructions = asm.assemble_string('''
... ORG 0x10
... LOOP  WM   0x1F
...       BRNE LOOP
...       EOP
... ''')
>>> print(asm.get_listing(), end="")
0x10 0x08	0x11 0x1f
0x12 0x98	0x13 0x10
0x14 0xf8	0x15 0x00
>>> asm.write_output("translation.txt")

Command-Line Usage
------------------
    $ tracsasm script.asm -o translation.txt -s labels.sym

Options:
    -o, --output FILE      Output listing file
    -s, --symbols FILE     Write label table
    --syntax MODE          legacy (default) or colon
    --strict/--lenient     Duplicate label and unresolved operand handling
    -v, --verbose          Verbose output
"""

import logging
from pathlib import Path
from typing import Callable, Iterable, Optional

from tracs_asm.assembler.encoder import EncodedInstruction, Encoder, format_listing
from tracs_asm.assembler.loader import SourceLoader, SourceRecord, load_file
from tracs_asm.assembler.resolver import LabelResolver, Resolution
from tracs_asm.assembler.validator import Validator
from tracs_asm.config import AssemblerConfig
from tracs_asm.errors import (
    AssemblerError,
    AssemblyFailedError,
    ErrorCollector,
    OutputUnavailableError,
)

logger = logging.getLogger(__name__)


class Assembler:
    """
    Main TRACS assembler class.

    The assembly pipeline is:
    1. Load source lines into records (SourceLoader)
    2. Pass 1: origin, addresses and labels (LabelResolver)
    3. Pass 2a: validation (Validator)
    4. Pass 2b: encoding (Encoder)

    Every call to an assemble_* method starts from a clean state.

    Attributes:
        config: The AssemblerConfig in effect
    """

    def __init__(self, config: Optional[AssemblerConfig] = None):
        """
        Initialize the assembler.

        Args:
            config: Assembler settings; defaults to AssemblerConfig()
        """
        self.config = config or AssemblerConfig()
        self._reset()

    def _reset(self) -> None:
        self._source_file: Optional[Path] = None
        self._records: list[SourceRecord] = []
        self._resolution: Optional[Resolution] = None
        self._instructions: Optional[list[EncodedInstruction]] = None
        self._errors = ErrorCollector()

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def assemble_lines(self, lines: Iterable[str],
                       filename: str = "<input>") -> list[EncodedInstruction]:
        """
        Assemble source code given as lines.

        Args:
            lines: Source lines (trailing newlines allowed)
            filename: Name used in error messages

        Returns:
            Encoded instructions in program order

        Raises:
            AssemblerError: If assembly fails (also check has_errors())
        """
        return self._run(lambda: SourceLoader(self.config).load(lines, filename))

    def assemble_string(self, source: str,
                        filename: str = "<input>") -> list[EncodedInstruction]:
        """
        Assemble source code from a string.

        Args:
            source: Assembly source code
            filename: Virtual filename for error messages

        Returns:
            Encoded instructions in program order
        """
        return self.assemble_lines(source.splitlines(), filename)

    def assemble_file(self, filepath: str | Path) -> list[EncodedInstruction]:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to assembly source file

        Returns:
            Encoded instructions in program order

        Raises:
            SourceUnavailableError: If the file cannot be read
            AssemblerError: If assembly fails
        """
        filepath = Path(filepath)
        result = self._run(lambda: load_file(filepath, self.config))
        self._source_file = filepath
        return result

    def _run(self, load: Callable[[], list[SourceRecord]]) -> list[EncodedInstruction]:
        """Load records with the given callable, then run both passes."""
        self._reset()
        try:
            self._records = load()
            logger.info(f"Loaded {len(self._records)} records")

            self._resolution = LabelResolver(self.config).resolve(self._records)
            for warning in self._resolution.warnings:
                self._errors.add_warning(warning)
            logger.info(
                f"Pass 1: origin 0x{self._resolution.origin:02x}, "
                f"{len(self._resolution.labels)} labels"
            )

            errors = Validator(self._resolution).validate()
            if errors.has_errors():
                raise AssemblyFailedError(errors)

            self._instructions = Encoder(self._resolution, strict=self.config.strict).encode()
            logger.info(f"Pass 2: encoded {len(self._instructions)} instructions")
        except AssemblyFailedError as e:
            self._errors.extend(e.errors)
            raise
        except AssemblerError as e:
            self._errors.add(e)
            raise

        return self._instructions

    # =========================================================================
    # Results
    # =========================================================================

    def get_origin(self) -> int:
        """Return the starting address (0 before assembly or without ORG)."""
        return self._resolution.origin if self._resolution else 0

    def get_symbols(self) -> dict[str, int]:
        """Return the label table, name -> address."""
        return self._resolution.symbols() if self._resolution else {}

    def get_records(self) -> list[SourceRecord]:
        """Return the loaded source records, origin directive included."""
        return list(self._records)

    def get_instructions(self) -> list[EncodedInstruction]:
        """Return the encoded instructions of the last successful assembly."""
        return list(self._instructions or [])

    def get_listing(self) -> str:
        """Return the output listing as text."""
        return format_listing(self._instructions or [])

    def get_source_file(self) -> Optional[Path]:
        """Return the path given to the last assemble_file() call."""
        return self._source_file

    # =========================================================================
    # Output Methods
    # =========================================================================

    def write_output(self, filepath: str | Path) -> None:
        """
        Write the listing file.

        The file is only created once assembly has succeeded.

        Raises:
            AssemblerError: If there is no successful assembly to write
            OutputUnavailableError: If the file cannot be opened
        """
        self._require_result()
        self._write_text(filepath, self.get_listing())
        logger.info(f"Wrote {len(self._instructions)} instructions to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write the label table.

        Format: name address (one per line, in definition order)
        """
        self._require_result()
        lines = ["# Label table\n", "# Generated by tracsasm\n"]
        for name, address in self.get_symbols().items():
            lines.append(f"{name} 0x{address:02x}\n")
        self._write_text(filepath, "".join(lines))
        logger.info(f"Wrote symbols to {filepath}")

    def _require_result(self) -> None:
        if self._instructions is None or self._errors.has_errors():
            raise AssemblerError("no successful assembly to write")

    @staticmethod
    def _write_text(filepath: str | Path, text: str) -> None:
        try:
            with open(filepath, "w") as f:
                f.write(text)
        except OSError as e:
            raise OutputUnavailableError(str(filepath), e.strerror or str(e)) from e

    # =========================================================================
    # Error Handling
    # =========================================================================

    def has_errors(self) -> bool:
        """Return True if the last assembly produced errors."""
        return self._errors.has_errors()

    def get_errors(self) -> ErrorCollector:
        """Return the errors and warnings of the last assembly."""
        return self._errors

    def get_error_report(self) -> str:
        """Return the formatted error report."""
        return self._errors.report()


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>",
             config: Optional[AssemblerConfig] = None) -> str:
    """
    Assemble source code and return the listing text.

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(config)
    asm.assemble_string(source, filename)
    return asm.get_listing()


def assemble_file(filepath: str | Path,
                  config: Optional[AssemblerConfig] = None) -> str:
    """
    Assemble a file and return the listing text.

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(config)
    asm.assemble_file(filepath)
    return asm.get_listing()
