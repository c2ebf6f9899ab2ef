"""
TRACS Assembler Error Hierarchy
===============================

Every exception raised by the assembler derives from TracsError, so one
except clause is enough to catch them all.

Exception Hierarchy
-------------------
TracsError (base)
└── AssemblerError (assembler-related)
    ├── SourceUnavailableError - source file cannot be read
    ├── OutputUnavailableError - output file cannot be opened
    ├── CapacityExceededError - program too large for the address space
    ├── DirectiveError - malformed ORG directive
    ├── MissingTerminatorError - no EOP in the program
    ├── DuplicateLabelError - label defined more than once
    ├── UnknownLabelError - operand names an undefined label
    ├── InvalidInstructionError - operation is not in the opcode table
    ├── InvalidOperandError - label operand on a non-branch instruction
    ├── InternalAssemblerError - encoder met an operand validation missed
    └── AssemblyFailedError - one or more collected errors

Diagnostic Format
-----------------
Errors tied to a line print the location, the line itself and a caret
under the offending column:

    script.asm:3:4: error: unknown label 'LOPP'
        BR LOPP
           ^
    hint: did you mean 'LOOP'?
"""

from dataclasses import dataclass
from typing import Optional

# Indentation of the echoed source line and caret
_CONTEXT_INDENT = " " * 4


# =============================================================================
# Base Exception Class
# =============================================================================

class TracsError(Exception):
    """
    Base exception for all TRACS assembler errors.

        try:
            Assembler().assemble_file("script.asm")
        except TracsError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in an assembly source, used to prefix diagnostics.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        if self.column:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(TracsError):
    """
    An assembly problem, optionally tied to a place in the source.

    Attributes:
        message: What went wrong
        location: Source position (None for whole-program errors)
        hint: How to fix it, printed on its own line
        source_line: Text of the offending line, echoed under the message
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self.render())

    def render(self) -> str:
        """
        Build the multi-line diagnostic, for example::

            script.asm:4:8: error: unknown label 'LOPP'
                    BR LOPP
                       ^
        """
        prefix = f"{self.location}: " if self.location else ""
        out = [f"{prefix}error: {self.message}"]

        if self.location is not None and self.source_line is not None:
            out.append(_CONTEXT_INDENT + self.source_line)
            if self.location.column:
                out.append(_CONTEXT_INDENT + " " * (self.location.column - 1) + "^")

        if self.hint:
            out.append(f"hint: {self.hint}")
        return "\n".join(out)


class SourceUnavailableError(AssemblerError):
    """
    The assembly source cannot be opened or read.

    Raised before any pass runs; nothing is written.
    """

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"cannot read source '{filename}': {reason}")


class OutputUnavailableError(AssemblerError):
    """The output listing (or symbol file) cannot be opened for writing."""

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"cannot open output '{filename}': {reason}")


class CapacityExceededError(AssemblerError):
    """
    Program does not fit.

    Raised when the loader sees more records than the configured maximum,
    or when address assignment would run past the 16-bit address space.
    """
    pass


class DirectiveError(AssemblerError):
    """
    Error in the ORG directive.

    Examples:
        - ORG with a value that is not a number
        - ORG with a value outside 0x0000-0xFFFF
    """
    pass


class MissingTerminatorError(AssemblerError):
    """No EOP appears anywhere in the program body."""

    def __init__(self, terminator: str = "EOP"):
        self.terminator = terminator
        super().__init__(
            f"no {terminator} found",
            hint=f"every program must contain an {terminator} instruction",
        )


class DuplicateLabelError(AssemblerError):
    """
    Label defined multiple times.

    Includes the original definition location in the hint when known.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        original_location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{label}' was first defined at {original_location}"

        super().__init__(
            f"duplicate label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnknownLabelError(AssemblerError):
    """
    Operand is neither a 0x literal nor a defined label.

    The validator suggests similarly-named labels to help catch typos.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.label = label
        self.similar_labels = similar_labels or []

        hint = None
        if self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"unknown label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class InvalidInstructionError(AssemblerError):
    """Operation field is not a mnemonic of the opcode table."""

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        shown = mnemonic if mnemonic else "<missing>"
        super().__init__(
            f"invalid instruction '{shown}'",
            location=location,
            source_line=source_line,
        )


class InvalidOperandError(AssemblerError):
    """
    Label operand on an instruction outside the branch family.

    Example:
        WM LOOP    ; Error: only BR, BRE, BRNE, BRGT, BRLT take labels
    """

    def __init__(
        self,
        mnemonic: str,
        operand: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        branch_mnemonics: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.operand = operand

        hint = None
        if branch_mnemonics:
            hint = f"label operands are only allowed on {', '.join(branch_mnemonics)}"

        super().__init__(
            f"invalid operand '{operand}' for instruction '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class InternalAssemblerError(AssemblerError):
    """
    An operand reached the encoder that is neither a literal nor a label.

    Validation makes this unreachable for programs assembled through
    Assembler; it is raised when the encoder runs in strict mode over
    unvalidated records.
    """
    pass


class AssemblyFailedError(AssemblerError):
    """
    One or more errors were collected during a pass.

    Attributes:
        errors: The ErrorCollector holding every reported error
    """

    def __init__(self, errors: "ErrorCollector"):
        self.errors = errors
        super().__init__(
            f"assembly failed with {_count(errors.error_count(), 'error')}:\n\n"
            f"{errors.report()}"
        )


# =============================================================================
# Error Collection
# =============================================================================

def _count(n: int, noun: str) -> str:
    return f"{n} {noun}" if n == 1 else f"{n} {noun}s"


class ErrorCollector:
    """
    Accumulates errors and warnings so a pass can report all of them at once.

    Example:
        collector = ErrorCollector()
        collector.add(UnknownLabelError("LOPP"))
        if collector.has_errors():
            raise AssemblyFailedError(collector)
    """

    def __init__(self):
        self.errors: list[AssemblerError] = []
        self.warnings: list[str] = []

    def add(self, error: AssemblerError) -> None:
        self.errors.append(error)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def extend(self, other: "ErrorCollector") -> None:
        """Take over every error and warning of another collector."""
        self.errors += other.errors
        self.warnings += other.warnings

    def has_errors(self) -> bool:
        return bool(self.errors)

    def error_count(self) -> int:
        return len(self.errors)

    def warning_count(self) -> int:
        return len(self.warnings)

    def errors_of_type(self, error_type: type) -> list[AssemblerError]:
        """Return the collected errors that are instances of error_type."""
        return [e for e in self.errors if isinstance(e, error_type)]

    def report(self) -> str:
        """
        Render the collection for the terminal.

        Each error is followed by a blank line, then any warnings under a
        "Warnings:" heading, then a summary such as "2 errors, 0 warnings".
        """
        blocks = [f"{error}\n" for error in self.errors]
        if self.warnings:
            blocks.append("Warnings:\n" + "\n".join(f"  {w}" for w in self.warnings))
        summary = f"{_count(len(self.errors), 'error')}, {_count(len(self.warnings), 'warning')}"
        blocks.append(f"\n{summary}")
        return "\n".join(blocks)

    def clear(self) -> None:
        self.errors.clear()
        self.warnings.clear()
