"""
TRACS Assembler - Toolchain for the TRACS CPU
==============================================

This package provides a two-pass assembler for the TRACS CPU, a custom
processor that consumes fixed-width opcode/operand byte pairs. It turns
a mnemonic program into the byte-pair listing loaded onto the hardware.

Main Components
---------------
- **assembler**: Source loader, label resolver, validator and encoder
- **cpu**: The closed TRACS instruction set
- **config**: Assembler settings (syntax mode, strictness, limits)
- **cli**: The ``tracsasm`` command-line tool

Quick Start
-----------
Assemble a program:
    >>> from tracs_asm import Assembler
    >>> asm = Assembler()
    >>> instructions = asm.assemble_file("script.asm")
    >>> asm.write_output("translation.txt")

Or use the command-line tool:
    $ tracsasm script.asm -o translation.txt

Version History
---------------
1.0.0 - Initial release
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from tracs_asm.assembler import Assembler, assemble, assemble_file
from tracs_asm.config import AssemblerConfig
from tracs_asm.errors import (
    TracsError,
    AssemblerError,
    AssemblyFailedError,
    CapacityExceededError,
    DirectiveError,
    DuplicateLabelError,
    ErrorCollector,
    InternalAssemblerError,
    InvalidInstructionError,
    InvalidOperandError,
    MissingTerminatorError,
    OutputUnavailableError,
    SourceLocation,
    SourceUnavailableError,
    UnknownLabelError,
)

__all__ = [
    # Version info
    "__version__",
    # Assembler
    "Assembler",
    "AssemblerConfig",
    "assemble",
    "assemble_file",
    # Exception hierarchy
    "TracsError",
    "AssemblerError",
    "AssemblyFailedError",
    "CapacityExceededError",
    "DirectiveError",
    "DuplicateLabelError",
    "ErrorCollector",
    "InternalAssemblerError",
    "InvalidInstructionError",
    "InvalidOperandError",
    "MissingTerminatorError",
    "OutputUnavailableError",
    "SourceLocation",
    "SourceUnavailableError",
    "UnknownLabelError",
]
