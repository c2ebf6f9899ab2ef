"""
TRACS Two-Pass Assembler
========================

This package translates TRACS assembly source into the byte-pair listing
consumed by the TRACS CPU.

Main Components
---------------
- **Assembler**: Main class that runs the whole pipeline
- **SourceLoader**: Turns source lines into SourceRecord objects
- **LabelResolver**: Pass 1, origin, addresses and label table
- **Validator**: Pass 2a, collects every label/instruction/operand error
- **Encoder**: Pass 2b, encodes records into byte pairs

Assembly Process
----------------
1. **Loading**: strip comments and blank lines, split fields, repair
   label-less lines (legacy syntax)
2. **Pass 1**: read ORG, give each instruction an address two bytes after
   the previous one, bind labels, require EOP
3. **Pass 2a**: reject unknown labels, invalid instructions and label
   operands outside the branch family, reporting all of them at once
4. **Pass 2b**: encode two byte pairs per instruction

Example Usage
-------------
>>> from tracs_asm.assembler import Assembler
>>> asm = Assembler()
>>> instructions = asm.assemble_string("LOOP WB\\nBR LOOP\\nEOP")
>>> asm.get_symbols()
{'LOOP': 0}
"""

from tracs_asm.assembler.assembler import Assembler, assemble, assemble_file
from tracs_asm.assembler.loader import SourceLoader, SourceRecord, load_file, load_lines
from tracs_asm.assembler.resolver import (
    INSTRUCTION_SIZE,
    LabelBinding,
    LabelResolver,
    Resolution,
    resolve_labels,
)
from tracs_asm.assembler.validator import Validator, validate
from tracs_asm.assembler.encoder import (
    EncodedInstruction,
    Encoder,
    encode,
    format_instruction,
    format_listing,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Loader
    "SourceLoader",
    "SourceRecord",
    "load_file",
    "load_lines",
    # Pass 1
    "INSTRUCTION_SIZE",
    "LabelBinding",
    "LabelResolver",
    "Resolution",
    "resolve_labels",
    # Pass 2a
    "Validator",
    "validate",
    # Pass 2b
    "EncodedInstruction",
    "Encoder",
    "encode",
    "format_instruction",
    "format_listing",
]
