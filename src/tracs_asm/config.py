"""
TRACS Assembler - Configuration
===============================

Assembler settings with their defaults. Configuration can come from:
- Default values (defined here)
- Environment variables (AssemblerConfig.from_env)
- Command-line options (tracsasm), which take precedence

Syntax modes:
- "legacy": positional ``label operation operand`` fields; a first token
  that is a mnemonic means the line has no label. This is the default and
  accepts existing TRACS sources unchanged.
- "colon": a label is written with a trailing colon (``LOOP: WB``); no
  guessing from the mnemonic table.
"""

from dataclasses import dataclass
import os


SYNTAX_MODES = ("legacy", "colon")


@dataclass
class AssemblerConfig:
    """
    Configuration for one assembler instance.

    Attributes:
        syntax: Source syntax mode, "legacy" or "colon" (default: "legacy")
        strict: Reject duplicate labels and fail on operands the encoder
            cannot resolve. When False, the first label definition wins and
            unresolvable operands produce the legacy placeholder line.
        max_records: Maximum number of source records (default: 32768,
            the number of 2-byte instructions in a 64K address space)
        origin_marker: Directive that sets the starting address (default: "ORG")
        comment_char: Character that starts a comment (default: ";")
    """

    syntax: str = "legacy"
    strict: bool = True
    max_records: int = 0x10000 // 2
    origin_marker: str = "ORG"
    comment_char: str = ";"

    def __post_init__(self):
        if self.syntax not in SYNTAX_MODES:
            raise ValueError(
                f"unknown syntax mode '{self.syntax}'. "
                f"Valid modes: {', '.join(SYNTAX_MODES)}"
            )
        if self.max_records <= 0:
            raise ValueError(f"max_records must be positive, got {self.max_records}")

    # ═══════════════════════════════════════════════════════════════════════════
    # FACTORY METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create AssemblerConfig from environment variables.

        Environment variables (all optional):
            TRACS_ASM_SYNTAX: Syntax mode ("legacy" or "colon")
            TRACS_ASM_STRICT: "0"/"false"/"no" for lenient mode
            TRACS_ASM_MAX_RECORDS: Maximum number of source records

        Returns:
            AssemblerConfig with values from environment variables
        """
        config = cls()

        if syntax := os.environ.get("TRACS_ASM_SYNTAX"):
            if syntax.lower() in SYNTAX_MODES:
                config.syntax = syntax.lower()

        if strict := os.environ.get("TRACS_ASM_STRICT"):
            config.strict = strict.lower() not in ("0", "false", "no", "off")

        if max_records := os.environ.get("TRACS_ASM_MAX_RECORDS"):
            try:
                value = int(max_records)
            except ValueError:
                value = 0
            if value > 0:
                config.max_records = value

        return config
