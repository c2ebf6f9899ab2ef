"""
tracsasm - TRACS Assembler Command-Line Interface
=================================================

This module implements the command-line interface for the TRACS assembler.

Usage Examples
--------------
Basic assembly (writes translation.txt next to the source):
    $ tracsasm script.asm

With output file:
    $ tracsasm script.asm -o script.txt

Also write the label table:
    $ tracsasm script.asm -s script.sym

Colon-label syntax, first label definition wins:
    $ tracsasm --syntax colon --lenient script.asm

Verbose mode:
    $ tracsasm -v script.asm
"""

import logging
from pathlib import Path
from typing import Optional

import click

from tracs_asm import __version__
from tracs_asm.assembler import Assembler
from tracs_asm.cli.errors import handle_cli_exception
from tracs_asm.config import SYNTAX_MODES, AssemblerConfig

DEFAULT_OUTPUT_NAME = "translation.txt"


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help=f"Output listing file (default: {DEFAULT_OUTPUT_NAME} beside the input)",
)
@click.option(
    "-s", "--symbols",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the label table to this file",
)
@click.option(
    "--syntax",
    type=click.Choice(SYNTAX_MODES, case_sensitive=False),
    default=None,
    help="Source syntax. legacy: positional label field (default). "
         "colon: labels end with ':'. Overrides TRACS_ASM_SYNTAX.",
)
@click.option(
    "--strict/--lenient",
    default=None,
    help="Strict (default): reject duplicate labels. Lenient: first "
         "definition wins. Overrides TRACS_ASM_STRICT.",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="tracsasm")
def main(
    input_file: Path,
    output: Optional[Path],
    symbols: Optional[Path],
    syntax: Optional[str],
    strict: Optional[bool],
    verbose: bool,
) -> None:
    """
    Assemble a TRACS program into a byte-pair listing.

    INPUT_FILE is the assembly source file (.asm) to assemble.

    Each instruction becomes one output line of two address/value pairs,
    for example "0x00 0xf8<TAB>0x01 0x00".

    \b
    Examples:
        tracsasm script.asm                  # Outputs translation.txt
        tracsasm script.asm -o out.txt       # Specify output file
        tracsasm script.asm -s labels.sym    # Also write label table
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    config = AssemblerConfig.from_env()
    if syntax is not None:
        config.syntax = syntax.lower()
    if strict is not None:
        config.strict = strict

    output_file = output if output is not None else input_file.with_name(DEFAULT_OUTPUT_NAME)

    if verbose:
        click.echo(f"Syntax: {config.syntax}")
        click.echo(f"Mode: {'strict' if config.strict else 'lenient'}")

    asm = Assembler(config)

    try:
        if verbose:
            click.echo(f"Assembling {input_file}...")

        asm.assemble_file(input_file)

        asm.write_output(output_file)
        if verbose:
            click.echo(f"Wrote {len(asm.get_instructions())} instructions to {output_file}")

        if symbols:
            asm.write_symbols(symbols)
            if verbose:
                click.echo(f"Wrote symbols to {symbols}")

        if verbose:
            click.echo(
                f"Assembly complete: {len(asm.get_instructions())} instructions "
                f"at 0x{asm.get_origin():02x}"
            )
            click.echo(f"Defined {len(asm.get_symbols())} labels")

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, context="Assembly")


if __name__ == "__main__":
    main()
