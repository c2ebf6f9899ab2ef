"""
TRACS Assembler Command-Line Interface
======================================

This package provides the command-line tool for the TRACS assembler:

- **tracsasm**: TRACS two-pass assembler

The tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["tracsasm"]
