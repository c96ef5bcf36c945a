"""
OPaL Command-Line Interface
===========================

This package provides the command-line tools for the OPaL toolchain:

- **opalc**: front end (comment stripping, include expansion, lexing)

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["opalc"]
