"""
OPaL - Front End Toolchain for the OPaL Language
================================================

OPaL is a small imperative language with integer variables, arithmetic,
comparison and boolean operators, ``if``/``else``/``while`` control flow
and ``print``/``input`` statements.

This package provides the front end of the toolchain:

- **frontend**: comment stripping, include expansion and lexical analysis,
  producing the symbol table (ordered lexeme stream)
- **cli**: the ``opalc`` command

Quick Start
-----------
    >>> from opal import tokenize_source
    >>> for lexeme in tokenize_source("print(x);"):
    ...     print(lexeme.format())
    {line:   1, col:   1, lx_type: Keyword_print, val: 'print'}
    {line:   1, col:   6, lx_type: LeftParen, val: ''}
    {line:   1, col:   7, lx_type: Identifier, val: 'x'}
    {line:   1, col:   8, lx_type: RightParen, val: ''}
    {line:   1, col:   9, lx_type: Semicolon, val: ''}
    {line:   1, col:  10, lx_type: End_of_file, val: ''}

Or use the command-line tool:
    $ opalc hello.opl -o hello.lex
"""

__version__ = "1.0.0"

from opal.errors import OpalError, SourceLocation
from opal.frontend import (
    FrontEnd,
    FrontEndOptions,
    Lexeme,
    LexemeType,
    SymbolTable,
    tokenize_file,
    tokenize_source,
)

__all__ = [
    "__version__",
    "OpalError",
    "SourceLocation",
    "FrontEnd",
    "FrontEndOptions",
    "Lexeme",
    "LexemeType",
    "SymbolTable",
    "tokenize_file",
    "tokenize_source",
]
