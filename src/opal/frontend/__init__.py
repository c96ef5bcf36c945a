"""
OPaL Front End
==============

This package turns OPaL source into a symbol table, the ordered stream
of classified lexemes a parser consumes.

Pipeline
--------
    Source → Comment stripper → Include expander → Comment stripper → Lexer → Symbol table

- ``source``: CharacterStream, a line/column tracking cursor over bytes
- ``comments``: removes // and /* */ comments, keeping every newline
- ``includes``: inlines ``#include "file"`` directives
- ``lexer`` and ``classifier``: produce one lexeme per call
- ``symbols``: collects lexemes up to End_of_file
- ``pipeline``: runs every stage in order

Usage
-----
>>> from opal.frontend import tokenize_source
>>> table = tokenize_source("while (x < 10) { x = x + 1; }")
>>> table[0]
Lexeme(Keyword_While, 'while', 1:1)
"""

from opal.frontend.source import CharacterStream
from opal.frontend.lexemes import KEYWORDS, Lexeme, LexemeType
from opal.frontend.comments import CommentStripper, strip_comments
from opal.frontend.includes import IncludeExpander, expand_includes
from opal.frontend.classifier import classify, scan_word
from opal.frontend.lexer import Lexer
from opal.frontend.symbols import SymbolTable, build_symbol_table
from opal.frontend.pipeline import (
    FrontEnd,
    FrontEndOptions,
    FrontEndResult,
    tokenize_file,
    tokenize_source,
)
from opal.frontend.errors import (
    FrontEndError,
    SourceIOError,
    PreprocessorError,
    UnterminatedCommentError,
    MissingIncludeError,
    IncludeCycleError,
    IncludeTooDeepError,
    LexicalError,
    IllegalCharacterError,
    UnterminatedStringError,
)

__all__ = [
    # Stages
    "CharacterStream",
    "CommentStripper",
    "strip_comments",
    "IncludeExpander",
    "expand_includes",
    "Lexer",
    "classify",
    "scan_word",
    "SymbolTable",
    "build_symbol_table",
    # Lexeme model
    "KEYWORDS",
    "Lexeme",
    "LexemeType",
    # Pipeline
    "FrontEnd",
    "FrontEndOptions",
    "FrontEndResult",
    "tokenize_file",
    "tokenize_source",
    # Errors
    "FrontEndError",
    "SourceIOError",
    "PreprocessorError",
    "UnterminatedCommentError",
    "MissingIncludeError",
    "IncludeCycleError",
    "IncludeTooDeepError",
    "LexicalError",
    "IllegalCharacterError",
    "UnterminatedStringError",
]
