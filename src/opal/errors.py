"""
OPaL Error Hierarchy
====================

This module defines the root of the exception hierarchy for the OPaL
toolchain. All exceptions inherit from OpalError, allowing callers to
catch every toolchain error with a single except clause if desired.

Exception Hierarchy
-------------------
OpalError (base)
└── FrontEndError (see opal.frontend.errors)
    ├── SourceIOError - source stream cannot be opened or read
    ├── PreprocessorError - comment stripping and include expansion
    └── LexicalError - lexer and classifier

Error Message Format
--------------------
Each exception captures source location information (filename, line,
column) when applicable:

    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class OpalError(Exception):
    """
    Base exception for all OPaL toolchain errors.

        try:
            table = tokenize_file("hello.opl")
        except OpalError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for stream input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Located Errors
# =============================================================================

class LocatedError(OpalError):
    """
    Base for errors that point at a place in the source.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
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
        super().__init__(self._format_message())

    def add_hint(self, hint: str) -> None:
        """Append a hint and refresh the formatted message."""
        self.hint = f"{self.hint}; {hint}" if self.hint else hint
        self.args = (self._format_message(),)

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            hello.opl:3:9: error: illegal character '&'
                if (a & b) {
                      ^
            hint: use '&&' for logical and
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)
