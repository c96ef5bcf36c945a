"""
Front End Error Hierarchy
=========================

Exceptions raised by the comment stripper, include expander, lexer and
classifier. Every error is fatal to the pipeline: nothing is recovered
locally and no partial output is produced.

Exception Hierarchy
-------------------
FrontEndError (base for all front end errors)
├── SourceIOError - source stream cannot be opened or read
├── PreprocessorError - comment stripping and include expansion
│   ├── UnterminatedCommentError - EOF inside a block comment
│   ├── MissingIncludeError - include file absent or unreadable
│   ├── IncludeCycleError - file includes itself, directly or not
│   └── IncludeTooDeepError - include nesting limit exceeded
└── LexicalError - lexer and classifier errors
    ├── IllegalCharacterError - character that starts no lexeme
    └── UnterminatedStringError - missing closing quote
"""

from pathlib import Path
from typing import Optional, Sequence

from opal.errors import LocatedError, SourceLocation


class FrontEndError(LocatedError):
    """Base exception for all front end errors."""
    pass


class SourceIOError(FrontEndError):
    """
    The source stream could not be opened or read.

    Wraps the underlying OSError, which stays available as ``__cause__``.
    """

    def __init__(self, filename: str, reason: str):
        self.filename = filename
        self.reason = reason
        super().__init__(f"cannot read '{filename}': {reason}")


# =============================================================================
# Preprocessor Errors
# =============================================================================

class PreprocessorError(FrontEndError):
    """Error raised while stripping comments or expanding includes."""
    pass


class UnterminatedCommentError(PreprocessorError):
    """
    End of file reached inside a block comment.

    The location points at the opening ``/*``.
    """

    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__(
            "unterminated block comment",
            location,
            hint="add closing */ to terminate the comment",
        )


class MissingIncludeError(PreprocessorError):
    """
    Include file not found or not readable.

    Raised when:
    - the named file does not exist in any search path
    - the file exists but cannot be opened
    - the directive names no file at all
    """

    def __init__(
        self,
        filename: str,
        reason: str,
        location: Optional[SourceLocation] = None,
        search_paths: Optional[Sequence[str]] = None,
    ):
        self.included_filename = filename
        self.reason = reason
        self.search_paths = list(search_paths or [])

        hint = None
        if self.search_paths:
            hint = f"searched in: {', '.join(self.search_paths)}"

        super().__init__(
            f"cannot include '{filename}': {reason}",
            location,
            hint=hint,
        )


class IncludeCycleError(PreprocessorError):
    """A file includes itself, directly or through other includes."""

    def __init__(
        self,
        path: Path,
        chain: Sequence[Path],
        location: Optional[SourceLocation] = None,
    ):
        self.path = path
        self.chain = list(chain)
        trail = " -> ".join(str(p) for p in [*self.chain, path])
        super().__init__(
            f"circular include of '{path}'",
            location,
            hint=f"include chain: {trail}",
        )


class IncludeTooDeepError(PreprocessorError):
    """Include nesting exceeded the configured maximum depth."""

    def __init__(
        self,
        path: Path,
        max_depth: int,
        location: Optional[SourceLocation] = None,
    ):
        self.path = path
        self.max_depth = max_depth
        super().__init__(
            f"include of '{path}' exceeds maximum nesting depth of {max_depth}",
            location,
            hint="raise --max-include-depth if the nesting is intended",
        )


# =============================================================================
# Lexical Errors
# =============================================================================

class LexicalError(FrontEndError):
    """Error raised while converting characters into lexemes."""
    pass


class IllegalCharacterError(LexicalError):
    """
    Character that cannot start or complete a lexeme.

    Raised for:
    - a single '&' or '|' (only '&&' and '||' exist)
    - end of file where a compound operator needed its second character
    - any character outside the language alphabet
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        if char:
            message = f"illegal character '{char}' (0x{ord(char):02X})"
        else:
            message = "unexpected end of file"
        super().__init__(message, location, hint=hint, source_line=source_line)


class UnterminatedStringError(LexicalError):
    """
    String literal not closed before the end of its line or the file.

    Example:
        print("hello;     // missing closing quote
    """

    def __init__(self, location: Optional[SourceLocation] = None):
        super().__init__(
            "unterminated string literal",
            location,
            hint="add closing '\"' to complete the string",
        )
