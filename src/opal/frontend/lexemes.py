"""
Lexeme Model
============

Lexeme types, the keyword table and the immutable ``Lexeme`` record
produced by the lexer.

Serialization
-------------
Each lexeme serializes to one line:

    {line:   3, col:   5, lx_type: Identifier, val: 'count'}
    {line:   3, col:  11, lx_type: Integer, val: '', int: 42}
    {line:   4, col:   1, lx_type: End_of_file, val: ''}

The type name is the enum member's value, a fixed human-readable name.
Integers render their numeric value in a separate ``int`` field.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from opal.errors import SourceLocation


# =============================================================================
# Lexeme Type Enumeration
# =============================================================================

class LexemeType(Enum):
    """
    Lexeme types for the OPaL language.

    Member values are the serialization names and must not change.
    """

    # === Structural ===
    NOP = "No_operation"
    EOF = "End_of_file"

    # === Identifiers and Literals ===
    IDENTIFIER = "Identifier"
    INTEGER = "Integer"
    STRING = "String"

    # === Assignment and Arithmetic ===
    ASSIGN = "Op_Assign"            # =
    ADD = "Op_Add"                  # +
    SUBTRACT = "Op_Subtract"        # -
    NEGATE = "Op_Negate"            # unary - (assigned by the parser)
    MULTIPLY = "Op_Multiply"        # *
    DIVIDE = "Op_Divide"            # /
    MOD = "Op_Mod"                  # %

    # === Comparison ===
    EQUAL = "Op_Equal"              # ==
    NOT_EQUAL = "Op_NotEqual"       # !=
    LESS = "Op_Less"                # <
    GREATER = "Op_Greater"          # >
    LESS_EQUAL = "Op_LessEqual"     # <=
    GREATER_EQUAL = "Op_GreaterEqual"  # >=

    # === Boolean ===
    AND = "Op_And"                  # &&
    OR = "Op_Or"                    # ||
    NOT = "Op_Not"                  # !

    # === Keywords ===
    IF = "Keyword_If"
    ELSE = "Keyword_Else"
    WHILE = "Keyword_While"

    # === Delimiters ===
    LPAREN = "LeftParen"
    RPAREN = "RightParen"
    LBRACE = "LeftBrace"
    RBRACE = "RightBrace"
    SEMICOLON = "Semicolon"
    COMMA = "Comma"

    # === Keywords (built-in statements) ===
    PRINT = "Keyword_print"
    INPUT = "Keyword_input"

    @property
    def is_keyword(self) -> bool:
        """Return True for the reserved-word types."""
        return self in KEYWORDS.values()


# =============================================================================
# Keyword Mapping
# =============================================================================

KEYWORDS: dict[str, LexemeType] = {
    "if": LexemeType.IF,
    "else": LexemeType.ELSE,
    "while": LexemeType.WHILE,
    "print": LexemeType.PRINT,
    "input": LexemeType.INPUT,
}


# =============================================================================
# Lexeme Data Class
# =============================================================================

@dataclass(frozen=True)
class Lexeme:
    """
    A classified, positioned unit of source text.

    Attributes:
        type: The LexemeType classification
        line: Line where the lexeme starts (1-indexed)
        column: Column where the lexeme starts (1-indexed)
        int_value: Value of an Integer lexeme, otherwise None
        text_value: Text of an identifier, keyword or string, otherwise None
        filename: Name of the stream the lexeme was read from
    """
    type: LexemeType
    line: int
    column: int
    int_value: Optional[int] = None
    text_value: Optional[str] = None
    filename: str = "<input>"

    def __repr__(self) -> str:
        if self.int_value is not None:
            return f"Lexeme({self.type.value}, {self.int_value}, {self.line}:{self.column})"
        if self.text_value is not None:
            return f"Lexeme({self.type.value}, {self.text_value!r}, {self.line}:{self.column})"
        return f"Lexeme({self.type.value}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    @property
    def is_eof(self) -> bool:
        return self.type is LexemeType.EOF

    def format(self) -> str:
        """Serialize the lexeme as a single symbol table line."""
        text = self.text_value if self.text_value is not None else ""
        parts = [
            f"line: {self.line: 3d}",
            f"col: {self.column: 3d}",
            f"lx_type: {self.type.value}",
            f"val: '{text}'",
        ]
        if self.int_value is not None:
            parts.append(f"int: {self.int_value}")
        return "{" + ", ".join(parts) + "}"
