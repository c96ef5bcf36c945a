"""
OPaL Lexer
==========

Converts a comment-free, include-expanded character stream into lexemes,
one per ``next_lexeme()`` call.

Lexeme Categories
-----------------
- Keywords: if, else, while, print, input
- Identifiers: runs of letters, digits and underscores
- Integers: runs of decimal digits
- Strings: "double quoted" with \\n \\t \\r \\\\ \\" \\0 escapes
- Operators: + - * / % = == != < <= > >= ! && ||
- Delimiters: ( ) { } ; ,

Compound Operators
------------------
``<``, ``>``, ``=`` and ``!`` take one character of lookahead and follow
maximal munch: ``<=`` is one lexeme, ``<x`` is ``<`` followed by ``x``.
``&`` and ``|`` only exist doubled; a single one is an illegal character,
as is end of file where an operator needed its lookahead.

End of File
-----------
The lexer returns an End_of_file lexeme when the stream is exhausted and
keeps returning it on every later call without reading further.

Example Usage
-------------
>>> import io
>>> from opal.frontend.source import CharacterStream
>>> lexer = Lexer(CharacterStream(io.BytesIO(b"x <= 10;"), "test.opl"))
>>> for lexeme in lexer.tokenize():
...     print(lexeme)
Lexeme(Identifier, 'x', 1:1)
Lexeme(Op_LessEqual, 1:3)
Lexeme(Integer, 10, 1:6)
Lexeme(Semicolon, 1:8)
Lexeme(End_of_file, 1:9)
"""

from typing import Iterator, Optional

from opal.errors import SourceLocation
from opal.frontend.classifier import classify, is_word_char, scan_word
from opal.frontend.errors import IllegalCharacterError, UnterminatedStringError
from opal.frontend.lexemes import Lexeme, LexemeType
from opal.frontend.source import CharacterStream


WHITESPACE = frozenset(" \t\n\r\v\f")

SINGLE_CHAR_LEXEMES: dict[str, LexemeType] = {
    "{": LexemeType.LBRACE,
    "}": LexemeType.RBRACE,
    "(": LexemeType.LPAREN,
    ")": LexemeType.RPAREN,
    ";": LexemeType.SEMICOLON,
    ",": LexemeType.COMMA,
    "+": LexemeType.ADD,
    "-": LexemeType.SUBTRACT,
    "*": LexemeType.MULTIPLY,
    "/": LexemeType.DIVIDE,
    "%": LexemeType.MOD,
}

# first char -> (second char, compound type, simple type or None if illegal)
COMPOUND_OPERATORS: dict[str, tuple[str, LexemeType, Optional[LexemeType]]] = {
    "<": ("=", LexemeType.LESS_EQUAL, LexemeType.LESS),
    ">": ("=", LexemeType.GREATER_EQUAL, LexemeType.GREATER),
    "=": ("=", LexemeType.EQUAL, LexemeType.ASSIGN),
    "!": ("=", LexemeType.NOT_EQUAL, LexemeType.NOT),
    "&": ("&", LexemeType.AND, None),
    "|": ("|", LexemeType.OR, None),
}

ESCAPE_SEQUENCES = {
    "n": "\n",
    "t": "\t",
    "r": "\r",
    "\\": "\\",
    '"': '"',
    "0": "\0",
}


class Lexer:
    """
    Tokenizes OPaL source from a character stream.

    The lexer owns no text of its own; it reads through the stream it is
    given and never moves backwards.

    Usage:
        lexer = Lexer(CharacterStream(source, "main.opl"))
        lexemes = list(lexer.tokenize())

    Attributes:
        stream: The character stream being tokenized
    """

    def __init__(self, stream: CharacterStream):
        self.stream = stream
        self._eof: Optional[Lexeme] = None

    @property
    def filename(self) -> str:
        return self.stream.filename

    def tokenize(self) -> Iterator[Lexeme]:
        """
        Generate lexemes until the end of the stream.

        Yields:
            Lexeme objects, ending with exactly one End_of_file lexeme

        Raises:
            LexicalError: If the stream contains invalid input
        """
        while True:
            lexeme = self.next_lexeme()
            yield lexeme
            if lexeme.is_eof:
                return

    def next_lexeme(self) -> Lexeme:
        """
        Scan and return the next lexeme.

        Raises:
            IllegalCharacterError: On a character that starts no lexeme
            UnterminatedStringError: On a string missing its closing quote
        """
        if self._eof is not None:
            return self._eof

        self._skip_whitespace()

        if self.stream.at_end():
            line, column = self.stream.next_position()
            self._eof = Lexeme(LexemeType.EOF, line, column, filename=self.filename)
            return self._eof

        char = self.stream.advance()
        line, column = self.stream.line, self.stream.column

        if char in SINGLE_CHAR_LEXEMES:
            return self._make(SINGLE_CHAR_LEXEMES[char], line, column)

        if char in COMPOUND_OPERATORS:
            return self._scan_compound(char, line, column)

        if char == '"':
            return self._scan_string(line, column)

        if is_word_char(char):
            return classify(scan_word(self.stream, char), line, column, self.filename)

        raise IllegalCharacterError(
            char,
            SourceLocation(self.filename, line, column),
            source_line=self.stream.line_text(),
        )

    # =========================================================================
    # Scanning Helpers
    # =========================================================================

    def _make(self, lexeme_type: LexemeType, line: int, column: int) -> Lexeme:
        return Lexeme(lexeme_type, line, column, filename=self.filename)

    def _skip_whitespace(self) -> None:
        while self.stream.peek() in WHITESPACE:
            self.stream.advance()

    def _scan_compound(self, char: str, line: int, column: int) -> Lexeme:
        """
        Scan an operator that may be followed by a second character.

        The lookahead is consumed only when it completes the compound form.
        """
        second, compound_type, simple_type = COMPOUND_OPERATORS[char]
        location = SourceLocation(self.filename, line, column)

        if self.stream.at_end():
            raise IllegalCharacterError(
                char,
                location,
                hint=f"'{char}' needs a following character, found end of file",
                source_line=self.stream.line_text(),
            )

        if self.stream.match(second):
            return self._make(compound_type, line, column)

        if simple_type is None:
            raise IllegalCharacterError(
                char,
                location,
                hint=f"did you mean '{char}{char}'?",
                source_line=self.stream.line_text(),
            )

        return self._make(simple_type, line, column)

    def _scan_string(self, line: int, column: int) -> Lexeme:
        """
        Scan a double-quoted string literal after its opening quote.

        A string ends at the next unescaped quote on the same line. Unknown
        escapes keep the escaped character.
        """
        chars = []
        while True:
            char = self.stream.peek()
            if char in ("", "\n"):
                raise UnterminatedStringError(
                    SourceLocation(self.filename, line, column)
                )
            self.stream.advance()

            if char == '"':
                return Lexeme(
                    LexemeType.STRING,
                    line,
                    column,
                    text_value="".join(chars),
                    filename=self.filename,
                )

            if char == "\\":
                escaped = self.stream.peek()
                if escaped in ("", "\n"):
                    raise UnterminatedStringError(
                        SourceLocation(self.filename, line, column)
                    )
                self.stream.advance()
                chars.append(ESCAPE_SEQUENCES.get(escaped, escaped))
            else:
                chars.append(char)
