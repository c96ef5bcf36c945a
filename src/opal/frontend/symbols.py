"""
Symbol Table
============

The symbol table is the ordered sequence of lexemes produced by one full
lexing pass. It is not a name/scope table: it is the token stream that a
parser would consume.

Invariant: the table is never empty, and its last element is its only
End_of_file lexeme.
"""

import logging
from typing import Iterable, Iterator, Sequence, TextIO

from opal.frontend.lexemes import Lexeme, LexemeType
from opal.frontend.lexer import Lexer
from opal.frontend.source import CharacterStream

logger = logging.getLogger(__name__)


class SymbolTable(Sequence[Lexeme]):
    """
    Ordered, read-only sequence of lexemes ending with End_of_file.

    Attributes:
        filename: Name of the stream the lexemes were read from
    """

    def __init__(self, lexemes: Iterable[Lexeme], filename: str = "<input>"):
        self._lexemes: list[Lexeme] = list(lexemes)
        self.filename = filename

        eof_count = sum(1 for lexeme in self._lexemes if lexeme.is_eof)
        if not self._lexemes or not self._lexemes[-1].is_eof or eof_count != 1:
            raise ValueError(
                "symbol table must end with exactly one End_of_file lexeme"
            )

    def __getitem__(self, index):
        return self._lexemes[index]

    def __len__(self) -> int:
        return len(self._lexemes)

    def __iter__(self) -> Iterator[Lexeme]:
        return iter(self._lexemes)

    def __repr__(self) -> str:
        return f"SymbolTable({self.filename!r}, {len(self)} lexemes)"

    def types(self) -> list[LexemeType]:
        """Return the type of every lexeme, in order."""
        return [lexeme.type for lexeme in self._lexemes]

    def format(self) -> str:
        """Serialize the table, one lexeme per line."""
        return "".join(f"{lexeme.format()}\n" for lexeme in self._lexemes)

    def write(self, dest: TextIO) -> None:
        """Write the serialized table to a text stream."""
        dest.write(self.format())


def build_symbol_table(stream: CharacterStream) -> SymbolTable:
    """
    Lex a whole stream into a symbol table.

    Args:
        stream: Comment-free, include-expanded source

    Returns:
        SymbolTable ending with the End_of_file lexeme

    Raises:
        LexicalError: If the stream contains invalid input
    """
    logger.debug("Building symbol table for %s", stream.filename)

    lexemes = []
    for lexeme in Lexer(stream).tokenize():
        logger.debug("Append lexeme %s", lexeme.format())
        lexemes.append(lexeme)

    logger.debug("Symbol table for %s holds %d lexemes", stream.filename, len(lexemes))
    return SymbolTable(lexemes, stream.filename)
