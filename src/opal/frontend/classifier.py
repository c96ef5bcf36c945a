"""
Word Classifier
===============

Turns a maximal run of word characters (letters, digits, underscore)
into a keyword, integer or identifier lexeme.

Precedence
----------
1. Exact match in the keyword table  ->  keyword lexeme
2. Digits only                       ->  Integer lexeme
3. Anything else                     ->  Identifier lexeme

A run is never split: ``12a`` is one identifier, not ``12`` then ``a``.
Integer literals carry no sign; a leading ``-`` is a separate operator.

Example
-------
>>> classify("while", 1, 1).type
<LexemeType.WHILE: 'Keyword_While'>
>>> classify("007", 1, 1).int_value
7
>>> classify("ifx", 1, 1).text_value
'ifx'
"""

import re
import string

from opal.frontend.lexemes import KEYWORDS, Lexeme, LexemeType
from opal.frontend.source import CharacterStream


# Characters that make up a word
WORD_CHARS = frozenset(string.ascii_letters + string.digits + "_")

INTEGER_PATTERN = re.compile(r"[0-9]+")


def is_word_char(char: str) -> bool:
    """Return True if ``char`` can appear in an identifier, keyword or integer."""
    return char in WORD_CHARS


def scan_word(stream: CharacterStream, first: str) -> str:
    """
    Collect a maximal run of word characters.

    Args:
        stream: Stream positioned just after ``first``
        first: The already-consumed first character of the run

    Returns:
        The complete run, ``first`` included
    """
    chars = [first]
    while is_word_char(stream.peek()):
        chars.append(stream.advance())
    return "".join(chars)


def classify(
    text: str,
    line: int,
    column: int,
    filename: str = "<input>",
) -> Lexeme:
    """
    Classify a word as keyword, integer or identifier.

    Args:
        text: A non-empty run of word characters
        line: Line where the run starts
        column: Column where the run starts
        filename: Source filename for the lexeme location

    Returns:
        The classified Lexeme
    """
    keyword = KEYWORDS.get(text)
    if keyword is not None:
        return Lexeme(keyword, line, column, text_value=text, filename=filename)

    if INTEGER_PATTERN.fullmatch(text):
        return Lexeme(
            LexemeType.INTEGER, line, column, int_value=int(text), filename=filename
        )

    return Lexeme(LexemeType.IDENTIFIER, line, column, text_value=text, filename=filename)
