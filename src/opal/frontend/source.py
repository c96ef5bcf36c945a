"""
Character Source
================

A cursor over a readable binary stream. Every front end stage reads its
input through a ``CharacterStream``, which decodes bytes into characters
and tracks the line and column of the most recently returned character.

Position Tracking
-----------------
Lines and columns are 1-indexed. Before the first read the stream sits
at line 1, column 0. A newline character belongs to the line it ends;
the character after it is reported at column 1 of the next line:

    source: "ab\\ncd"
    a -> 1:1   b -> 1:2   \\n -> 1:3   c -> 2:1   d -> 2:2

Each stage creates its own stream and owns it exclusively, so nested
include expansion never shares a cursor with the file that included it.

Example Usage
-------------
>>> import io
>>> stream = CharacterStream(io.BytesIO(b"if x"), "test.opl")
>>> stream.advance(), stream.line, stream.column
('i', 1, 1)
>>> stream.peek(), stream.peek(1)
('f', ' ')
"""

import codecs
from collections import deque
from typing import BinaryIO

from opal.errors import SourceLocation
from opal.frontend.errors import SourceIOError


# Latin-1 maps every byte to exactly one character, so stages that copy
# characters through reproduce the input bytes exactly.
DEFAULT_ENCODING = "latin-1"

# Bytes requested from the underlying stream per read
READ_CHUNK_SIZE = 4096


class CharacterStream:
    """
    Forward-only character cursor with one-line lookahead buffering.

    Attributes:
        filename: Name used in error locations ("<input>" for anonymous streams)
        encoding: Codec used to decode the underlying bytes
        line: Line of the most recently returned character (1-indexed)
        column: Column of the most recently returned character (0 before any read)
        char: The most recently returned character ("" once EOF is reached)
    """

    def __init__(
        self,
        stream: BinaryIO,
        filename: str = "<input>",
        encoding: str = DEFAULT_ENCODING,
    ):
        self._stream = stream
        self.filename = filename
        self.encoding = encoding
        self._decoder = codecs.getincrementaldecoder(encoding)()

        self.line = 1
        self.column = 0
        self.char = ""

        # Decoded characters not yet consumed
        self._pending: deque[str] = deque()
        self._exhausted = False
        self._after_newline = False

        # Characters of the current line consumed so far (error context)
        self._line_chars: list[str] = []

    # =========================================================================
    # Character Access
    # =========================================================================

    def _fill(self, count: int) -> None:
        """Decode until at least ``count`` characters are pending or EOF."""
        while len(self._pending) < count and not self._exhausted:
            try:
                data = self._stream.read(READ_CHUNK_SIZE)
                text = self._decoder.decode(data, final=not data)
            except (OSError, UnicodeDecodeError) as e:
                raise SourceIOError(self.filename, str(e)) from e
            if not data:
                self._exhausted = True
            self._pending.extend(text)

    def peek(self, offset: int = 0) -> str:
        """
        Look at the character ``offset`` places past the cursor.

        Returns empty string if that position is past the end of input.
        """
        self._fill(offset + 1)
        if offset < len(self._pending):
            return self._pending[offset]
        return ""

    def at_end(self) -> bool:
        """Check if every character has been consumed."""
        return self.peek() == ""

    def advance(self) -> str:
        """
        Consume and return the next character, updating the position.

        At end of input returns empty string and leaves the position where
        it was.
        """
        if self.at_end():
            self.char = ""
            return ""

        char = self._pending.popleft()

        if self._after_newline:
            self.line += 1
            self.column = 1
            self._line_chars = []
        else:
            self.column += 1

        self._after_newline = char == "\n"
        if not self._after_newline:
            self._line_chars.append(char)

        self.char = char
        return char

    def match(self, expected: str) -> bool:
        """Consume the next character if it equals ``expected``."""
        if self.peek() == expected:
            self.advance()
            return True
        return False

    # =========================================================================
    # Error Context
    # =========================================================================

    @property
    def location(self) -> SourceLocation:
        """SourceLocation of the most recently returned character."""
        return SourceLocation(self.filename, self.line, self.column)

    def next_position(self) -> tuple[int, int]:
        """Line and column the next character will be reported at."""
        if self._after_newline:
            return self.line + 1, 1
        return self.line, self.column + 1

    def line_text(self) -> str:
        """
        Return the full text of the current line.

        Reads ahead (without consuming) up to the next newline, so the
        returned text includes characters the cursor has not reached yet.
        """
        if self._after_newline:
            return "".join(self._line_chars)

        rest = []
        offset = 0
        while True:
            char = self.peek(offset)
            if char in ("", "\n"):
                break
            rest.append(char)
            offset += 1
        return "".join(self._line_chars) + "".join(rest)

    def __repr__(self) -> str:
        return f"CharacterStream({self.filename!r}, {self.line}:{self.column})"
