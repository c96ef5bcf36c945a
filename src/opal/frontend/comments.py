"""
Comment Stripper
================

Removes ``// ...`` and ``/* ... */`` comments from a character stream.

Every newline of the input survives, including newlines inside removed
block comments, so line numbers reported by later stages still match the
original source:

    input:   "a = 1; // one\\nb /* two\\nlines */ = 2;\\n"
    output:  "a = 1; \\nb \\n = 2;\\n"

Rules
-----
- ``//`` comments run to the end of the line or the end of the file.
- ``/* */`` comments end at the first ``*/``; they do not nest.
- End of file inside a block comment is an error.
- A ``/`` followed by anything else is copied through unchanged.

The stripper runs twice in the pipeline: once on the raw source and once
after include expansion, to clean comments that came in with included
files.
"""

import logging
from typing import BinaryIO

from opal.errors import SourceLocation
from opal.frontend.errors import UnterminatedCommentError
from opal.frontend.source import CharacterStream, DEFAULT_ENCODING

logger = logging.getLogger(__name__)


class CommentStripper:
    """
    Copies a character stream to a binary destination without comments.

    Usage:
        stripper = CommentStripper(CharacterStream(src, "main.opl"), dest)
        removed = stripper.process()

    Attributes:
        source: The stream being read
        dest: Binary stream receiving the comment-free text
        comment_count: Number of comments removed so far
    """

    def __init__(self, source: CharacterStream, dest: BinaryIO):
        self.source = source
        self.dest = dest
        self.comment_count = 0

    def process(self) -> int:
        """
        Strip every comment from the source.

        Returns:
            The number of comments removed

        Raises:
            UnterminatedCommentError: If the input ends inside a block comment
        """
        logger.debug("Stripping comments from %s", self.source.filename)

        while not self.source.at_end():
            char = self.source.advance()

            if char != "/":
                self._emit(char)
                continue

            if self.source.match("/"):
                self._skip_line_comment()
            elif self.source.peek() == "*":
                start = self.source.location
                self.source.advance()
                self._skip_block_comment(start)
            else:
                self._emit(char)

        logger.debug(
            "Removed %d comment(s) from %s", self.comment_count, self.source.filename
        )
        return self.comment_count

    def _emit(self, text: str) -> None:
        self.dest.write(text.encode(self.source.encoding))

    def _skip_line_comment(self) -> None:
        """Skip a ``//`` comment, keeping the newline that ends it."""
        while not self.source.at_end():
            if self.source.advance() == "\n":
                self._emit("\n")
                break
        self.comment_count += 1

    def _skip_block_comment(self, start: SourceLocation) -> None:
        """
        Skip a ``/* */`` comment, keeping the newlines inside it.

        Args:
            start: Location of the opening slash

        Raises:
            UnterminatedCommentError: If no ``*/`` follows
        """
        while not self.source.at_end():
            char = self.source.advance()
            if char == "*" and self.source.match("/"):
                self.comment_count += 1
                return
            if char == "\n":
                self._emit("\n")

        raise UnterminatedCommentError(start)


# =============================================================================
# Convenience Function
# =============================================================================

def strip_comments(
    source: BinaryIO,
    dest: BinaryIO,
    filename: str = "<input>",
    encoding: str = DEFAULT_ENCODING,
) -> int:
    """
    Copy ``source`` to ``dest`` with all comments removed.

    Args:
        source: Readable binary stream
        dest: Writable binary stream
        filename: Source filename for error reporting
        encoding: Codec used for both streams

    Returns:
        The number of comments removed
    """
    stream = CharacterStream(source, filename, encoding)
    return CommentStripper(stream, dest).process()
