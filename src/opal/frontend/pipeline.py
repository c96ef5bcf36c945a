"""
Front End Pipeline
==================

Runs the complete front end over one source:

    Source → Strip comments → Expand includes → Strip comments → Lex → Symbol table

The second stripping pass removes comments that arrived with included
files. Intermediate text is staged in memory; every stage reads its input
through a fresh CharacterStream, so no cursor is shared between stages.

Usage
-----
Command line:
    $ opalc hello.opl -o hello.lex

Programmatic:
    >>> from opal.frontend import tokenize_source
    >>> table = tokenize_source("print(1);")
    >>> [lexeme.type.value for lexeme in table]
    ['Keyword_print', 'LeftParen', 'Integer', 'RightParen', 'Semicolon', 'End_of_file']
"""

import io
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from opal.errors import LocatedError
from opal.frontend.comments import CommentStripper
from opal.frontend.errors import SourceIOError
from opal.frontend.includes import DEFAULT_MAX_INCLUDE_DEPTH, IncludeExpander
from opal.frontend.source import CharacterStream, DEFAULT_ENCODING
from opal.frontend.symbols import SymbolTable, build_symbol_table

logger = logging.getLogger(__name__)


@dataclass
class FrontEndOptions:
    """
    Front end configuration options.

    Attributes:
        include_paths: Directories searched for relative include names,
                       after the directory of the including file
        max_include_depth: Maximum include nesting before giving up
        encoding: Codec used to decode sources and included files
    """
    include_paths: list[str] = field(default_factory=lambda: ["."])
    max_include_depth: int = DEFAULT_MAX_INCLUDE_DEPTH
    encoding: str = DEFAULT_ENCODING

    @classmethod
    def from_env(cls) -> "FrontEndOptions":
        """
        Create FrontEndOptions from environment variables.

        Environment variables (all optional):
            OPAL_INCLUDE_PATH: Include directories, separated by os.pathsep
            OPAL_MAX_INCLUDE_DEPTH: Maximum include nesting (integer)
        """
        options = cls()

        if include_path := os.environ.get("OPAL_INCLUDE_PATH"):
            options.include_paths = [p for p in include_path.split(os.pathsep) if p]

        if max_depth := os.environ.get("OPAL_MAX_INCLUDE_DEPTH"):
            try:
                options.max_include_depth = int(max_depth)
            except ValueError:
                logger.warning(
                    "Ignoring OPAL_MAX_INCLUDE_DEPTH=%r: not an integer", max_depth
                )

        return options


@dataclass
class FrontEndResult:
    """
    Result of running the front end over one source.

    Attributes:
        filename: Name of the source
        source: Original source bytes
        stripped: Source after the first comment pass
        expanded: Source after include expansion
        preprocessed: Source after the second comment pass (input to the lexer)
        included_files: Files inlined, in inclusion order
        comment_count: Comments removed across both passes
        symbol_table: Lexemes of the preprocessed source (None when only
                      preprocessing was requested)
    """
    filename: str
    source: bytes = b""
    stripped: bytes = b""
    expanded: bytes = b""
    preprocessed: bytes = b""
    included_files: list[Path] = field(default_factory=list)
    comment_count: int = 0
    symbol_table: Optional[SymbolTable] = None

    @property
    def token_count(self) -> int:
        return len(self.symbol_table) if self.symbol_table is not None else 0


class FrontEnd:
    """
    Source-to-token front end for OPaL.

    Example:
        front_end = FrontEnd(FrontEndOptions(include_paths=["lib"]))
        result = front_end.process_file("hello.opl")
        print(result.symbol_table.format())

    Attributes:
        options: Front end configuration options
    """

    def __init__(self, options: Optional[FrontEndOptions] = None):
        self.options = options or FrontEndOptions()

    # =========================================================================
    # Public Interface
    # =========================================================================

    def process_source(
        self,
        source: Union[bytes, str],
        filename: str = "<input>",
    ) -> FrontEndResult:
        """
        Preprocess and tokenize source text.

        Args:
            source: Source bytes, or text encoded with the configured encoding
            filename: Source filename for error messages and include lookup

        Returns:
            FrontEndResult with every intermediate stage and the symbol table

        Raises:
            FrontEndError: If any stage fails
        """
        result = self.preprocess_source(source, filename)
        try:
            result.symbol_table = self._lex(result.preprocessed, filename)
        except LocatedError as e:
            self._note_merged_stream(e, result)
            raise
        return result

    def process_file(self, path: Union[str, Path]) -> FrontEndResult:
        """
        Preprocess and tokenize a source file.

        Raises:
            SourceIOError: If the file cannot be read
            FrontEndError: If any stage fails
        """
        filename, source = self._read(path)
        return self.process_source(source, filename)

    def preprocess_source(
        self,
        source: Union[bytes, str],
        filename: str = "<input>",
    ) -> FrontEndResult:
        """
        Strip comments and expand includes without lexing.

        Returns:
            FrontEndResult whose symbol_table is None
        """
        if isinstance(source, str):
            source = source.encode(self.options.encoding)

        result = FrontEndResult(filename=filename, source=source)

        logger.debug("Comment stripping start: %s", filename)
        result.stripped, count = self._strip(source, filename)
        result.comment_count += count

        logger.debug("Include expansion start: %s", filename)
        result.expanded, result.included_files = self._expand(result.stripped, filename)

        logger.debug("Comment stripping of included content: %s", filename)
        try:
            result.preprocessed, count = self._strip(result.expanded, filename)
        except LocatedError as e:
            self._note_merged_stream(e, result)
            raise
        result.comment_count += count

        return result

    def preprocess_file(self, path: Union[str, Path]) -> FrontEndResult:
        """Strip comments and expand includes in a source file without lexing."""
        filename, source = self._read(path)
        return self.preprocess_source(source, filename)

    # =========================================================================
    # Stages
    # =========================================================================

    def _read(self, path: Union[str, Path]) -> tuple[str, bytes]:
        path = Path(path)
        logger.debug("Reading source %s", path)
        try:
            with open(path, "rb") as handle:
                return str(path), handle.read()
        except OSError as e:
            raise SourceIOError(str(path), e.strerror or str(e)) from e

    def _stream(self, data: bytes, filename: str) -> CharacterStream:
        return CharacterStream(io.BytesIO(data), filename, self.options.encoding)

    def _strip(self, data: bytes, filename: str) -> tuple[bytes, int]:
        dest = io.BytesIO()
        count = CommentStripper(self._stream(data, filename), dest).process()
        return dest.getvalue(), count

    def _expand(self, data: bytes, filename: str) -> tuple[bytes, list[Path]]:
        dest = io.BytesIO()
        expander = IncludeExpander(
            self._stream(data, filename),
            dest,
            include_paths=self.options.include_paths,
            max_depth=self.options.max_include_depth,
        )
        included = expander.process()
        return dest.getvalue(), included

    def _lex(self, data: bytes, filename: str) -> SymbolTable:
        logger.debug("Lexical analysis start: %s", filename)
        return build_symbol_table(self._stream(data, filename))

    def _note_merged_stream(self, error: LocatedError, result: FrontEndResult) -> None:
        """
        Mark an error located in the include-expanded stream.

        Its line numbers count lines of the merged text, not of the file
        named in the location, once anything has been included.
        """
        if result.included_files:
            error.add_hint(
                f"line numbers refer to {result.filename} after expansion of "
                f"{len(result.included_files)} included file(s)"
            )


# =============================================================================
# Convenience Functions
# =============================================================================

def tokenize_source(
    source: Union[bytes, str],
    filename: str = "<input>",
    options: Optional[FrontEndOptions] = None,
) -> SymbolTable:
    """
    Run the whole front end over source text and return its symbol table.

    Args:
        source: Source bytes or text
        filename: Source filename for error messages and include lookup
        options: Front end options (defaults if None)
    """
    return FrontEnd(options).process_source(source, filename).symbol_table


def tokenize_file(
    path: Union[str, Path],
    options: Optional[FrontEndOptions] = None,
) -> SymbolTable:
    """Run the whole front end over a source file and return its symbol table."""
    return FrontEnd(options).process_file(path).symbol_table
