"""
Include Expander
================

Replaces every ``#include`` directive with the content of the named file.

Directive Syntax
----------------
    #include "path/to/file.opl"
    #include path/to/file.opl

The word ``include`` is matched case-insensitively and must be followed
by a space. The rest of the line up to the newline is the file name;
double quotes anywhere in it are dropped and surrounding whitespace is
ignored. The directive is replaced by the file content; the newline that
ends the directive is written after it, so text following the directive
never joins the last line of the included file. A ``#`` that does not
start a directive is copied through.

Resolution
----------
Absolute paths are used as-is. Relative paths are searched in:

1. the directory of the file containing the directive (when known)
2. each directory of ``include_paths`` in order (default: ".")

Included Content
----------------
The included bytes are copied verbatim, except that directives inside the
included file are expanded in turn, each by a nested expander reading its
own stream. Comments in included files are left in place; the pipeline
strips them in a second pass.

A file that is already being expanded further up the chain is a cycle and
raises ``IncludeCycleError``. Nesting deeper than ``max_depth`` raises
``IncludeTooDeepError``.
"""

import logging
from pathlib import Path
from typing import BinaryIO, Optional, Sequence

from opal.errors import SourceLocation
from opal.frontend.errors import (
    IncludeCycleError,
    IncludeTooDeepError,
    MissingIncludeError,
)
from opal.frontend.source import CharacterStream, DEFAULT_ENCODING

logger = logging.getLogger(__name__)


# Text following '#' that introduces a directive (compared case-insensitively)
DIRECTIVE = "include "

DEFAULT_MAX_INCLUDE_DEPTH = 16


class IncludeExpander:
    """
    Copies a character stream to a binary destination, inlining includes.

    When the source stream's filename names an existing file and no
    ``stack`` is given, that file's directory becomes ``base_dir`` (unless
    one is passed) and the file itself counts as being expanded, so a
    directive that includes it is reported as a cycle.

    Usage:
        expander = IncludeExpander(CharacterStream(src, "main.opl"), dest)
        included = expander.process()

    Attributes:
        source: The stream being read
        dest: Binary stream receiving the expanded text
        include_paths: Directories searched for relative include names
        max_depth: Maximum include nesting
        base_dir: Directory of the file being expanded, searched first
        included_files: Paths inlined so far, in order, nested ones included
    """

    def __init__(
        self,
        source: CharacterStream,
        dest: BinaryIO,
        include_paths: Optional[Sequence[str]] = None,
        max_depth: int = DEFAULT_MAX_INCLUDE_DEPTH,
        base_dir: Optional[Path] = None,
        stack: Optional[Sequence[Path]] = None,
        depth: int = 0,
    ):
        self.source = source
        self.dest = dest
        self.include_paths = list(include_paths) if include_paths is not None else ["."]
        self.max_depth = max_depth
        self.base_dir = base_dir
        self.included_files: list[Path] = []

        # Resolved paths of the files currently being expanded
        self._stack: list[Path] = list(stack or [])
        self._depth = depth

        if stack is None:
            origin = Path(source.filename)
            if origin.is_file():
                self._stack.append(origin.resolve())
                if self.base_dir is None:
                    self.base_dir = origin.parent

    def process(self) -> list[Path]:
        """
        Expand every directive in the source.

        Returns:
            Paths of all included files, in inclusion order

        Raises:
            MissingIncludeError: If a named file cannot be found or opened
            IncludeCycleError: If a file includes itself
            IncludeTooDeepError: If nesting exceeds max_depth
        """
        logger.debug("Expanding includes in %s", self.source.filename)

        while not self.source.at_end():
            char = self.source.advance()
            if char == "#" and self._at_directive():
                self._expand_directive()
            else:
                self._emit(char)

        return self.included_files

    def _emit(self, text: str) -> None:
        self.dest.write(text.encode(self.source.encoding))

    def _at_directive(self) -> bool:
        """Check whether the characters after '#' spell the directive."""
        lookahead = "".join(self.source.peek(i) for i in range(len(DIRECTIVE)))
        return lookahead.lower() == DIRECTIVE

    def _expand_directive(self) -> None:
        """Consume a directive line and inline the file it names."""
        location = self.source.location

        for _ in DIRECTIVE:
            self.source.advance()

        chars = []
        terminator = ""
        while not self.source.at_end():
            char = self.source.advance()
            if char == "\n":
                terminator = char
                break
            if char != '"':
                chars.append(char)

        name = "".join(chars).strip()
        if not name:
            raise MissingIncludeError(
                "", "no file named in #include directive", location
            )

        path = self._resolve(name, location)
        self._include(name, path, location)
        self._emit(terminator)

    def _search_dirs(self) -> list[Path]:
        dirs = [Path(p) for p in self.include_paths]
        if self.base_dir is not None:
            dirs.insert(0, self.base_dir)
        return dirs

    def _resolve(self, name: str, location: SourceLocation) -> Path:
        """
        Find the file an include directive names.

        Raises:
            MissingIncludeError: If no candidate exists
        """
        target = Path(name)
        if target.is_absolute():
            if target.is_file():
                return target
            raise MissingIncludeError(name, "file not found", location)

        search_dirs = self._search_dirs()
        for directory in search_dirs:
            candidate = directory / target
            if candidate.is_file():
                logger.debug("Resolved include '%s' to %s", name, candidate)
                return candidate

        raise MissingIncludeError(
            name,
            "file not found",
            location,
            search_paths=[str(d) for d in search_dirs],
        )

    def _include(self, name: str, path: Path, location: SourceLocation) -> None:
        """Inline one file, expanding its own directives with a nested expander."""
        resolved = path.resolve()
        if resolved in self._stack:
            raise IncludeCycleError(path, self._stack, location)
        if self._depth + 1 > self.max_depth:
            raise IncludeTooDeepError(path, self.max_depth, location)

        try:
            handle = open(path, "rb")
        except OSError as e:
            raise MissingIncludeError(name, e.strerror or str(e), location) from e

        logger.debug("Including %s (depth %d)", path, self._depth + 1)
        self.included_files.append(path)

        with handle:
            nested = IncludeExpander(
                CharacterStream(handle, str(path), self.source.encoding),
                self.dest,
                include_paths=self.include_paths,
                max_depth=self.max_depth,
                base_dir=path.parent,
                stack=[*self._stack, resolved],
                depth=self._depth + 1,
            )
            self.included_files.extend(nested.process())


# =============================================================================
# Convenience Function
# =============================================================================

def expand_includes(
    source: BinaryIO,
    dest: BinaryIO,
    filename: str = "<input>",
    include_paths: Optional[Sequence[str]] = None,
    max_depth: int = DEFAULT_MAX_INCLUDE_DEPTH,
    encoding: str = DEFAULT_ENCODING,
) -> list[Path]:
    """
    Copy ``source`` to ``dest`` with every include directive expanded.

    Args:
        source: Readable binary stream
        dest: Writable binary stream
        filename: Source filename for error reporting and resolution
        include_paths: Directories to search for includes
        max_depth: Maximum include nesting
        encoding: Codec used for both streams

    Returns:
        Paths of all included files, in inclusion order
    """
    expander = IncludeExpander(
        CharacterStream(source, filename, encoding),
        dest,
        include_paths=include_paths,
        max_depth=max_depth,
    )
    return expander.process()
