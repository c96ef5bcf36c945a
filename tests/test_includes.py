# =============================================================================
# test_includes.py - Include Expander Tests
# =============================================================================
# Tests for #include directive expansion.
#
# Test coverage includes:
#   - Directive syntax (quotes optional, case-insensitive keyword)
#   - Substitution of the directive by the file content, newline kept
#   - Search order: including file's directory, then include paths
#   - Nested includes and included files without a final newline
#   - Missing files, cycles and excessive nesting
# =============================================================================

import io
from pathlib import Path

import pytest

from opal.frontend.errors import (
    IncludeCycleError,
    IncludeTooDeepError,
    MissingIncludeError,
    PreprocessorError,
)
from opal.frontend import FrontEnd, FrontEndOptions, LexemeType
from opal.frontend.includes import IncludeExpander, expand_includes
from opal.frontend.source import CharacterStream


def expand(text: str, filename: str = "<test>", **kwargs) -> str:
    """Expand includes in ``text`` and return the result."""
    dest = io.BytesIO()
    expand_includes(io.BytesIO(text.encode("latin-1")), dest, filename, **kwargs)
    return dest.getvalue().decode("latin-1")


def expand_file(path: Path, **kwargs) -> tuple[str, list[Path]]:
    """Expand includes in a file, returning text and included paths."""
    dest = io.BytesIO()
    with open(path, "rb") as handle:
        expander = IncludeExpander(CharacterStream(handle, str(path)), dest, **kwargs)
        included = expander.process()
    return dest.getvalue().decode("latin-1"), included


# =============================================================================
# Directive Syntax
# =============================================================================

class TestDirectiveSyntax:
    """Test recognition of the include directive."""

    def test_substitution(self, tmp_path):
        """The directive becomes the file content; its own newline follows."""
        (tmp_path / "f.opl").write_bytes(b"X\n")
        result = expand('A\n#include "f.opl"\nB', include_paths=[str(tmp_path)])
        assert result == "A\nX\n\nB"

    def test_quotes_optional(self, tmp_path):
        """The file name may be written without quotes."""
        (tmp_path / "f.opl").write_bytes(b"X")
        result = expand("#include f.opl\n", include_paths=[str(tmp_path)])
        assert result == "X\n"

    def test_keyword_case_insensitive(self, tmp_path):
        """INCLUDE and Include are accepted."""
        (tmp_path / "f.opl").write_bytes(b"X")
        for directive in ("#INCLUDE", "#Include", "#iNcLuDe"):
            result = expand(f'{directive} "f.opl"\n', include_paths=[str(tmp_path)])
            assert result == "X\n", directive

    def test_directive_at_eof_without_newline(self, tmp_path):
        """A directive on the last line needs no trailing newline."""
        (tmp_path / "f.opl").write_bytes(b"X")
        result = expand('A\n#include "f.opl"', include_paths=[str(tmp_path)])
        assert result == "A\nX"

    def test_surrounding_whitespace_ignored(self, tmp_path):
        """Whitespace around the name, CR included, is dropped."""
        (tmp_path / "f.opl").write_bytes(b"X")
        result = expand('#include   "f.opl"  \r\n', include_paths=[str(tmp_path)])
        assert result == "X\n"

    def test_directive_mid_line(self, tmp_path):
        """A directive is recognized anywhere on a line."""
        (tmp_path / "f.opl").write_bytes(b"X")
        result = expand('a; #include "f.opl"\nb', include_paths=[str(tmp_path)])
        assert result == "a; X\nb"

    def test_hash_without_directive(self):
        """A '#' that does not start a directive is copied through."""
        assert expand("a # b\n#define X\n#") == "a # b\n#define X\n#"

    def test_include_without_space(self):
        """'#include' must be followed by a space."""
        assert expand('#include"f.opl"\n') == '#include"f.opl"\n'

    def test_source_without_directives(self):
        """Source without directives is copied unchanged."""
        source = "while (x < 10) {\n  x = x + 1;\n}\n"
        assert expand(source) == source

    def test_empty_name(self):
        """A directive naming no file is an error."""
        with pytest.raises(MissingIncludeError):
            expand('#include ""\n')


# =============================================================================
# Resolution
# =============================================================================

class TestResolution:
    """Test where include files are looked up."""

    def test_relative_to_including_file(self, tmp_path):
        """Names resolve against the including file's directory first."""
        (tmp_path / "lib.opl").write_bytes(b"LIB")
        main = tmp_path / "main.opl"
        main.write_bytes(b'#include "lib.opl"\n')
        result, included = expand_file(main, include_paths=[])
        assert result == "LIB\n"
        assert included == [tmp_path / "lib.opl"]

    def test_including_directory_before_search_paths(self, tmp_path):
        """A file beside the includer wins over one in a search path."""
        other = tmp_path / "other"
        other.mkdir()
        (other / "lib.opl").write_bytes(b"OTHER")
        src = tmp_path / "src"
        src.mkdir()
        (src / "lib.opl").write_bytes(b"LOCAL")
        main = src / "main.opl"
        main.write_bytes(b'#include "lib.opl"\n')
        result, _ = expand_file(main, include_paths=[str(other)])
        assert result == "LOCAL\n"

    def test_search_paths_in_order(self, tmp_path):
        """Search paths are tried in the order given."""
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()
        (first / "lib.opl").write_bytes(b"FIRST")
        (second / "lib.opl").write_bytes(b"SECOND")
        result = expand('#include "lib.opl"\n', include_paths=[str(second), str(first)])
        assert result == "SECOND\n"

    def test_absolute_path(self, tmp_path):
        """Absolute names are used as-is."""
        target = tmp_path / "abs.opl"
        target.write_bytes(b"ABS")
        result = expand(f'#include "{target}"\n', include_paths=[])
        assert result == "ABS\n"

    def test_subdirectory_name(self, tmp_path):
        """Names may contain directories."""
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "f.opl").write_bytes(b"SUB")
        result = expand('#include "sub/f.opl"\n', include_paths=[str(tmp_path)])
        assert result == "SUB\n"

    def test_missing_file(self, tmp_path):
        """A name found nowhere raises MissingIncludeError."""
        with pytest.raises(MissingIncludeError) as exc_info:
            expand('x;\n#include "nope.opl"\n', include_paths=[str(tmp_path)])
        error = exc_info.value
        assert error.included_filename == "nope.opl"
        assert error.search_paths == [str(tmp_path)]
        assert (error.location.line, error.location.column) == (2, 1)
        assert "searched in" in str(error)

    def test_missing_absolute_file(self, tmp_path):
        """A missing absolute path raises MissingIncludeError."""
        with pytest.raises(MissingIncludeError):
            expand(f'#include "{tmp_path / "gone.opl"}"\n')

    def test_directory_is_not_a_file(self, tmp_path):
        """A directory with the included name does not satisfy the directive."""
        (tmp_path / "dir.opl").mkdir()
        with pytest.raises(MissingIncludeError):
            expand('#include "dir.opl"\n', include_paths=[str(tmp_path)])

    def test_missing_is_preprocessor_error(self, tmp_path):
        """MissingIncludeError is a PreprocessorError."""
        with pytest.raises(PreprocessorError):
            expand('#include "nope.opl"\n', include_paths=[str(tmp_path)])


# =============================================================================
# Nesting
# =============================================================================

class TestNesting:
    """Test nested includes, cycles and the depth limit."""

    def test_nested_include(self, tmp_path):
        """Directives inside included files are expanded."""
        (tmp_path / "a.opl").write_bytes(b'A1\n#include "b.opl"\nA2\n')
        (tmp_path / "b.opl").write_bytes(b"B\n")
        result = expand('#include "a.opl"\nmain\n', include_paths=[str(tmp_path)])
        assert result == "A1\nB\n\nA2\n\nmain\n"

    def test_nested_relative_to_included_file(self, tmp_path):
        """A nested name resolves against the directory of its own file."""
        lib = tmp_path / "lib"
        lib.mkdir()
        (lib / "outer.opl").write_bytes(b'#include "inner.opl"\n')
        (lib / "inner.opl").write_bytes(b"INNER")
        result = expand('#include "lib/outer.opl"\n', include_paths=[str(tmp_path)])
        assert result == "INNER\n\n"

    def test_included_files_in_order(self, tmp_path):
        """process returns every included file, nested ones in place."""
        (tmp_path / "a.opl").write_bytes(b'#include "b.opl"\n')
        (tmp_path / "b.opl").write_bytes(b"")
        (tmp_path / "c.opl").write_bytes(b"")
        main = tmp_path / "main.opl"
        main.write_bytes(b'#include "a.opl"\n#include "c.opl"\n')
        _, included = expand_file(main)
        assert [p.name for p in included] == ["a.opl", "b.opl", "c.opl"]

    def test_same_file_twice_is_not_a_cycle(self, tmp_path):
        """Including one file twice in sequence is allowed."""
        (tmp_path / "f.opl").write_bytes(b"X\n")
        result = expand(
            '#include "f.opl"\n#include "f.opl"\n', include_paths=[str(tmp_path)]
        )
        assert result == "X\n\nX\n\n"

    def test_comments_in_included_file_kept(self, tmp_path):
        """The expander copies included text verbatim, comments included."""
        (tmp_path / "f.opl").write_bytes(b"x; // note\n")
        result = expand('#include "f.opl"\n', include_paths=[str(tmp_path)])
        assert result == "x; // note\n\n"

    def test_self_include(self, tmp_path):
        """A file including itself is a cycle."""
        main = tmp_path / "main.opl"
        main.write_bytes(b'#include "main.opl"\n')
        with pytest.raises(IncludeCycleError):
            expand_file(main)

    def test_indirect_cycle(self, tmp_path):
        """a -> b -> a is a cycle, reported with the chain."""
        (tmp_path / "a.opl").write_bytes(b'#include "b.opl"\n')
        (tmp_path / "b.opl").write_bytes(b'#include "a.opl"\n')
        with pytest.raises(IncludeCycleError) as exc_info:
            expand('#include "a.opl"\n', include_paths=[str(tmp_path)])
        error = exc_info.value
        assert error.path.name == "a.opl"
        assert [p.name for p in error.chain] == ["a.opl", "b.opl"]
        assert "include chain" in str(error)

    def test_depth_limit(self, tmp_path):
        """Nesting beyond max_depth raises IncludeTooDeepError."""
        for i in range(5):
            (tmp_path / f"f{i}.opl").write_bytes(f'#include "f{i + 1}.opl"\n'.encode())
        (tmp_path / "f5.opl").write_bytes(b"END")

        result = expand('#include "f0.opl"\n', include_paths=[str(tmp_path)], max_depth=6)
        assert result == "END" + "\n" * 6

        with pytest.raises(IncludeTooDeepError) as exc_info:
            expand('#include "f0.opl"\n', include_paths=[str(tmp_path)], max_depth=5)
        assert exc_info.value.max_depth == 5


# =============================================================================
# Included File Boundaries
# =============================================================================

class TestIncludedFileBoundary:
    """Text after a directive stays separate from the included content."""

    def tokens(self, source, tmp_path):
        options = FrontEndOptions(include_paths=[str(tmp_path)])
        return FrontEnd(options).process_source(source).symbol_table

    def test_identifier_at_end_of_file(self, tmp_path):
        """An identifier ending the file does not merge with the next line."""
        (tmp_path / "f.opl").write_bytes(b"a")
        assert expand('#include "f.opl"\nb;', include_paths=[str(tmp_path)]) == "a\nb;"

        table = self.tokens('#include "f.opl"\nb;', tmp_path)
        names = [t.text_value for t in table if t.type == LexemeType.IDENTIFIER]
        assert names == ["a", "b"]
        assert (table[1].line, table[1].column) == (2, 1)

    def test_line_comment_at_end_of_file(self, tmp_path):
        """A trailing // comment does not swallow the includer's next line."""
        (tmp_path / "f.opl").write_bytes(b"x = 1; // note")
        source = '#include "f.opl"\ny = 2;\n'
        assert expand(source, include_paths=[str(tmp_path)]) == "x = 1; // note\ny = 2;\n"

        table = self.tokens(source, tmp_path)
        names = [t.text_value for t in table if t.type == LexemeType.IDENTIFIER]
        assert names == ["x", "y"]
        assert table.types()[-5:] == [
            LexemeType.IDENTIFIER,
            LexemeType.ASSIGN,
            LexemeType.INTEGER,
            LexemeType.SEMICOLON,
            LexemeType.EOF,
        ]

    def test_block_comment_closed_by_includer(self, tmp_path):
        """A /* opened in the included file may close in the includer."""
        (tmp_path / "f.opl").write_bytes(b"x; /* start")
        source = '#include "f.opl"\nend */ y;\n'
        expanded = expand(source, include_paths=[str(tmp_path)])
        assert expanded == "x; /* start\nend */ y;\n"

        result = FrontEnd(FrontEndOptions(include_paths=[str(tmp_path)])).process_source(source)
        assert result.preprocessed == b"x; \n y;\n"
        names = [t.text_value for t in result.symbol_table if t.type == LexemeType.IDENTIFIER]
        assert names == ["x", "y"]

    def test_empty_included_file(self, tmp_path):
        """An empty included file leaves only the directive's newline."""
        (tmp_path / "f.opl").write_bytes(b"")
        assert expand('a\n#include "f.opl"\nb', include_paths=[str(tmp_path)]) == "a\n\nb"
