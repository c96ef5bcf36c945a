"""
HTML Compilation Report
=======================

Renders a single self-contained HTML page showing what the front end did
to one source: the original text, the preprocessed text handed to the
lexer, the included files and the symbol table.
"""

import html
import logging
from pathlib import Path
from typing import Union

from opal.frontend.pipeline import FrontEndResult

logger = logging.getLogger(__name__)


_STYLE = """\
body { font-family: sans-serif; margin: 2em; }
pre { background: #f4f4f4; border: 1px solid #ccc; padding: 0.5em; overflow: auto; }
table { border-collapse: collapse; }
th, td { border: 1px solid #ccc; padding: 0.2em 0.6em; text-align: left; }
td.num { text-align: right; font-family: monospace; }
"""


def _text(data: bytes, encoding: str) -> str:
    return html.escape(data.decode(encoding, errors="replace"))


def _symbol_rows(result: FrontEndResult) -> list[str]:
    rows = []
    for lexeme in result.symbol_table or ():
        value = lexeme.int_value if lexeme.int_value is not None else lexeme.text_value
        rows.append(
            "<tr>"
            f'<td class="num">{lexeme.line}</td>'
            f'<td class="num">{lexeme.column}</td>'
            f"<td>{html.escape(lexeme.type.value)}</td>"
            f"<td><code>{html.escape('' if value is None else str(value))}</code></td>"
            "</tr>"
        )
    return rows


def render_report(result: FrontEndResult, encoding: str = "latin-1") -> str:
    """
    Render the HTML report for one front end run.

    Args:
        result: Result of FrontEnd.process_source / process_file
        encoding: Codec used to show the source bytes

    Returns:
        A complete HTML document
    """
    title = f"OPaL compilation report: {result.filename}"
    parts = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="utf-8">',
        f"<title>{html.escape(title)}</title>",
        f"<style>\n{_STYLE}</style>",
        "</head>",
        "<body>",
        f"<h1>{html.escape(title)}</h1>",
        "<h2>Original source</h2>",
        f"<pre>{_text(result.source, encoding)}</pre>",
    ]

    if result.included_files:
        parts.append("<h2>Included files</h2>")
        parts.append("<ol>")
        for path in result.included_files:
            parts.append(f"<li><code>{html.escape(str(path))}</code></li>")
        parts.append("</ol>")

    parts.append(
        f"<h2>Preprocessed source</h2>"
        f"<p>{result.comment_count} comment(s) removed.</p>"
    )
    parts.append(f"<pre>{_text(result.preprocessed, encoding)}</pre>")

    if result.symbol_table is not None:
        parts.append(f"<h2>Symbol table ({len(result.symbol_table)} lexemes)</h2>")
        parts.append("<table>")
        parts.append("<tr><th>Line</th><th>Column</th><th>Type</th><th>Value</th></tr>")
        parts.extend(_symbol_rows(result))
        parts.append("</table>")

    parts.extend(["</body>", "</html>", ""])
    return "\n".join(parts)


def write_report(
    result: FrontEndResult,
    path: Union[str, Path],
    encoding: str = "latin-1",
) -> None:
    """Write the HTML report for ``result`` to ``path``."""
    logger.debug("Writing HTML report to %s", path)
    Path(path).write_text(render_report(result, encoding), encoding="utf-8")
