"""
opalc - OPaL Front End Command-Line Interface
=============================================

Runs the OPaL front end over a source file: strips comments, expands
``#include`` directives and prints the resulting symbol table, one
lexeme per line.

Usage Examples
--------------
Print the symbol table:
    $ opalc hello.opl

Write it to a file:
    $ opalc hello.opl -o hello.lex

With an include search path:
    $ opalc -I ./lib hello.opl

Preprocess only:
    $ opalc -E hello.opl

HTML report and debug log:
    $ opalc -r report.html -l opalc.log -d hello.opl

Exit Codes
----------
0 - Success
1 - Unreadable source, or error in the source (comment, include or lexical)
2 - Invalid arguments, including an unusable log file
3 - Internal error
"""

import logging
from pathlib import Path
from typing import Optional

import click

from opal import __version__
from opal.cli.errors import handle_cli_exception
from opal.frontend.pipeline import FrontEnd, FrontEndOptions
from opal.frontend.report import write_report

logger = logging.getLogger(__name__)


def setup_logging(debug: bool, log_file: Optional[Path]) -> None:
    """
    Configure logging for one CLI run.

    Records go to ``log_file`` (appended) when given, otherwise to stderr.
    Only warnings are shown unless ``debug`` is set.
    """
    level = logging.DEBUG if debug else logging.WARNING

    if log_file is not None:
        handler: logging.Handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        fmt = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
    else:
        handler = logging.StreamHandler()
        fmt = "%(levelname)s: %(message)s" if debug else "%(message)s"

    logging.basicConfig(level=level, format=fmt, handlers=[handler], force=True)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, writable=True, path_type=Path),
    help="Write output to FILE instead of standard output",
)
@click.option(
    "-I", "--include",
    multiple=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Add include search path (can be repeated)",
)
@click.option(
    "-E", "--preprocess-only",
    is_flag=True,
    help="Strip comments and expand includes only; output the source",
)
@click.option(
    "-r", "--report",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write an HTML compilation report to FILE",
)
@click.option(
    "-l", "--log",
    "log_file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Append log messages to FILE instead of standard error",
)
@click.option(
    "-d", "--debug",
    is_flag=True,
    help="Log debug messages",
)
@click.option(
    "--max-include-depth",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum include nesting (default: 16, or OPAL_MAX_INCLUDE_DEPTH)",
)
@click.version_option(version=__version__, prog_name="opalc")
def main(
    input_file: Path,
    output: Optional[Path],
    include: tuple[Path, ...],
    preprocess_only: bool,
    report: Optional[Path],
    log_file: Optional[Path],
    debug: bool,
    max_include_depth: Optional[int],
) -> None:
    """
    Tokenize an OPaL source file.

    INPUT_FILE is the OPaL source file to process.

    Comments are removed, #include directives are replaced by the named
    files and the result is split into lexemes. Each lexeme is printed as

    \b
        {line: NNN, col: NNN, lx_type: NAME, val: 'TEXT'}

    \b
    Examples:
        opalc hello.opl                 # Symbol table to stdout
        opalc hello.opl -o hello.lex    # Symbol table to file
        opalc -I lib/ hello.opl         # Add include path
        opalc -E hello.opl              # Preprocess only
    """
    try:
        setup_logging(debug, log_file)

        options = FrontEndOptions.from_env()
        options.include_paths = [str(p) for p in include] + options.include_paths
        if max_include_depth is not None:
            options.max_include_depth = max_include_depth

        logger.debug("Source: %s", input_file)
        logger.debug("Include paths: %s", ", ".join(options.include_paths))

        front_end = FrontEnd(options)

        if preprocess_only:
            result = front_end.preprocess_file(input_file)
            data = result.preprocessed
        else:
            result = front_end.process_file(input_file)
            data = result.symbol_table.format().encode("utf-8")

        if report is not None:
            write_report(result, report, options.encoding)

        if output is not None:
            output.write_bytes(data)
            logger.debug("Wrote %d bytes to %s", len(data), output)
        else:
            click.get_binary_stream("stdout").write(data)

        if result.symbol_table is not None:
            logger.debug("Tokenized: %d lexemes", result.token_count)

    except Exception as e:
        handle_cli_exception(e, verbose=debug)


if __name__ == "__main__":
    main()
