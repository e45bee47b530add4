"""Command-line interface for structokens.

WHY: Training pipelines call the converter once per file from shell
scripts, so the stream has to land on stdout. Those pipelines also need
the vocabulary size and the id→name table to size embeddings and decode
predictions, so the same command answers both queries.

HOW: argparse takes up to two positionals. ``AMOUNT`` or ``MAPPING`` in
either position selects a vocabulary query. Any other first positional is
a source path, which goes through parse → traverse → emit → sort and is
then serialized by the chosen formatter. Status messages go to stderr.

RULES:
- ``structokens AMOUNT`` prints the amount (kind count + 1)
- ``structokens MAPPING`` prints the JSON id→name mapping
- ``structokens PATH [AMOUNT|MAPPING]``: a vocabulary mode wins over the path
- ``--format``: key from FORMATTERS (default: json)
- Exit 1 with ``Error: ...`` on stderr for unreadable, undecodable or
  unparseable files; invariant violations are not caught
- Stdout carries only the requested output
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from structokens.config import RECURSION_LIMIT, configure_logging
from structokens.core.vocabulary import amount, mapping
from structokens.formatters import DEFAULT_FORMAT, FORMATTERS
from structokens.parsing.parser import ParseError
from structokens.pipeline import tokenize_file

MODES = ("AMOUNT", "MAPPING")


def _status(msg: str) -> None:
    """Print a status message to stderr.

    RULES:
    - All status messages go to stderr
    - Always flush after writing
    """
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> None:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_mode(source: Optional[str], mode: Optional[str]) -> tuple:
    """Split the two positionals into (source path, vocabulary mode).

    RULES:
    - A lone AMOUNT/MAPPING positional is a mode, not a path
    - A second positional must be AMOUNT or MAPPING
    """
    if mode is None and source in MODES:
        return None, source
    if mode is not None and mode not in MODES:
        _fail("Unknown mode '{}'. Expected one of: {}".format(mode, ", ".join(MODES)))
    return source, mode


def _print_vocabulary(mode: str) -> None:
    if mode == "AMOUNT":
        print(amount())
    else:
        print(json.dumps(mapping()))


def _convert(source: str, format_key: str, verbose: bool) -> None:
    """Convert one source file and write the stream to stdout."""
    path = Path(source)
    if verbose:
        _status("Converting {}...".format(path))

    try:
        tokens = tokenize_file(path)
    except UnicodeDecodeError as exc:
        _fail("Cannot decode {}: {}".format(path, exc))
    except OSError as exc:
        _fail("Cannot read {}: {}".format(path, exc.strerror or exc))
    except ParseError as exc:
        _fail("Cannot parse {}: {}".format(path, exc))

    output = FORMATTERS[format_key]().format(tokens)
    sys.stdout.write(output.content)
    if output.content and not output.content.endswith("\n"):
        sys.stdout.write("\n")

    if verbose:
        _status("  {} tokens".format(len(tokens)))


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    RULES:
    - Positional: source (path, AMOUNT or MAPPING), optional mode
    - Optional: --format, --log-level, --verbose
    """
    parser = argparse.ArgumentParser(
        prog="structokens",
        description="Convert JavaScript source into a stream of structural tokens "
                    "(loops, functions, branches, assignments, calls...).",
    )

    parser.add_argument(
        "source",
        nargs="?",
        default=None,
        help="Path to a JavaScript file, or AMOUNT / MAPPING for vocabulary queries.",
    )

    parser.add_argument(
        "mode",
        nargs="?",
        default=None,
        help="Optional AMOUNT or MAPPING; takes precedence over the path.",
    )

    parser.add_argument(
        "--format",
        dest="format_key",
        choices=sorted(FORMATTERS.keys()),
        default=DEFAULT_FORMAT,
        help="Output format for the token stream (default: %(default)s).",
    )

    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level for diagnostics on stderr (default: STRUCTOKENS_LOG_LEVEL).",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print progress messages to stderr.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)

    source, mode = _resolve_mode(args.source, args.mode)
    if mode is not None:
        _print_vocabulary(mode)
        return

    if source is None:
        parser.print_usage(sys.stderr)
        _fail("A source path, AMOUNT or MAPPING is required")

    if sys.getrecursionlimit() < RECURSION_LIMIT:
        sys.setrecursionlimit(RECURSION_LIMIT)
    _convert(source, args.format_key, args.verbose)


if __name__ == "__main__":
    main()
