"""Output formatter registry.

WHY: The CLI and the HTTP API need a single lookup to find a formatter by
name. A central dict makes adding a format one import and one line.

HOW: FORMATTERS maps string keys to formatter *classes* (not instances).
Callers instantiate as needed: ``formatter = FORMATTERS["json"]()``.

RULES:
- Keys are short lowercase identifiers (used in CLI flags and query params)
- Values are BaseFormatter subclasses (not instances)
- DEFAULT_FORMAT is the key used when the caller does not choose
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from structokens.formatters.json_stream import JsonArrayFormatter, JsonLinesFormatter

if TYPE_CHECKING:
    from structokens.formatters.base import BaseFormatter

FORMATTERS: dict[str, type[BaseFormatter]] = {
    "json": JsonArrayFormatter,
    "jsonl": JsonLinesFormatter,
}

DEFAULT_FORMAT = "json"
