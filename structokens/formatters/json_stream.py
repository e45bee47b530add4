"""JSON serializations of a token stream.

WHY: The canonical output is a JSON array of token records, consumed by
training pipelines that load a whole file's stream at once. Large corpora
are easier to process line by line, so a JSON Lines variant emits the
same records one per line.

HOW: Each Token is serialized with Token.to_dict(). The array formatter
validates the records against token_stream_schema.json with jsonschema
before dumping, then writes compact JSON (no whitespace). The JSON Lines
formatter writes one compact record per line.

RULES:
- Record shape: {"token": {"key": name, "value": id}, "line", "column", "length"}
- Compact separators, ASCII-safe output is not forced (ensure_ascii=False)
- Schema validation is mandatory for the array form; raises on failure
- An empty stream is "[]" (array) or "" (JSON Lines)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List

import jsonschema

from structokens.core.ir import Token
from structokens.formatters.base import BaseFormatter, FormatterOutput

SCHEMA_PATH = Path(__file__).resolve().parent / "token_stream_schema.json"

_SEPARATORS = (",", ":")

_CACHED_SCHEMA: Dict[str, Any] | None = None


def get_schema() -> Dict[str, Any]:
    """Load the token stream JSON schema, cached after the first call."""
    global _CACHED_SCHEMA
    if _CACHED_SCHEMA is None:
        with open(SCHEMA_PATH, encoding="utf-8") as f:
            _CACHED_SCHEMA = json.load(f)
    return _CACHED_SCHEMA


def _dumps(value: Any) -> str:
    return json.dumps(value, separators=_SEPARATORS, ensure_ascii=False)


class JsonArrayFormatter(BaseFormatter):
    """The whole stream as one compact JSON array."""

    @property
    def name(self) -> str:
        return "JSON array"

    def format(self, tokens: List[Token]) -> FormatterOutput:
        """Serialize and validate the stream.

        Raises:
            jsonschema.ValidationError: If a record does not match the
                token stream schema.
        """
        records = [token.to_dict() for token in tokens]
        jsonschema.validate(instance=records, schema=get_schema())
        return FormatterOutput(content=_dumps(records), media_type="application/json")


class JsonLinesFormatter(BaseFormatter):
    """One compact JSON record per line."""

    @property
    def name(self) -> str:
        return "JSON Lines"

    def format(self, tokens: List[Token]) -> FormatterOutput:
        lines = [_dumps(token.to_dict()) for token in tokens]
        content = "\n".join(lines)
        if content:
            content += "\n"
        return FormatterOutput(content=content, media_type="application/x-ndjson")
