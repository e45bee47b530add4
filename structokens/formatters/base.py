"""Abstract base formatter and output container.

WHY: The CLI and the HTTP API both serialize the same token list but may
need different encodings (a single JSON array for batch consumers, one
record per line for streaming ones). This base class gives them one
interface so either surface can use any formatter.

HOW: BaseFormatter is an ABC with a ``name`` property and a ``format()``
method. FormatterOutput bundles the serialized content with its MIME type.

RULES:
- Subclasses MUST implement ``name`` (human-readable) and ``format()``
- ``format()`` never reorders tokens; it receives them in reading order
- Output is deterministic: the same tokens always give the same bytes
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from structokens.core.ir import Token


@dataclass
class FormatterOutput:
    """Serialized token stream.

    Attributes:
        content: The serialized stream.
        media_type: MIME type for the content, e.g. ``"application/json"``.
    """

    content: str
    media_type: str


class BaseFormatter(ABC):
    """Abstract base for all token stream formatters.

    To add a new output format:
    1. Create a new file in formatters/
    2. Subclass BaseFormatter
    3. Implement format() and name
    4. Register in FORMATTERS dict in formatters/__init__.py
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable format name, e.g. 'JSON array'."""

    @abstractmethod
    def format(self, tokens: List[Token]) -> FormatterOutput:
        """Serialize ``tokens``.

        Args:
            tokens: Token stream in reading order.

        Returns:
            The serialized stream and its MIME type.
        """
