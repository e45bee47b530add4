"""End-to-end conversion: source text or file → reading-order token list.

WHY: The CLI and the HTTP API run the same parse → traverse → emit → sort
sequence. Keeping it in one place guarantees both surfaces produce
byte-identical streams for the same input.

HOW: tokenize_source() parses (strict with lenient fallback), then hands
the adapted tree to the core assembler. tokenize_file() reads the whole
file into memory first.

RULES:
- One call converts one source; no state survives between calls
- A file is converted completely or the call raises (no partial result)
- Files are read with the configured encoding (UTF-8 by default)
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Union

from structokens.config import SOURCE_ENCODING
from structokens.core.assembler import assemble
from structokens.core.ir import Token
from structokens.parsing.parser import parse_source


def tokenize_source(source: str) -> List[Token]:
    """Convert JavaScript source text into a token stream.

    Raises:
        ParseError: If neither the strict nor the lenient parse succeeds.
        InvariantViolation: If an emission rule produced an invalid token.
    """
    return assemble(parse_source(source))


def tokenize_file(path: Union[str, Path], encoding: Optional[str] = None) -> List[Token]:
    """Read ``path`` and convert its contents into a token stream.

    Raises:
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid in ``encoding``.
        ParseError: If neither the strict nor the lenient parse succeeds.
    """
    text = Path(path).read_text(encoding=encoding or SOURCE_ENCODING)
    return tokenize_source(text)
