"""Helpers shared by the structokens tests.

WHY: Most test modules need the same two things: a quick way to run the
full parse → emit → sort pipeline on a snippet, and a way to build small
SyntaxNode trees by hand for constructs the JavaScript grammar never
produces (generator expressions, comprehensions) or for malformed trees.

HOW: Plain functions and constants, imported directly by test modules
(pytest puts this directory on sys.path). Fixtures live in conftest.py.

RULES:
- Helpers never mutate shared state; every call builds a fresh tree
- Synthetic spans are single-line unless the caller says otherwise
- SAMPLE_MODULE exercises every construct the grammar maps to a rule
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from structokens.core.ir import Token
from structokens.core.syntax import NodeKind, Span, SyntaxNode
from structokens.core.vocabulary import TokenKind
from structokens.pipeline import tokenize_source


# ---------------------------------------------------------------------------
# Pipeline helpers
# ---------------------------------------------------------------------------


def tokenize(source: str) -> List[Token]:
    """Run the full pipeline on ``source``."""
    return tokenize_source(source)


def kinds(tokens: List[Token]) -> List[TokenKind]:
    return [token.kind for token in tokens]


def triples(tokens: List[Token]) -> List[Tuple[str, int, int, int]]:
    """(name, line, column, length) per token, for readable assertions."""
    return [(t.kind.name, t.line, t.column, t.length) for t in tokens]


def only(tokens: List[Token], kind: TokenKind) -> List[Token]:
    return [token for token in tokens if token.kind is kind]


# ---------------------------------------------------------------------------
# Synthetic trees
# ---------------------------------------------------------------------------


def span(start: int, end: int, line: int = 1, end_line: Optional[int] = None) -> Span:
    """Span from column ``start`` to ``end`` (exclusive) on ``line``."""
    return Span(line, start, end_line or line, end)


def node(
    kind: NodeKind,
    start: int,
    end: int,
    children: Optional[List[SyntaxNode]] = None,
    type: str = "synthetic",
    line: int = 1,
    **fields: SyntaxNode,
) -> SyntaxNode:
    """Build a SyntaxNode on one line; field nodes are appended as children."""
    all_children = list(children or [])
    for child in fields.values():
        if child not in all_children:
            all_children.append(child)
    all_children.sort(key=lambda c: (c.span.start_line, c.span.start_column))
    return SyntaxNode(
        kind=kind,
        type=type,
        span=span(start, end, line),
        length=end - start,
        children=all_children,
        fields=dict(fields),
    )


def program(*children: SyntaxNode) -> SyntaxNode:
    end = max((c.span.end_column for c in children), default=0)
    return SyntaxNode(
        kind=NodeKind.OTHER,
        type="program",
        span=span(0, end),
        length=end,
        children=list(children),
    )


# ---------------------------------------------------------------------------
# Sample sources
# ---------------------------------------------------------------------------

SAMPLE_MODULE = """\
import fs from "fs";

export class Counter {
  constructor(start) {
    this.count = start;
  }

  *ticks(limit) {
    for (let i = 0; i < limit; i++) {
      yield i;
    }
  }
}

export default async function main(items) {
  const seen = {};
  for (const item of items) {
    if (seen[item]) {
      continue;
    } else {
      seen[item] = true;
    }
  }
  let n = 0;
  while (n < 10) {
    n += 1;
    if (n > 5) break;
  }
  do {
    n--;
  } while (n > 0);
  switch (n) {
    case 0:
      return [n, n > 0 ? "pos" : "zero"];
    default:
      throw new Error("bad");
  }
  try {
    await fs.promises.readFile("x");
  } catch (err) {
    console.log(err);
  }
  const mod = await import("./other.js");
  return mod;
}
"""



BROKEN_SOURCE = "function f() { return 1; }\n)\n"
"""Valid function followed by a stray parenthesis."""
