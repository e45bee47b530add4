"""structokens: structural token streams from JavaScript source.

WHY: Downstream consumers (learned models, diff and analysis tools) want
a compact fingerprint of a program's structure: where loops, functions,
branches, calls and assignments begin and end, independent of the exact
lexical tokens. This package turns a source file into that fingerprint.

HOW: Three-stage pipeline: parse (tree-sitter, strict with a lenient
fallback), emit (a depth-first walk over a closed set of node variants
with one emission rule per construct), assemble (stable sort of the
emitted tokens by line and column). Each stage is independently testable.

RULES:
- The vocabulary of token kinds is closed and its ids are stable
- Every token has a positive length and a 1-based line, 0-based column
- The assembled stream is always in reading order
"""

__version__ = "0.1.0"
