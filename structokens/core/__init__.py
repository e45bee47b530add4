"""Core token model, traversal and emission.

WHY: The core package is the deterministic heart of the tool: the
vocabulary, the syntax model, the emission rules and the stream assembly.
It knows nothing about tree-sitter, files, or output formats.

HOW: vocabulary.py defines the closed token kinds, syntax.py the closed
node variants, ir.py the Token record, traversal.py the walker,
rules.py the per-construct emission, assembler.py the ordered stream.

RULES:
- Vocabulary ids are a public contract: append only
- No module here imports from structokens.parsing
- Invariant violations raise InvariantViolation and are never swallowed
"""
