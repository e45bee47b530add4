"""Package entry point for ``python -m structokens``.

WHY: Users run the tokenizer as ``python -m structokens file.js`` (or
``python -m structokens AMOUNT`` / ``MAPPING``) without installing the
console script.

HOW: Delegates to the CLI's main() function.
"""

from structokens.cli import main

if __name__ == "__main__":
    main()
