"""Shared test fixtures for the structokens test suite.

WHY: CLI and API tests need real files on disk: a module that exercises
every construct, and one that only parses with error recovery.

HOW: Pytest fixtures write the sources from helpers.py to tmp_path.

RULES:
- Every fixture writes a fresh file; nothing is shared between tests
- BROKEN_SOURCE fails strict parsing but survives the lenient fallback
"""

from pathlib import Path

import pytest

from helpers import BROKEN_SOURCE, SAMPLE_MODULE


@pytest.fixture
def sample_module() -> str:
    return SAMPLE_MODULE


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    """SAMPLE_MODULE written to a temp .js file."""
    path = tmp_path / "sample.js"
    path.write_text(SAMPLE_MODULE, encoding="utf-8")
    return path


@pytest.fixture
def broken_file(tmp_path: Path) -> Path:
    """A file that only parses with error recovery."""
    path = tmp_path / "broken.js"
    path.write_text(BROKEN_SOURCE, encoding="utf-8")
    return path
