"""Tests for environment-driven configuration.

WHY: A typo in STRUCTOKENS_API_PORT or the recursion limit should fail at
startup with the variable's name, not deep inside uvicorn or the walker.
"""

import logging

import pytest

from structokens import config


class TestIntEnv:
    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("STRUCTOKENS_TEST_INT", raising=False)
        assert config._int_env("STRUCTOKENS_TEST_INT", 7) == 7

    def test_default_when_blank(self, monkeypatch):
        monkeypatch.setenv("STRUCTOKENS_TEST_INT", "  ")
        assert config._int_env("STRUCTOKENS_TEST_INT", 7) == 7

    def test_override(self, monkeypatch):
        monkeypatch.setenv("STRUCTOKENS_TEST_INT", "42")
        assert config._int_env("STRUCTOKENS_TEST_INT", 7) == 42

    def test_invalid_names_variable(self, monkeypatch):
        monkeypatch.setenv("STRUCTOKENS_TEST_INT", "lots")
        with pytest.raises(ValueError, match="STRUCTOKENS_TEST_INT"):
            config._int_env("STRUCTOKENS_TEST_INT", 7)


def test_defaults():
    assert config.SOURCE_ENCODING.lower().replace("_", "-") == "utf-8"
    assert config.RECURSION_LIMIT >= 1000
    assert config.MAX_SOURCE_BYTES > 0


def test_configure_logging_accepts_names(monkeypatch):
    calls = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.append(kw))
    config.configure_logging("debug")
    config.configure_logging("nonsense")
    assert calls[0]["level"] == logging.DEBUG
    assert calls[1]["level"] == logging.WARNING
