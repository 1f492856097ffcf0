"""Tests for HelpAIConfig."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from helpai.config import HelpAIConfig


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "HELPAI_HISTORY_FILE",
        "HELPAI_TRANSCRIPT_FILE",
        "HELPAI_MODEL",
        "HELPAI_ENGINE",
        "HELPAI_MAX_HISTORY_CHARS",
        "HELPAI_TIMEOUT_SEC",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = HelpAIConfig()
    assert config.history_file == Path(".helpai-history.txt")
    assert config.transcript_file == Path("helpai-transcript.md")
    assert config.model == "mistral-7b-openorca"
    assert config.engine == "llm"
    assert config.max_history_chars == 9000
    assert config.timeout == 300.0
    assert config.debug is False
    assert config.show_response_time is True


def test_from_env_reads_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HELPAI_MODEL", "orca-mini")
    monkeypatch.setenv("HELPAI_MAX_HISTORY_CHARS", "1234")
    monkeypatch.setenv("HELPAI_HISTORY_FILE", "/tmp/h.txt")
    monkeypatch.setenv("HELPAI_TIMEOUT_SEC", "12.5")

    config = HelpAIConfig.from_env()

    assert config.model == "orca-mini"
    assert config.max_history_chars == 1234
    assert config.history_file == Path("/tmp/h.txt")
    assert config.timeout == 12.5


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HELPAI_MODEL", "from-env")
    config = HelpAIConfig.from_env(model="from-flag", debug=True)
    assert config.model == "from-flag"
    assert config.debug is True


def test_none_overrides_are_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HELPAI_ENGINE", "stub")
    config = HelpAIConfig.from_env(engine=None, max_history_chars=None)
    assert config.engine == "stub"
    assert config.max_history_chars == 9000


def test_blank_env_values_fall_back_to_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HELPAI_MODEL", "   ")
    assert HelpAIConfig.from_env().model == "mistral-7b-openorca"


def test_non_positive_limit_rejected() -> None:
    with pytest.raises(ValidationError):
        HelpAIConfig(max_history_chars=0)


def test_invalid_env_limit_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HELPAI_MAX_HISTORY_CHARS", "lots")
    with pytest.raises(ValidationError):
        HelpAIConfig.from_env()
