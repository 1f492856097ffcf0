"""Tests for engines — mocked subprocess, no real llm CLI required."""

from __future__ import annotations

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from helpai.config import HelpAIConfig
from helpai.engine import Engine, EngineError, EngineFactory, LlmCliEngine, StubEngine

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _completed(stdout: str = "", stderr: str = "", returncode: int = 0) -> subprocess.CompletedProcess:
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


def _engine(**kwargs) -> LlmCliEngine:
    return LlmCliEngine(model=kwargs.pop("model", "mistral-7b-openorca"), timeout=30.0, **kwargs)


# ---------------------------------------------------------------------------
# LlmCliEngine
# ---------------------------------------------------------------------------


def test_llm_engine_identity() -> None:
    engine = _engine()
    assert isinstance(engine, Engine)
    assert engine.name() == "llm"
    assert engine.model == "mistral-7b-openorca"


def test_build_args_passes_prompt_as_single_argument() -> None:
    args = _engine().build_args("two words")
    assert args == ["llm", "-m", "mistral-7b-openorca", "two words"]


@patch("shutil.which", return_value="/usr/bin/llm")
@patch("subprocess.run")
def test_generate_success(mock_run: MagicMock, mock_which: MagicMock) -> None:
    mock_run.return_value = _completed(stdout="The answer is 42.\n")

    assert _engine().generate("question") == "The answer is 42."

    call_args = mock_run.call_args[0][0]
    assert call_args == ["/usr/bin/llm", "-m", "mistral-7b-openorca", "question"]
    assert mock_run.call_args.kwargs["timeout"] == 30.0


@patch("shutil.which", return_value="/usr/bin/llm")
@patch("subprocess.run")
def test_generate_empty_output_is_a_response(mock_run: MagicMock, mock_which: MagicMock) -> None:
    mock_run.return_value = _completed(stdout="")
    assert _engine().generate("question") == ""


@patch("shutil.which", return_value=None)
def test_generate_binary_not_found(mock_which: MagicMock) -> None:
    with pytest.raises(EngineError, match="llm CLI not found"):
        _engine().generate("question")


@patch("shutil.which", return_value="/usr/bin/llm")
@patch("subprocess.run")
def test_generate_nonzero_exit(mock_run: MagicMock, mock_which: MagicMock) -> None:
    mock_run.return_value = _completed(stderr="Unknown model", returncode=1)

    with pytest.raises(EngineError, match="exit 1") as excinfo:
        _engine().generate("question")

    assert excinfo.value.returncode == 1
    assert "Unknown model" in str(excinfo.value)


@patch("shutil.which", return_value="/usr/bin/llm")
@patch("subprocess.run", side_effect=subprocess.TimeoutExpired(cmd="llm", timeout=30.0))
def test_generate_timeout(mock_run: MagicMock, mock_which: MagicMock) -> None:
    with pytest.raises(EngineError, match="timed out"):
        _engine().generate("question")


@patch("shutil.which", return_value="/usr/bin/llm")
@patch("subprocess.run")
def test_debug_echoes_command(
    mock_run: MagicMock, mock_which: MagicMock, capsys: pytest.CaptureFixture[str]
) -> None:
    mock_run.return_value = _completed(stdout="ok")

    _engine(debug=True).generate("show me")

    err = capsys.readouterr().err
    assert "Running command:" in err
    assert "mistral-7b-openorca" in err
    assert "'show me'" in err


@patch("shutil.which", return_value="/usr/bin/llm")
@patch("subprocess.run")
def test_no_echo_without_debug(
    mock_run: MagicMock, mock_which: MagicMock, capsys: pytest.CaptureFixture[str]
) -> None:
    mock_run.return_value = _completed(stdout="ok")
    _engine().generate("quiet")
    assert "Running command:" not in capsys.readouterr().err


# ---------------------------------------------------------------------------
# StubEngine
# ---------------------------------------------------------------------------


def test_stub_engine_default_reply() -> None:
    engine = StubEngine()
    reply = engine.generate("abc")
    assert "stub response" in reply
    assert "prompt_chars=3" in reply
    assert engine.prompts == ["abc"]


def test_stub_engine_fixed_reply() -> None:
    assert StubEngine(reply="fixed").generate("anything") == "fixed"


# ---------------------------------------------------------------------------
# EngineFactory
# ---------------------------------------------------------------------------


def test_factory_creates_llm_engine() -> None:
    engine = EngineFactory.create(HelpAIConfig(model="orca-mini", timeout=5))
    assert isinstance(engine, LlmCliEngine)
    assert engine.model == "orca-mini"


def test_factory_creates_stub_engine() -> None:
    assert isinstance(EngineFactory.create(HelpAIConfig(engine="Stub")), StubEngine)


def test_factory_rejects_unknown_engine() -> None:
    with pytest.raises(ValueError, match="Unknown engine 'gpt'"):
        EngineFactory.create(HelpAIConfig(engine="gpt"))


def test_factory_describe() -> None:
    assert EngineFactory.describe(StubEngine()) == "StubEngine (deterministic responses)"
    assert "model=orca" in EngineFactory.describe(_engine(model="orca"))
