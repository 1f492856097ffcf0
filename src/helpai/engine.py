"""Text-generation engines — the external process helpai talks to."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess
import sys
from abc import ABC, abstractmethod

from .config import HelpAIConfig

logger = logging.getLogger(__name__)

_DEFAULT_EXECUTABLE = "llm"


class EngineError(Exception):
    """Raised when the engine could not produce a response."""

    def __init__(self, message: str, returncode: int | None = None) -> None:
        self.returncode = returncode
        super().__init__(message)


class Engine(ABC):
    """Opaque ``prompt -> text`` collaborator."""

    @abstractmethod
    def name(self) -> str:
        """Return the canonical engine name (e.g. 'llm', 'stub')."""

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """Return the engine's response to *prompt*."""


class LlmCliEngine(Engine):
    """Engine that delegates to the ``llm`` command-line tool.

    The prompt is passed as a single argument (no shell involved), so the
    model sees exactly the composed text.
    """

    def __init__(
        self,
        model: str,
        timeout: float,
        executable: str = _DEFAULT_EXECUTABLE,
        debug: bool = False,
    ) -> None:
        self._model = model
        self._timeout = timeout
        self._executable = executable
        self._debug = debug

    def name(self) -> str:
        return "llm"

    @property
    def model(self) -> str:
        return self._model

    def build_args(self, prompt: str) -> list[str]:
        return [self._executable, "-m", self._model, prompt]

    def generate(self, prompt: str) -> str:
        binary = shutil.which(self._executable)
        if binary is None:
            msg = (
                f"{self._executable} CLI not found on PATH. "
                "Install it or set HELPAI_ENGINE=stub to use the stub engine."
            )
            raise EngineError(msg)

        args = self.build_args(prompt)
        args[0] = binary
        command_line = shlex.join(args)
        logger.debug("Command: ->%s<-", command_line)
        if self._debug:
            print(f"Running command: {command_line}", file=sys.stderr)  # noqa: T201

        try:
            proc = subprocess.run(  # noqa: S603
                args,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            msg = f"{self._executable} timed out after {self._timeout}s"
            raise EngineError(msg) from exc

        if proc.returncode != 0:
            detail = proc.stderr.strip() or proc.stdout.strip() or "unknown error"
            msg = f"{self._executable} failed (exit {proc.returncode}): {detail}"
            raise EngineError(msg, returncode=proc.returncode)

        return proc.stdout.strip()


class StubEngine(Engine):
    """Returns canned responses without spawning anything."""

    _CANNED = "This is a stub response for testing purposes."

    def __init__(self, reply: str | None = None) -> None:
        self._reply = reply
        self.prompts: list[str] = []

    def name(self) -> str:
        return "stub"

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self._reply is not None:
            return self._reply
        return f"{self._CANNED} (prompt_chars={len(prompt)})"


_VALID_ENGINES = frozenset({"llm", "stub"})


class EngineFactory:
    """Creates the engine named by ``HelpAIConfig.engine``."""

    @staticmethod
    def create(config: HelpAIConfig) -> Engine:
        """Return an engine for *config*.

        Raises:
            ValueError: If ``config.engine`` is not a known engine name.
        """
        engine_name = config.engine.strip().lower()
        if engine_name not in _VALID_ENGINES:
            msg = (
                f"Unknown engine '{config.engine}'. "
                f"Valid values for HELPAI_ENGINE: {', '.join(sorted(_VALID_ENGINES))}"
            )
            raise ValueError(msg)

        if engine_name == "llm":
            return LlmCliEngine(
                model=config.model,
                timeout=config.timeout,
                debug=config.debug,
            )
        return StubEngine()

    @staticmethod
    def describe(engine: Engine) -> str:
        """Return a human-readable description of *engine* for debug output."""
        if isinstance(engine, LlmCliEngine):
            return f"LlmCliEngine (model={engine.model})"
        if isinstance(engine, StubEngine):
            return "StubEngine (deterministic responses)"
        return type(engine).__name__
