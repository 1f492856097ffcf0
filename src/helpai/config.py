"""Runtime configuration for a helpai session."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

COMMAND_NAME = "helpai"

_DEFAULT_HISTORY_FILE = f".{COMMAND_NAME}-history.txt"
_DEFAULT_TRANSCRIPT_FILE = f"{COMMAND_NAME}-transcript.md"
_DEFAULT_MODEL = "mistral-7b-openorca"
_DEFAULT_ENGINE = "llm"
_DEFAULT_MAX_HISTORY_CHARS = 9000
_DEFAULT_TIMEOUT = 300.0

# env var -> config field
_ENV_FIELDS: dict[str, str] = {
    "HELPAI_HISTORY_FILE": "history_file",
    "HELPAI_TRANSCRIPT_FILE": "transcript_file",
    "HELPAI_MODEL": "model",
    "HELPAI_ENGINE": "engine",
    "HELPAI_MAX_HISTORY_CHARS": "max_history_chars",
    "HELPAI_TIMEOUT_SEC": "timeout",
}


class HelpAIConfig(BaseModel):
    """Explicit configuration passed to the session controller and engine.

    ``max_history_chars`` is deliberately below the engine's context size so
    the current prompt still fits alongside the history.
    """

    history_file: Path = Path(_DEFAULT_HISTORY_FILE)
    transcript_file: Path = Path(_DEFAULT_TRANSCRIPT_FILE)
    model: str = _DEFAULT_MODEL
    engine: str = _DEFAULT_ENGINE
    max_history_chars: int = Field(default=_DEFAULT_MAX_HISTORY_CHARS, gt=0)
    timeout: float = Field(default=_DEFAULT_TIMEOUT, gt=0)
    debug: bool = False
    show_response_time: bool = True

    @classmethod
    def from_env(cls, **overrides: Any) -> HelpAIConfig:
        """Build a config from ``HELPAI_*`` environment variables.

        Keyword overrides win over the environment; ``None`` overrides are
        ignored so unset CLI options fall through.
        """
        values: dict[str, Any] = {}
        for env_name, field in _ENV_FIELDS.items():
            raw = os.environ.get(env_name, "").strip()
            if raw:
                values[field] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls.model_validate(values)
