"""helpai — LLM command-line front-end with a bounded conversation history."""

from __future__ import annotations

__version__ = "1.0.0"

from .config import HelpAIConfig
from .engine import Engine, EngineError, EngineFactory, LlmCliEngine, StubEngine
from .exchange_log import (
    Exchange,
    ExchangeLogStore,
    parse_exchanges,
    serialize_exchange,
    serialize_exchanges,
)
from .fsm import SessionPhase, SessionState
from .labels import CURRENT_PROMPT_LABEL, PAST_PROMPT_LABEL, PAST_RESPONSE_LABEL
from .sanitizer import sanitize
from .session import SessionController, SessionResult, build_full_prompt
from .telemetry import HelpAITracer, TelemetryConfig
from .transcript import TranscriptRenderer, render
from .trimmer import ContextWindowTrimmer

__all__ = [
    "CURRENT_PROMPT_LABEL",
    "ContextWindowTrimmer",
    "Engine",
    "EngineError",
    "EngineFactory",
    "Exchange",
    "ExchangeLogStore",
    "HelpAIConfig",
    "HelpAITracer",
    "LlmCliEngine",
    "PAST_PROMPT_LABEL",
    "PAST_RESPONSE_LABEL",
    "SessionController",
    "SessionPhase",
    "SessionResult",
    "SessionState",
    "StubEngine",
    "TelemetryConfig",
    "TranscriptRenderer",
    "__version__",
    "build_full_prompt",
    "parse_exchanges",
    "render",
    "sanitize",
    "serialize_exchange",
    "serialize_exchanges",
]
