"""Session controller — one prompt in, one response out, history kept bounded."""

from __future__ import annotations

import logging
import time

from pydantic import BaseModel

from .config import HelpAIConfig
from .engine import Engine, EngineFactory
from .exchange_log import Exchange, ExchangeLogStore
from .fsm import SessionPhase, SessionState
from .labels import CURRENT_PROMPT_LABEL
from .sanitizer import sanitize
from .telemetry import record_event, trace_engine_call, trace_session
from .transcript import TranscriptRenderer
from .trimmer import ContextWindowTrimmer

logger = logging.getLogger(__name__)


class SessionResult(BaseModel):
    """Outcome of a completed session."""

    prompt: str
    response: str
    full_prompt: str
    elapsed_seconds: float
    history_chars: int


def build_full_prompt(prompt: str, history: str) -> str:
    return f"{CURRENT_PROMPT_LABEL} {prompt} {history}"


def format_response_time(elapsed_seconds: float) -> str:
    total_ms = int(elapsed_seconds * 1000)
    minutes, rest_ms = divmod(total_ms, 60_000)
    seconds, millis = divmod(rest_ms, 1000)
    return f"Response time: {minutes}m {seconds}s {millis:03d}ms"


class SessionController:
    """Drives trim -> read -> prompt -> engine -> append -> render.

    Engine failures propagate as :class:`~helpai.engine.EngineError`; in that
    case neither the log nor the transcript is touched.
    """

    def __init__(
        self,
        config: HelpAIConfig,
        store: ExchangeLogStore | None = None,
        engine: Engine | None = None,
        renderer: TranscriptRenderer | None = None,
    ) -> None:
        self.config = config
        self.state = SessionState()
        self._store = store or ExchangeLogStore(config.history_file, config.transcript_file)
        self._engine = engine if engine is not None else EngineFactory.create(config)
        self._renderer = renderer or TranscriptRenderer(config.transcript_file)
        self._trimmer = ContextWindowTrimmer(self._store)

    @property
    def store(self) -> ExchangeLogStore:
        return self._store

    @property
    def engine(self) -> Engine:
        return self._engine

    def reset(self) -> bool:
        return self._store.reset()

    def run(self, prompt: str) -> SessionResult | None:
        """Run one session; returns ``None`` when the prompt is empty."""
        self.state = SessionState()
        current_prompt = sanitize(prompt)
        if not current_prompt.strip():
            self._advance(SessionPhase.END)
            return None

        with trace_session(len(current_prompt)):
            self._advance(SessionPhase.TRIM_LOOP)
            trimmed = self._trimmer.trim_until_converged(self.config.max_history_chars)
            record_event("history_trimmed", {"history.chars": trimmed})

            self._advance(SessionPhase.READ_LOG)
            history = self._store.read()

            self._advance(SessionPhase.BUILD_FULL_PROMPT)
            full_prompt = build_full_prompt(current_prompt, history)

            self._advance(SessionPhase.INVOKE_ENGINE)
            response, elapsed = self._invoke(full_prompt)

            self._advance(SessionPhase.APPEND_EXCHANGE)
            self._store.append(Exchange(prompt=current_prompt, response=response))
            record_event("exchange_appended", {"response.chars": len(response)})

            self._advance(SessionPhase.RENDER_TRANSCRIPT)
            log_text = self._store.read()
            self._renderer.write(log_text)

            self._advance(SessionPhase.END)

        return SessionResult(
            prompt=current_prompt,
            response=response,
            full_prompt=full_prompt,
            elapsed_seconds=elapsed,
            history_chars=len(log_text),
        )

    def _invoke(self, full_prompt: str) -> tuple[str, float]:
        logger.debug(
            "Invoking %s engine with %d chars of prompt", self._engine.name(), len(full_prompt)
        )
        started = time.perf_counter()
        with trace_engine_call(self._engine.name()):
            response = self._engine.generate(full_prompt)
        elapsed = time.perf_counter() - started

        if not response:
            logger.info("Engine returned an empty response")
        if self.config.show_response_time:
            response += "\n\n" + format_response_time(elapsed)
        return response, elapsed

    def _advance(self, target: SessionPhase) -> None:
        self.state = self.state.transition(target)
