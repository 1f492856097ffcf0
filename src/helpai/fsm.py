"""Finite State Machine for the phases of a single helpai session."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class SessionPhase(StrEnum):
    START = "start"
    TRIM_LOOP = "trim_loop"
    READ_LOG = "read_log"
    BUILD_FULL_PROMPT = "build_full_prompt"
    INVOKE_ENGINE = "invoke_engine"
    APPEND_EXCHANGE = "append_exchange"
    RENDER_TRANSCRIPT = "render_transcript"
    END = "end"


# Linear pipeline; an empty prompt ends the session straight from START
_TRANSITIONS: dict[SessionPhase, list[SessionPhase]] = {
    SessionPhase.START: [SessionPhase.TRIM_LOOP, SessionPhase.END],
    SessionPhase.TRIM_LOOP: [SessionPhase.READ_LOG],
    SessionPhase.READ_LOG: [SessionPhase.BUILD_FULL_PROMPT],
    SessionPhase.BUILD_FULL_PROMPT: [SessionPhase.INVOKE_ENGINE],
    SessionPhase.INVOKE_ENGINE: [SessionPhase.APPEND_EXCHANGE],
    SessionPhase.APPEND_EXCHANGE: [SessionPhase.RENDER_TRANSCRIPT],
    SessionPhase.RENDER_TRANSCRIPT: [SessionPhase.END],
    SessionPhase.END: [],
}


class SessionState(BaseModel):
    phase: SessionPhase = SessionPhase.START

    def can_transition(self, target: SessionPhase) -> bool:
        return target in _TRANSITIONS.get(self.phase, [])

    def transition(self, target: SessionPhase) -> SessionState:
        if not self.can_transition(target):
            raise ValueError(f"Invalid transition: {self.phase} -> {target}")
        return SessionState(phase=target)
