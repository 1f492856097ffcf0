"""Delimiter labels shared by the exchange log, sanitizer and renderer."""

from __future__ import annotations

PAST_PROMPT_LABEL = "THIS IS A PAST PROMPT I GAVE YOU:"
PAST_RESPONSE_LABEL = "THIS IS A PAST RESPONSE YOU GAVE ME:"
CURRENT_PROMPT_LABEL = "PLEASE RESPOND TO THIS PROMPT NOW:"

ALL_LABELS: tuple[str, ...] = (
    PAST_PROMPT_LABEL,
    PAST_RESPONSE_LABEL,
    CURRENT_PROMPT_LABEL,
)
