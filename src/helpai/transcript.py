"""Markdown transcript re-derived from the exchange log."""

from __future__ import annotations

import logging
from pathlib import Path

from .labels import PAST_PROMPT_LABEL, PAST_RESPONSE_LABEL

logger = logging.getLogger(__name__)

PROMPT_HEADING = "<br>\n## My Prompt:\n<br>"
RESPONSE_HEADING = "<br>\n## AI Response:\n<br>"


def render(log_text: str) -> str:
    """Render raw log text as a markdown transcript.

    Labels become headings, then every newline (including those in the
    headings) is flattened to a space, so ``<br>`` carries the line breaks.
    """
    return (
        log_text.replace(PAST_PROMPT_LABEL, PROMPT_HEADING)
        .replace(PAST_RESPONSE_LABEL, RESPONSE_HEADING)
        .replace("\n", " ")
    )


class TranscriptRenderer:
    """Writes the rendered transcript, replacing any previous file."""

    def __init__(self, transcript_path: Path | str) -> None:
        self._path = Path(transcript_path)

    @property
    def path(self) -> Path:
        return self._path

    def write(self, log_text: str) -> str:
        content = render(log_text)
        self._path.write_text(content, encoding="utf-8")
        logger.debug("Transcript written to %s (%d chars)", self._path, len(content))
        return content
