"""Exchange log — append-only, file-backed history of prompt/response pairs.

The on-disk format is a single line of text in which every exchange is
written as::

    " <PAST_PROMPT_LABEL> <prompt> <PAST_RESPONSE_LABEL> <response>"

Parsing and serialization happen only at this boundary; everything above
it works with :class:`Exchange` sequences.
"""

from __future__ import annotations

import logging
import re
import shutil
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from .labels import PAST_PROMPT_LABEL, PAST_RESPONSE_LABEL
from .sanitizer import sanitize

logger = logging.getLogger(__name__)

_LABEL_SPLIT = re.compile(
    f"({re.escape(PAST_PROMPT_LABEL)}|{re.escape(PAST_RESPONSE_LABEL)})"
)


class Exchange(BaseModel):
    """One user prompt paired with the engine's response to it."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    response: str

    def sanitized(self) -> Exchange:
        """Return a copy with both halves passed through :func:`sanitize`."""
        return Exchange(prompt=sanitize(self.prompt), response=sanitize(self.response))


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------


def serialize_exchange(exchange: Exchange) -> str:
    """Serialize one exchange in log format.

    The result starts with a space, so serialized exchanges concatenate
    without a separator. *exchange* is expected to be sanitized already.
    """
    return f" {PAST_PROMPT_LABEL} {exchange.prompt} {PAST_RESPONSE_LABEL} {exchange.response}"


def serialize_exchanges(exchanges: list[Exchange]) -> str:
    """Serialize a sequence of exchanges, oldest first, as one log string."""
    return "".join(serialize_exchange(e) for e in exchanges)


def _unpad(segment: str, last: bool) -> str:
    # Every label is followed by one space; every non-final segment is
    # followed by the space that precedes the next label.
    if segment.startswith(" "):
        segment = segment[1:]
    if not last and segment.endswith(" "):
        segment = segment[:-1]
    return segment


def parse_exchanges(text: str) -> list[Exchange]:
    """Parse raw log text into exchanges.

    Lenient about damaged logs: text before the first label is dropped, a
    response without a prompt gets an empty prompt, and a trailing prompt
    without a response gets an empty response.
    """
    if not text:
        return []

    parts = _LABEL_SPLIT.split(text)
    leading = parts[0]
    if leading.strip():
        logger.warning("Dropping %d chars of unlabelled text at start of log", len(leading))

    exchanges: list[Exchange] = []
    pending_prompt: str | None = None
    pairs = list(zip(parts[1::2], parts[2::2], strict=True))
    for index, (label, segment) in enumerate(pairs):
        content = _unpad(segment, last=index == len(pairs) - 1)
        if label == PAST_PROMPT_LABEL:
            if pending_prompt is not None:
                exchanges.append(Exchange(prompt=pending_prompt, response=""))
            pending_prompt = content
        else:
            if pending_prompt is None:
                logger.warning("Response without a preceding prompt in log")
            exchanges.append(Exchange(prompt=pending_prompt or "", response=content))
            pending_prompt = None

    if pending_prompt is not None:
        exchanges.append(Exchange(prompt=pending_prompt, response=""))
    return exchanges


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


def backup_path(path: Path) -> Path:
    return path.with_name(path.name + ".bak")


class ExchangeLogStore:
    """Flat-file store for the exchange log and its companion transcript."""

    def __init__(
        self,
        history_path: Path | str,
        transcript_path: Path | str | None = None,
    ) -> None:
        self._path = Path(history_path)
        self._transcript_path = Path(transcript_path) if transcript_path else None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def transcript_path(self) -> Path | None:
        return self._transcript_path

    def exists(self) -> bool:
        return self._path.exists()

    def read(self) -> str:
        """Return the raw log text, or ``""`` when no log exists yet."""
        if not self._path.exists():
            return ""
        return self._path.read_text(encoding="utf-8")

    def read_exchanges(self) -> list[Exchange]:
        return parse_exchanges(self.read())

    def size(self) -> int:
        return len(self.read())

    def append(self, exchange: Exchange) -> Exchange:
        """Sanitize *exchange* and append it to the tail of the log."""
        clean = exchange.sanitized()
        with self._path.open("a", encoding="utf-8") as fh:
            fh.write(serialize_exchange(clean))
        logger.debug("Appended exchange to %s", self._path)
        return clean

    def write(self, exchanges: list[Exchange]) -> str:
        """Overwrite the log with *exchanges*; returns the written text."""
        text = serialize_exchanges(exchanges)
        self._path.write_text(text, encoding="utf-8")
        return text

    def reset(self) -> bool:
        """Back up and delete the log and its transcript.

        Returns ``False`` (and touches nothing) when no log exists.
        """
        if not self._path.exists():
            return False

        shutil.copyfile(self._path, backup_path(self._path))
        self._path.unlink()
        logger.info("History reset; backup kept at %s", backup_path(self._path))

        transcript = self._transcript_path
        if transcript is not None and transcript.exists():
            shutil.copyfile(transcript, backup_path(transcript))
            transcript.unlink()
        return True
