"""Keeps the exchange log within a character bound by evicting old exchanges."""

from __future__ import annotations

import logging

from .exchange_log import (
    ExchangeLogStore,
    parse_exchanges,
    serialize_exchange,
    serialize_exchanges,
)

logger = logging.getLogger(__name__)


class ContextWindowTrimmer:
    """Evicts the oldest exchanges until the serialized log fits ``max_chars``.

    A single exchange is never subdivided: if the newest exchange alone is
    larger than the bound it is kept whole.
    """

    def __init__(self, store: ExchangeLogStore) -> None:
        self._store = store

    def trim(self, max_chars: int) -> int:
        """Trim once and return the resulting log length in characters.

        Returns 0 when there is no log. A log within *max_chars* is left
        untouched. An oversized log is rewritten from its parsed exchanges,
        so unlabelled text the parser drops is removed from the file even
        when no exchange had to be evicted.

        Raises:
            ValueError: If *max_chars* is negative.
        """
        if max_chars < 0:
            msg = "max_chars must not be negative"
            raise ValueError(msg)
        if not self._store.exists():
            return 0

        raw = self._store.read()
        if len(raw) <= max_chars:
            return len(raw)

        exchanges = parse_exchanges(raw)
        lengths = [len(serialize_exchange(e)) for e in exchanges]
        total = sum(lengths)
        dropped = 0
        while len(exchanges) - dropped > 1 and total > max_chars:
            total -= lengths[dropped]
            dropped += 1

        kept = exchanges[dropped:]
        if dropped == 0 and serialize_exchanges(kept) == raw:
            return len(raw)

        text = self._store.write(kept)
        logger.debug(
            "Trimmed %d exchange(s): %d -> %d chars (limit %d)",
            dropped, len(raw), len(text), max_chars,
        )
        return len(text)

    def trim_until_converged(self, max_chars: int) -> int:
        """Call :meth:`trim` until the log fits or no further progress is made.

        Stops as soon as a call returns the same length as the previous one
        (starting from 0), so a single oversized exchange or a missing log
        ends the loop instead of spinning.

        Returns:
            The final log length in characters.
        """
        previous = 0
        while True:
            length = self.trim(max_chars)
            if length == previous:
                break
            previous = length
            if length <= max_chars:
                break
        if length > max_chars:
            logger.info(
                "History is %d chars, above the %d limit; a single exchange is kept whole",
                length, max_chars,
            )
        return length
