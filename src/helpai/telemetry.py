"""OpenTelemetry tracing for helpai sessions.

Exporters: ``none`` (default, no-op) and ``stdout``. Select with the
``HELPAI_OTEL_EXPORTER`` environment variable.
"""

from __future__ import annotations

import contextlib
import os
from collections.abc import Generator
from dataclasses import dataclass, field
from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.trace import NoOpTracer, Span, Tracer


def _exporter_from_env() -> str:
    return os.environ.get("HELPAI_OTEL_EXPORTER", "none").strip().lower() or "none"


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass
class TelemetryConfig:
    """Configuration for the helpai tracing subsystem."""

    service_name: str = "helpai"
    enabled: bool = True
    exporter: str = field(default_factory=_exporter_from_env)  # "stdout" | "none"


# ---------------------------------------------------------------------------
# HelpAITracer
# ---------------------------------------------------------------------------


class HelpAITracer:
    """Central tracer for helpai.

    Wraps OpenTelemetry ``TracerProvider`` setup and provides helpers for
    creating spans and recording events.
    """

    def __init__(self, config: TelemetryConfig | None = None) -> None:
        self._config = config or TelemetryConfig()
        self._provider: TracerProvider | None = None
        self._tracer: Tracer = NoOpTracer()

    # -- lifecycle -----------------------------------------------------------

    def init(self) -> None:
        """Set up the OTel TracerProvider based on config.

        Only the ``stdout`` exporter installs a provider; anything else keeps
        the default ``NoOpTracer``.
        """
        cfg = self._config
        if not cfg.enabled or cfg.exporter != "stdout":
            return

        from opentelemetry.sdk.trace.export import (
            ConsoleSpanExporter,
            SimpleSpanProcessor,
        )

        provider = TracerProvider(
            resource=Resource.create({"service.name": cfg.service_name})
        )
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
        self._provider = provider
        self._tracer = provider.get_tracer(cfg.service_name)

    def shutdown(self) -> None:
        """Flush pending spans and shut down the provider.

        Safe to call multiple times; later spans are no-ops.
        """
        if self._provider is not None:
            self._provider.shutdown()
            self._provider = None
        self._tracer = NoOpTracer()

    # -- span helpers --------------------------------------------------------

    @contextlib.contextmanager
    def span(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> Generator[Span, None, None]:
        """Create a span as a context manager.

        Usage::

            with tracer.span("helpai/step", {"key": "val"}) as s:
                ...
        """
        with self._tracer.start_as_current_span(name) as s:
            if attributes:
                for k, v in attributes.items():
                    s.set_attribute(k, v)
            yield s

    def record_event(
        self,
        name: str,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        """Record a named event on the current active span (if any)."""
        current_span = trace.get_current_span()
        if current_span.is_recording():
            current_span.add_event(name, dict(attributes) if attributes else {})


# ---------------------------------------------------------------------------
# Module-level default tracer (lazily initialised)
# ---------------------------------------------------------------------------

_DEFAULT_TRACER: HelpAITracer | None = None


def get_tracer() -> HelpAITracer:
    """Return the process-wide tracer, creating and initialising it on first use."""
    global _DEFAULT_TRACER  # noqa: PLW0603
    if _DEFAULT_TRACER is None:
        _DEFAULT_TRACER = HelpAITracer()
        _DEFAULT_TRACER.init()
    return _DEFAULT_TRACER


def shutdown_tracer() -> None:
    """Flush and drop the process-wide tracer; the next use creates a new one."""
    global _DEFAULT_TRACER  # noqa: PLW0603
    if _DEFAULT_TRACER is not None:
        _DEFAULT_TRACER.shutdown()
        _DEFAULT_TRACER = None


def record_event(name: str, attributes: dict[str, Any] | None = None) -> None:
    """Record an event on the active span of the process-wide tracer."""
    get_tracer().record_event(name, attributes)


# ---------------------------------------------------------------------------
# Convenience context managers
# ---------------------------------------------------------------------------


@contextlib.contextmanager
def trace_session(prompt_chars: int) -> Generator[Span, None, None]:
    """Trace one session, from trimming to transcript render."""
    with get_tracer().span("helpai/session", {"prompt.chars": prompt_chars}) as s:
        yield s


@contextlib.contextmanager
def trace_engine_call(engine_name: str) -> Generator[Span, None, None]:
    """Trace a single engine invocation."""
    with get_tracer().span("helpai/engine", {"engine.name": engine_name}) as s:
        yield s
