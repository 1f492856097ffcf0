"""Command-line entry point: ``helpai [-r] [-d] PROMPT...``."""

from __future__ import annotations

import argparse
import logging
import sys

from pydantic import ValidationError

from .config import COMMAND_NAME, HelpAIConfig
from .engine import EngineError, EngineFactory
from .session import SessionController
from .telemetry import shutdown_tracer

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Parser for the two session flags.

    Every other setting comes from ``HELPAI_*`` environment variables, so no
    other dash-word (``-h`` included) is taken away from the prompt.
    """
    parser = argparse.ArgumentParser(
        prog=COMMAND_NAME,
        description="Send a prompt to a local LLM, keeping a bounded conversation history.",
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "-r", "--reset", action="store_true",
        help="Back up and clear the history before processing the prompt",
    )
    parser.add_argument(
        "-d", "--debug", action="store_true",
        help="Show the engine command and verbose logging",
    )
    return parser


def parse_args(argv: list[str]) -> tuple[argparse.Namespace, str]:
    """Split *argv* into the session flags and the prompt.

    Every token that is not ``-r``/``--reset`` or ``-d``/``--debug``,
    wherever it appears, is a prompt word; words keep their order.
    """
    args, words = build_parser().parse_known_args(argv)
    return args, " ".join(words)


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: list[str] | None = None) -> int:
    """Run one session; returns the process exit code.

    Exit codes: 0 on success or an empty prompt, 1 on invalid
    configuration or an engine failure.
    """
    args, prompt = parse_args(sys.argv[1:] if argv is None else argv)
    configure_logging(args.debug)

    try:
        config = HelpAIConfig.from_env(debug=args.debug)
        controller = SessionController(config)
    except (ValidationError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 1
    logger.debug("Engine: %s", EngineFactory.describe(controller.engine))

    try:
        if args.reset:
            controller.reset()
        if not prompt.strip():
            return 0
        result = controller.run(prompt)
    except EngineError as exc:
        logger.error("%s", exc)
        return 1
    finally:
        shutdown_tracer()

    if result is not None:
        print(result.response)  # noqa: T201
    return 0
