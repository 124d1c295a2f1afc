from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Sequence

from loguru import logger

from app.core.config import LOG_LEVELS, Settings, get_settings
from app.core.log import configure_logging
from app.domain import OracleVariant
from ingestion.client import GammaEventClient

from .base import HttpFetcher
from .execution_phase import run_execution_phase
from .host import LocalProcess, load_reveals, reveal_from_result
from .runner import EXIT_FAILURE, run_phase
from .tally_phase import run_tally_phase


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the Polymarket oracle program phases locally"
    )
    parser.add_argument(
        "--variant",
        choices=[variant.value for variant in OracleVariant],
        default=None,
        help="Override ORACLE_VARIANT for this run",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=sorted(LOG_LEVELS),
        default=None,
        help="Override LOG_LEVEL for this run",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("execute", "Fetch one event and print the normalized result"),
        ("dry-run", "Run the execution phase and tally its output as the single reveal"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        source = sub.add_mutually_exclusive_group()
        source.add_argument("--input", default=None, help="Execution input as text")
        source.add_argument(
            "--input-file", type=Path, default=None, help="Read execution input from a file"
        )

    tally = subparsers.add_parser("tally", help="Validate and forward collected reveals")
    tally.add_argument(
        "--reveals",
        required=True,
        help="JSON file of reveal records with hex encoded body.reveal ('-' for stdin)",
    )
    return parser.parse_args(argv)


def _resolve_settings(args: argparse.Namespace) -> Settings:
    settings = get_settings()
    overrides: dict[str, object] = {}
    if args.variant:
        overrides["oracle_variant"] = OracleVariant(args.variant)
    if args.log_level:
        overrides["log_level"] = args.log_level
    return settings.model_copy(update=overrides) if overrides else settings


def _read_inputs(args: argparse.Namespace) -> bytes:
    if args.input is not None:
        return args.input.encode("utf-8")
    if args.input_file is not None:
        return args.input_file.read_bytes()
    return sys.stdin.buffer.read()


def _emit(process: LocalProcess) -> None:
    sys.stdout.write((process.result or b"").decode("utf-8", errors="replace") + "\n")
    sys.stdout.flush()


def _execute(
    args: argparse.Namespace,
    settings: Settings,
    fetcher_factory: Callable[[], HttpFetcher],
) -> LocalProcess:
    process = LocalProcess(_read_inputs(args))
    fetcher = fetcher_factory()
    try:
        run_phase(run_execution_phase, process, fetcher, settings)
    finally:
        close = getattr(fetcher, "close", None)
        if callable(close):
            close()
    return process


def main(
    argv: Sequence[str] | None = None,
    *,
    fetcher_factory: Callable[[], HttpFetcher] | None = None,
) -> int:
    args = _parse_args(argv)
    settings = _resolve_settings(args)
    configure_logging(settings.log_level)
    factory = fetcher_factory or (
        lambda: GammaEventClient(timeout=settings.http_timeout_seconds)
    )

    if args.command == "execute":
        process = _execute(args, settings, factory)
        _emit(process)
        return process.exit_code

    if args.command == "tally":
        try:
            if args.reveals == "-":
                raw_reveals = sys.stdin.buffer.read()
            else:
                raw_reveals = Path(args.reveals).read_bytes()
            reveals = load_reveals(raw_reveals)
        except (OSError, ValueError) as exc:
            logger.error("Unable to load reveals: {}", exc)
            return EXIT_FAILURE
        process = LocalProcess(b"")
        run_phase(run_tally_phase, process, reveals, settings)
        _emit(process)
        return process.exit_code

    execution = _execute(args, settings, factory)
    _emit(execution)
    if not execution.succeeded:
        return execution.exit_code
    tally = LocalProcess(b"")
    run_phase(run_tally_phase, tally, [reveal_from_result(execution.result)], settings)
    _emit(tally)
    return tally.exit_code


if __name__ == "__main__":
    raise SystemExit(main())
