from __future__ import annotations

from typing import Any, Callable

from loguru import logger

from app.domain.errors import OracleProgramError

from .base import OracleProcess

EXIT_SUCCESS = 0
EXIT_FAILURE = 1


def run_phase(
    phase: Callable[..., Any],
    process: OracleProcess,
    *args: Any,
    **kwargs: Any,
) -> int:
    """Run one phase to a terminal outcome and translate failures into ``process.error``."""

    try:
        phase(process, *args, **kwargs)
    except OracleProgramError as exc:
        logger.error("{} failed: {}", getattr(phase, "__name__", "phase"), exc.message)
        process.error(exc.message.encode("utf-8"))
        return EXIT_FAILURE
    return EXIT_SUCCESS


__all__ = ["EXIT_FAILURE", "EXIT_SUCCESS", "run_phase"]
