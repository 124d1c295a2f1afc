"""In-process stand-ins for the oracle runtime's process I/O and reveal collection."""

from __future__ import annotations

import json
from typing import Any

from app.domain import RevealBody, RevealRecord


class LocalProcess:
    """Holds the program input and records the single terminal report."""

    def __init__(self, inputs: bytes) -> None:
        self._inputs = inputs
        self.result: bytes | None = None
        self.exit_code: int | None = None

    def get_inputs(self) -> bytes:
        return self._inputs

    def success(self, payload: bytes) -> None:
        self._report(payload, 0)

    def error(self, payload: bytes) -> None:
        self._report(payload, 1)

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    def _report(self, payload: bytes, exit_code: int) -> None:
        if self.exit_code is not None:
            raise RuntimeError("process outcome was already reported")
        self.result = bytes(payload)
        self.exit_code = exit_code


def _decode_hex(value: str) -> bytes:
    text = value.strip()
    if text[:2].lower() == "0x":
        text = text[2:]
    return bytes.fromhex(text)


def _int_field(body: dict[str, Any], name: str, index: int) -> int:
    value = body.get(name, 0)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"reveal #{index} body.{name} must be an integer")
    return value


def load_reveals(data: str | bytes | list[dict[str, Any]]) -> list[RevealRecord]:
    """Parse reveal records from JSON.

    Expected shape::

        [{"body": {"reveal": "<hex>", "exit_code": 0, "gas_used": 0}, "in_consensus": true}]
    """

    entries = json.loads(data) if isinstance(data, (str, bytes)) else data
    if not isinstance(entries, list):
        raise ValueError("reveals must be a JSON array")

    reveals: list[RevealRecord] = []
    for index, entry in enumerate(entries):
        body = entry.get("body") if isinstance(entry, dict) else None
        if not isinstance(body, dict) or not isinstance(body.get("reveal"), str):
            raise ValueError(f"reveal #{index} is missing body.reveal")
        try:
            payload = _decode_hex(body["reveal"])
        except ValueError as exc:
            raise ValueError(f"reveal #{index} body.reveal is not hex encoded") from exc
        reveals.append(
            RevealRecord(
                body=RevealBody(
                    reveal=payload,
                    exit_code=_int_field(body, "exit_code", index),
                    gas_used=_int_field(body, "gas_used", index),
                ),
                in_consensus=bool(entry.get("in_consensus", True)),
            )
        )
    return reveals


def reveal_from_result(payload: bytes, exit_code: int = 0) -> RevealRecord:
    return RevealRecord(body=RevealBody(reveal=payload, exit_code=exit_code))


__all__ = ["LocalProcess", "load_reveals", "reveal_from_result"]
