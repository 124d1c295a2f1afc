from __future__ import annotations

import json

import pytest
from loguru import logger

from pipelines import oracle_run

EXAMPLE_EVENT = {
    "closed": False,
    "markets": [
        {"outcomePrices": '["0.65","0.35"]', "groupItemTitle": "Yes/No", "closed": False}
    ],
}


@pytest.fixture(autouse=True)
def _patched_settings(monkeypatch, test_settings):
    monkeypatch.setattr(oracle_run, "get_settings", lambda: test_settings)
    yield test_settings
    logger.remove()


def test_execute_prints_result(capsys, stub_fetcher_factory):
    fetcher = stub_fetcher_factory(body=EXAMPLE_EVENT)

    exit_code = oracle_run.main(
        ["execute", "--input", '{"event_slug":"will-x-happen"}'],
        fetcher_factory=lambda: fetcher,
    )

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == '{"markets":[{"yes_price":"0.65","closed":false}]}'
    assert fetcher.closed


def test_execute_reads_input_file(tmp_path, capsys, stub_fetcher_factory):
    input_path = tmp_path / "input.bin"
    input_path.write_bytes(b"46724\n")
    fetcher = stub_fetcher_factory(body=EXAMPLE_EVENT)

    exit_code = oracle_run.main(
        ["--variant", "event_id", "execute", "--input-file", str(input_path)],
        fetcher_factory=lambda: fetcher,
    )

    assert exit_code == 0
    assert fetcher.urls == ["https://gamma-api.polymarket.com/events/46724"]
    assert json.loads(capsys.readouterr().out) == {"prices": [0.65], "market_status": "open"}


def test_execute_failure_exits_nonzero(capsys, stub_fetcher_factory):
    exit_code = oracle_run.main(
        ["execute", "--input", '{"event_slug":"gone"}'],
        fetcher_factory=lambda: stub_fetcher_factory(status=404, body=b"missing"),
    )

    assert exit_code == 1
    assert capsys.readouterr().out.strip() == "Error while fetching PolyMarket event information"


def test_tally_reads_hex_reveals(tmp_path, capsys):
    payload = b'{"markets":[{"yes_price":"0.5","closed":true}]}'
    reveals_path = tmp_path / "reveals.json"
    reveals_path.write_text(json.dumps([{"body": {"reveal": payload.hex()}}]), encoding="utf-8")

    exit_code = oracle_run.main(["tally", "--reveals", str(reveals_path)])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == payload.decode("utf-8")


def test_tally_rejects_multiple_reveals(tmp_path, capsys):
    payload = b'{"markets":[]}'.hex()
    reveals_path = tmp_path / "reveals.json"
    reveals_path.write_text(
        json.dumps([{"body": {"reveal": payload}}, {"body": {"reveal": payload}}]),
        encoding="utf-8",
    )

    exit_code = oracle_run.main(["tally", "--reveals", str(reveals_path)])

    assert exit_code == 1
    assert capsys.readouterr().out.strip() == "Expected exactly 1 reveal, got 2"


def test_tally_with_unreadable_reveals_file_fails(tmp_path):
    reveals_path = tmp_path / "reveals.json"
    reveals_path.write_text("{}", encoding="utf-8")

    assert oracle_run.main(["tally", "--reveals", str(reveals_path)]) == 1


def test_dry_run_executes_and_tallies(capsys, stub_fetcher_factory):
    exit_code = oracle_run.main(
        ["dry-run", "--input", '{"event_slug":"will-x-happen"}'],
        fetcher_factory=lambda: stub_fetcher_factory(body=EXAMPLE_EVENT),
    )

    lines = capsys.readouterr().out.strip().splitlines()
    assert exit_code == 0
    assert lines == [
        '{"markets":[{"yes_price":"0.65","closed":false}]}',
        '{"markets":[{"yes_price":"0.65","closed":false}]}',
    ]


def test_dry_run_stops_after_failed_execution(capsys, stub_fetcher_factory):
    exit_code = oracle_run.main(
        ["dry-run", "--input", '{"event_slug":"empty"}'],
        fetcher_factory=lambda: stub_fetcher_factory(body={"closed": False, "markets": []}),
    )

    assert exit_code == 1
    assert capsys.readouterr().out.strip().splitlines() == ["Event has no markets"]


def test_unknown_log_level_is_rejected_by_argument_parser(capsys):
    with pytest.raises(SystemExit) as excinfo:
        oracle_run.main(["--log-level", "chatty", "tally", "--reveals", "-"])

    assert excinfo.value.code == 2
    assert "--log-level" in capsys.readouterr().err


def test_log_level_override_is_case_insensitive(tmp_path, capsys):
    payload = b'{"markets":[{"yes_price":"0.5","closed":true}]}'
    reveals_path = tmp_path / "reveals.json"
    reveals_path.write_text(json.dumps([{"body": {"reveal": payload.hex()}}]), encoding="utf-8")

    exit_code = oracle_run.main(["--log-level", "debug", "tally", "--reveals", str(reveals_path)])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == payload.decode("utf-8")


def test_tally_with_missing_reveals_file_fails(tmp_path, capsys):
    exit_code = oracle_run.main(["tally", "--reveals", str(tmp_path / "absent.json")])

    assert exit_code == 1
    assert capsys.readouterr().out == ""


def test_tally_with_malformed_reveal_field_fails(tmp_path):
    reveals_path = tmp_path / "reveals.json"
    reveals_path.write_text(
        json.dumps([{"body": {"reveal": b"{}".hex(), "exit_code": None}}]),
        encoding="utf-8",
    )

    assert oracle_run.main(["tally", "--reveals", str(reveals_path)]) == 1
