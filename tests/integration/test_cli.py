from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from typer.testing import CliRunner

from symcache import cli
from tests.helpers import GUID, SERVER_URL, DummyResponse, build_pdb

RELATIVE = Path("foo.pdb") / "ABCD1234ABCD1234ABCD1234ABCD12342" / "foo.pdb"
_CLEAN_ENV = {"SYMCACHE_ROOT": "", "SYMCACHE_SERVER_URL": ""}


@pytest.fixture(autouse=True)
def _detach_cli_log_handlers():
    """Drop handlers bound to CliRunner streams once each test finishes."""
    logger = logging.getLogger("symcache")
    existing = list(logger.handlers)
    yield
    for handler in list(logger.handlers):
        if handler not in existing:
            logger.removeHandler(handler)
            handler.close()


def _invoke(args: list[str]):
    runner = CliRunner()
    with patch.dict(os.environ, _CLEAN_ENV, clear=False):
        return runner.invoke(cli.app, args)


def test_fetch_downloads_then_hits(tmp_path: Path) -> None:
    payload = build_pdb(type_count=8)
    args = ["fetch", "Foo.pdb", GUID, "2", "--root", str(tmp_path), "--server", SERVER_URL]

    with patch("symcache.io.fetcher.requests.get", return_value=DummyResponse(payload)) as mock_get:
        first = _invoke(args)
        second = _invoke(args)

    assert first.exit_code == 0, first.output
    assert second.exit_code == 0, second.output
    assert mock_get.call_count == 1
    target = tmp_path.resolve() / RELATIVE
    assert target.read_bytes() == payload
    assert str(target) in first.output


def test_lookup_uses_combined_identifier(tmp_path: Path) -> None:
    with patch(
        "symcache.io.fetcher.requests.get", return_value=DummyResponse(build_pdb())
    ) as mock_get:
        result = _invoke(
            ["lookup", "foo.pdb", GUID.upper() + "2", "--root", str(tmp_path), "--server", SERVER_URL]
        )

    assert result.exit_code == 0, result.output
    assert mock_get.call_args.args[0].endswith(RELATIVE.as_posix())


def test_fetch_failure_exit_code(tmp_path: Path) -> None:
    response = DummyResponse(b"partial", content_length=999)
    with patch("symcache.io.fetcher.requests.get", return_value=response):
        result = _invoke(
            ["fetch", "foo.pdb", GUID, "2", "--root", str(tmp_path), "--server", SERVER_URL]
        )

    assert result.exit_code == cli.EXIT_FAILED
    assert not (tmp_path / RELATIVE).exists()


def test_fetch_refused_for_invalid_server(tmp_path: Path) -> None:
    with patch("symcache.io.fetcher.requests.get") as mock_get:
        result = _invoke(
            [
                "fetch",
                "foo.pdb",
                GUID,
                "2",
                "--root",
                str(tmp_path),
                "--server",
                "not a url with spaces and no host separator???",
            ]
        )

    assert result.exit_code == cli.EXIT_CONFIG
    mock_get.assert_not_called()


def test_path_does_not_fetch(tmp_path: Path) -> None:
    with patch("symcache.io.fetcher.requests.get") as mock_get:
        result = _invoke(["path", "Foo.pdb", GUID, "2", "--root", str(tmp_path)])

    assert result.exit_code == 0, result.output
    assert result.output.strip().splitlines()[-1] == str(tmp_path.resolve() / RELATIVE)
    mock_get.assert_not_called()


def test_stats_reports_counts(tmp_path: Path) -> None:
    pdb = tmp_path / "ntoskrnl.pdb"
    pdb.write_bytes(build_pdb(type_count=0, id_count=2))
    result = _invoke(["stats", str(pdb)])

    assert result.exit_code == 0, result.output
    assert "types=0" in result.output
    assert "ids=2" in result.output


def test_stats_rejects_non_pdb(tmp_path: Path) -> None:
    bogus = tmp_path / "bogus.pdb"
    bogus.write_bytes(b"<html></html>")
    result = _invoke(["stats", str(bogus)])

    assert result.exit_code == cli.EXIT_FAILED


def test_dump_config(tmp_path: Path) -> None:
    dest = tmp_path / "symcache.yaml"
    result = _invoke(["dump-config", str(dest)])

    assert result.exit_code == 0, result.output
    assert yaml.safe_load(dest.read_text(encoding="utf-8"))["cache"]["lock_scope"] == "global"


def test_cli_logs_to_stderr(tmp_path: Path) -> None:
    seen: list[bool] = []
    real_configure = cli.configure_logging

    def record_stream(**kwargs):
        seen.append(kwargs.get("stream") is sys.stderr)
        return real_configure(**kwargs)

    with patch("symcache.cli.configure_logging", side_effect=record_stream):
        with patch(
            "symcache.io.fetcher.requests.get", return_value=DummyResponse(build_pdb())
        ):
            result = _invoke(
                ["fetch", "Foo.pdb", GUID, "2", "--root", str(tmp_path), "--server", SERVER_URL]
            )

    assert result.exit_code == 0, result.output
    assert seen == [True]
