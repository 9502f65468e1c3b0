"""CLI commands run against the in-memory daemon."""

from __future__ import annotations

import json

import pytest
from typer.testing import CliRunner

from rtorrent_rpc.cli import session
from rtorrent_rpc.cli.main import app
from rtorrent_rpc.core import config
from rtorrent_rpc.core.errors import TransportError
from rtorrent_rpc.core.server import Server
from tests.conftest import ENDPOINT, HASH

runner = CliRunner()


@pytest.fixture(autouse=True)
def _wire_daemon(monkeypatch, daemon):
    monkeypatch.setenv("RTORRENT_RPC_ENDPOINT", ENDPOINT)
    monkeypatch.setenv("RTORRENT_RPC_LOG_LEVEL", "WARNING")
    monkeypatch.setattr(session, "build_server", lambda settings: Server(ENDPOINT, transport=daemon))
    monkeypatch.setattr(session.console, "width", 200)
    daemon.on(
        "d.multicall2",
        lambda target, view, *columns: [[HASH, "MyTorrent", 1, 1, 1024, 1024, 0, 10, 1000, "/data", ""]],
    )
    daemon.on("system.client_version", "0.9.8")
    daemon.on("system.library_version", "0.13.8")
    daemon.on("system.api_version", "10")
    daemon.on("system.listMethods", ["system.multicall", "d.multicall2", "download_list"])


def test_downloads_table(daemon):
    result = runner.invoke(app, ["downloads", "--view", "seeding"])
    assert result.exit_code == 0, result.output
    assert "MyTorrent" in result.output
    assert daemon.requests[0].arguments[1].value == "seeding"


def test_downloads_json_export(tmp_path):
    target = tmp_path / "downloads.json"
    result = runner.invoke(app, ["downloads", "--json", str(target)])
    assert result.exit_code == 0, result.output
    assert json.loads(target.read_text(encoding="utf-8"))[0]["name"] == "MyTorrent"


def test_info_fetches_in_one_batch(daemon):
    daemon.on("d.name", "MyTorrent")
    for method, value in {
        "d.is_active": 1,
        "d.state": 1,
        "d.complete": 0,
        "d.size_bytes": 2048,
        "d.completed_bytes": 1024,
        "d.ratio": 500,
        "d.down.rate": 0,
        "d.up.rate": 0,
        "d.directory": "/data",
        "d.tracker_size": 1,
        "d.size_files": 2,
        "d.priority": 2,
        "d.creation_date": 0,
        "d.load_date": 1_700_000_000,
        "d.message": "",
    }.items():
        daemon.on(method, value)

    result = runner.invoke(app, ["info", HASH.lower()])

    assert result.exit_code == 0, result.output
    assert "MyTorrent" in result.output
    assert daemon.methods == ["system.multicall"]


def test_info_with_a_bad_hash_exits_1(daemon):
    result = runner.invoke(app, ["info", "nope"])
    assert result.exit_code == 1
    assert daemon.requests == []


def test_remote_fault_exits_1():
    result = runner.invoke(app, ["trackers", HASH])
    assert result.exit_code == 1


def test_files_with_glob(daemon):
    daemon.on("f.multicall", [["movie.mkv", 100, 1, 1, 1]])
    result = runner.invoke(app, ["files", HASH, "--glob", "*.mkv"])
    assert result.exit_code == 0, result.output
    assert "movie.mkv" in result.output
    assert daemon.requests[0].arguments[1].value == "*.mkv"


def test_peers(daemon):
    daemon.on("p.multicall", [["P1", "10.0.0.2", 51413, "rtorrent 0.9", 10, 0, 0, 0]])
    result = runner.invoke(app, ["peers", HASH])
    assert result.exit_code == 0, result.output
    assert "10.0.0.2:51413" in result.output


def test_raw_call(daemon):
    result = runner.invoke(app, ["call", "system.client_version"])
    assert result.exit_code == 0, result.output
    assert "0.9.8" in result.output


def test_raw_call_sends_integers_and_prints_xml(daemon):
    daemon.on("d.priority.set", 0)
    result = runner.invoke(app, ["call", "--xml", "d.priority.set", HASH, "2"])
    assert result.exit_code == 0, result.output
    assert "<i4>0</i4>" in result.output
    assert daemon.requests[0].arguments[1].value == 2


def test_doctor_run_ok():
    result = runner.invoke(app, ["doctor", "run"])
    assert result.exit_code == 0, result.output
    assert "0.9.8" in result.output


def test_doctor_run_reports_unreachable_daemon(daemon):
    daemon.failure = TransportError("connection refused")
    result = runner.invoke(app, ["doctor", "run"])
    assert result.exit_code == 1
    assert "FAIL" in result.output


def test_doctor_setup_writes_user_env(monkeypatch, tmp_path):
    env_path = tmp_path / ".env"
    monkeypatch.setattr(config, "get_user_env_file", lambda: env_path)

    result = runner.invoke(app, ["doctor", "setup"], input="http://seedbox.test/RPC2\n5\nn\n")

    assert result.exit_code == 0, result.output
    content = env_path.read_text(encoding="utf-8")
    assert "RTORRENT_RPC_ENDPOINT=http://seedbox.test/RPC2" in content
    assert "RTORRENT_RPC_HTTP_TIMEOUT_SECONDS=5" in content
    assert "RTORRENT_RPC_VERIFY_TLS=false" in content


def test_invalid_endpoint_option_exits_1():
    result = runner.invoke(app, ["--endpoint", "ftp://nope", "downloads"])
    assert result.exit_code == 1
