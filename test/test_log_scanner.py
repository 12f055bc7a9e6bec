from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from defold_bridge.log_scanner import (
    LogAnnouncement,
    find_recent_log_file,
    parse_announcement,
    scan_log_file,
)


def _announce(port: str, host: str = "localhost") -> str:
    return (
        "2024-05-01 10:00:00.000 INFO [JavaFX Application Thread] util.http-server - "
        f'{{:line 93, :msg "Http server running", :local-url "http://{host}:{port}"}}'
    )


def _write_log(path: Path, lines: list[str]) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def test_parse_announcement_extracts_host_and_port() -> None:
    announcement = parse_announcement(_announce("51234"))
    assert announcement == LogAnnouncement(address="http://localhost", host="localhost", port="51234")


@pytest.mark.parametrize(
    "line",
    [
        _announce("51234").replace("[JavaFX Application Thread]", "[clojure-agent-send-off-pool-3]"),
        _announce("51234").replace("util.http-server", "editor.boot"),
        _announce("51234").replace("Http server running", "Http server stopped"),
        _announce("51234").replace(":local-url", ":url"),
        "",
    ],
)
def test_parse_announcement_rejects_incomplete_lines(line: str) -> None:
    assert parse_announcement(line) is None


def test_scan_returns_ports_most_recent_first(tmp_path: Path) -> None:
    log = _write_log(
        tmp_path / "editor2.log",
        [
            "2024-05-01 09:59:59.000 INFO [main] editor.boot - {:msg \"Starting\"}",
            _announce("9000"),
            "2024-05-01 10:05:00.000 INFO [JavaFX Application Thread] editor.ui - {:msg \"Project loaded\"}",
            _announce("9010"),
            _announce("9020", host="127.0.0.1"),
        ],
    )
    assert scan_log_file(log) == ["9020", "9010", "9000"]


def test_scan_ignores_broken_lines_and_bad_bytes(tmp_path: Path) -> None:
    log = tmp_path / "editor2.log"
    log.write_bytes(
        b"\xff\xfe garbage\n"
        + _announce("not-a-port").encode("utf-8")
        + b"\n"
        + _announce("7000").encode("utf-8")
        + b"\n"
    )
    assert scan_log_file(log) == ["7000"]


def test_scan_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(OSError):
        scan_log_file(tmp_path / "missing.log")


def test_find_recent_log_file_picks_newest(tmp_path: Path) -> None:
    old = _write_log(tmp_path / "editor2.2024-04-30.log", [_announce("1")])
    new = _write_log(tmp_path / "editor2.log", [_announce("2")])
    _write_log(tmp_path / "notes.txt", ["x"])
    now = time.time()
    os.utime(old, (now - 100, now - 100))
    os.utime(new, (now, now))

    assert find_recent_log_file(tmp_path) == new


def test_find_recent_log_file_none_when_missing(tmp_path: Path) -> None:
    assert find_recent_log_file(tmp_path / "nope") is None
    (tmp_path / "empty").mkdir()
    assert find_recent_log_file(tmp_path / "empty") is None


def test_find_recent_log_file_uses_env_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    log = _write_log(tmp_path / "logs" / "editor2.log", [_announce("3")])
    monkeypatch.setenv("DEFOLD_EDITOR_LOG_DIR", str(tmp_path / "logs"))
    assert find_recent_log_file() == log
