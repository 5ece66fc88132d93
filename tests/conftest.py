"""Shared pytest fixtures for linecat tests."""
from __future__ import annotations

import io
import os
from pathlib import Path

import pytest


class FakeTerminal:
    """Records pager calls instead of touching a real terminal."""

    def __init__(self, sink: io.BytesIO, height: int = 24) -> None:
        self.sink = sink
        self._height = height
        self.calls: list[str] = []
        # Output length at each key wait, to see where pauses happened.
        self.waits_at: list[bytes] = []

    def height(self) -> int:
        return self._height

    def hide_cursor(self) -> None:
        self.calls.append("hide")

    def show_cursor(self) -> None:
        self.calls.append("show")

    def clear_line(self) -> None:
        self.calls.append("clear")

    def wait_for_key(self) -> bytes:
        self.calls.append("wait")
        self.waits_at.append(self.sink.getvalue())
        return b" "


@pytest.fixture()
def sink() -> io.BytesIO:
    return io.BytesIO()


@pytest.fixture()
def fake_terminal(sink: io.BytesIO) -> FakeTerminal:
    return FakeTerminal(sink)


@pytest.fixture()
def make_file(tmp_path: Path):
    """Return a factory that creates temporary input files."""

    def _make(content: str | bytes, name: str = "input.txt") -> Path:
        p = tmp_path / name
        if isinstance(content, str):
            content = content.encode("utf-8")
        p.write_bytes(content)
        return p

    return _make


@pytest.fixture()
def config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point LINECAT_CONFIG_DIR at an empty temp dir and clear LINECAT_* env vars."""
    for key in list(os.environ):
        if key.startswith("LINECAT_"):
            monkeypatch.delenv(key)
    d = tmp_path / "config"
    monkeypatch.setenv("LINECAT_CONFIG_DIR", str(d))
    return d
