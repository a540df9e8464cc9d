"""Shared fixtures for the hop test suite."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from hop_py.scanner import Candidate


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> None:
    """Keep user-level ignore files and HOP_* settings out of the tests."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    for name in ("HOP_THRESHOLD", "HOP_SHOW_ALL", "HOP_ALWAYS_FIRST", "HOP_SELECTOR", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_tree() -> Callable[..., Path]:
    """Create nested directories below a root; returns the root."""

    def _make(root: Path, *relpaths: str) -> Path:
        for rel in relpaths:
            (root / rel).mkdir(parents=True, exist_ok=True)
        return root

    return _make


@pytest.fixture
def projects(tmp_path: Path, make_tree: Callable[..., Path]) -> Path:
    """A projects directory with two web-ish trees and a working directory."""
    root = tmp_path / "projects"
    make_tree(root, "webapp/src", "webtools/source", "here")
    return root


@pytest.fixture
def make_candidate() -> Callable[..., Candidate]:
    """Build candidates by hand for pipeline tests."""

    def _make(path: str, score: float, depth: int = 1) -> Candidate:
        p = Path(path)
        return Candidate(path=p, name=p.name, score=score, depth=depth, full_score=score)

    return _make
