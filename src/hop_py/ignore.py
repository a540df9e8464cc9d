"""Ignore rules deciding which directories a scan never enters."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from pathspec.gitignore import GitIgnoreSpec

logger = logging.getLogger(__name__)

DEFAULT_PATTERNS = (
    ".git/",
    ".hg/",
    ".svn/",
    "node_modules/",
    "__pycache__/",
    ".venv/",
    ".tox/",
    ".mypy_cache/",
    ".pytest_cache/",
    ".ruff_cache/",
    ".cache/",
)

# Lowest to highest precedence, relative to the scan root
LOCAL_IGNORE_FILES = (".gitignore", ".ignore", ".hopignore")


def global_ignore_file() -> Path:
    """Return the user-wide ignore file location."""
    config_home = os.environ.get("XDG_CONFIG_HOME") or str(Path("~/.config").expanduser())
    return Path(config_home) / "hop" / "ignore"


def _read_lines(path: Path) -> list[str]:
    if not path.is_file():
        return []
    try:
        with path.open("r", encoding="utf-8") as handle:
            return handle.read().splitlines()
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("Skipping unreadable ignore file %s: %s", path, exc)
        return []


class IgnorePredicate:
    """Callable answering "should this relative directory be skipped?".

    Built once per top-level scan root. Rules use gitignore syntax; later
    sources override earlier ones, so a ``!pattern`` in ``.hopignore`` can
    re-include something a default rule hides.
    """

    def __init__(self, lines: list[str]) -> None:
        self._spec = GitIgnoreSpec.from_lines(lines)

    def __call__(self, relative_path: str) -> bool:
        rel = relative_path.replace(os.sep, "/").strip("/")
        if not rel:
            return False
        return self._spec.match_file(f"{rel}/")


def load_ignore(root: str | Path) -> IgnorePredicate:
    """Collect ignore rules for a scan rooted at ``root``."""
    root = Path(root)
    lines = list(DEFAULT_PATTERNS)
    lines.extend(_read_lines(global_ignore_file()))
    for name in LOCAL_IGNORE_FILES:
        lines.extend(_read_lines(root / name))
    return IgnorePredicate(lines)
