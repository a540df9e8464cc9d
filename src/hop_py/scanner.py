"""Bounded-depth directory scanning and upward ancestor search."""

from __future__ import annotations

import logging
import stat
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from .fuzzy import ScoreContribution, match
from .ignore import load_ignore

logger = logging.getLogger(__name__)

MAX_DEPTH = 3

SkipPredicate = Callable[[str], bool]


@dataclass
class Candidate:
    """A directory under consideration as the jump target."""

    path: Path
    name: str
    score: float
    depth: int
    full_score: float = 0.0
    reasons: list[ScoreContribution] = field(default_factory=list)

    def add(self, reason: str, amount: float) -> None:
        """Record a contribution and apply it to the score."""
        self.reasons.append(ScoreContribution(reason, amount))
        self.score += amount


def _list_dir(directory: Path) -> list[Path] | None:
    """List entries, or None when the listing failed unexpectedly."""
    try:
        return sorted(directory.iterdir())
    except (PermissionError, NotADirectoryError):
        return []
    except OSError as exc:
        logger.warning("Cannot list %s: %s", directory, exc)
        return None


def _is_dir(entry: Path) -> bool:
    try:
        return stat.S_ISDIR(entry.stat().st_mode)
    except OSError as exc:
        logger.debug("Skipping %s: %s", entry, exc)
        return False


def _walk(
    directory: Path,
    base: Path,
    pattern: str,
    depth: int,
    max_depth: int,
    skip: SkipPredicate,
) -> list[Candidate]:
    entries = _list_dir(directory)
    if entries is None:
        return []

    found: list[Candidate] = []
    for entry in entries:
        if skip(entry.relative_to(base).as_posix()):
            continue
        if not _is_dir(entry):
            continue

        result = match(entry.name, pattern)
        if result.matched:
            found.append(
                Candidate(
                    path=entry,
                    name=entry.name,
                    score=result.score,
                    depth=depth + 1,
                    reasons=list(result.reasons),
                )
            )

        if depth < max_depth:
            found.extend(_walk(entry, base, pattern, depth + 1, max_depth, skip))

    return found


def scan(
    root: str | Path,
    pattern: str,
    depth: int = 0,
    max_depth: int = MAX_DEPTH,
    skip: SkipPredicate | None = None,
) -> list[Candidate]:
    """Find directories under ``root`` whose names fuzzy-match ``pattern``.

    Every matching directory down to ``max_depth`` levels is returned, best
    score first; a match and a deeper match below it are separate
    candidates. Ignore rules are loaded for ``root`` unless ``skip`` is
    given, and are checked against paths relative to ``root``.
    Unreadable directories and entries are skipped, never raised.
    """
    base = Path(root).absolute()
    if skip is None:
        skip = load_ignore(base)

    found = _walk(base, base, pattern, depth, max_depth, skip)
    return sorted(found, key=lambda c: -c.score)


def search_up(start: str | Path, pattern: str) -> list[Candidate]:
    """Scan successive ancestors of ``start`` until something matches.

    Starts at the parent of ``start`` and stops at the first ancestor whose
    scan yields a candidate, or at the filesystem root (whose result may be
    empty).
    """
    current = Path(start).absolute().parent
    while True:
        logger.debug("Scanning %s for '%s'", current, pattern)
        found = scan(current, pattern, max_depth=MAX_DEPTH)
        if found or current.parent == current:
            return found
        current = current.parent
