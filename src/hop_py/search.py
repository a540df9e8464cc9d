"""Segmented search: chain per-segment scans into one candidate set."""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from .config import HopConfig
from .ranking import Selector, choose, rank
from .scanner import MAX_DEPTH, Candidate, scan, search_up

logger = logging.getLogger(__name__)

NESTING_PENALTY = 8


def split_pattern(pattern: str) -> list[str]:
    """Split a path-like pattern into its non-empty segments."""
    return [segment for segment in pattern.split("/") if segment]


def _descend(parent: Candidate, segment: str) -> list[Candidate]:
    """Scan below ``parent`` for ``segment``, inheriting the parent's score."""
    subs = scan(parent.path, segment, max_depth=MAX_DEPTH)
    for sub in subs:
        sub.add("parent score", parent.score)
        sub.add("nesting penalty", -max(0, sub.depth - 1) * NESTING_PENALTY)
        sub.full_score = sub.score
    return subs


def resolve(
    candidates: Sequence[Candidate],
    segments: Sequence[str],
    config: HopConfig,
) -> list[Candidate]:
    """Narrow ``candidates`` through each remaining pattern segment.

    Each segment is searched below every current candidate. Sub-matches
    carry their parent's accumulated score, lose 8 points per level beyond
    the first, and must clear the threshold before the next segment is
    searched below them. A directory reached from several parents is
    kept once, with its best score.
    """
    threshold = config.active_threshold

    if not segments:
        return sorted(
            (c for c in candidates if c.score >= threshold), key=lambda c: -c.score
        )

    segment, rest = segments[0], segments[1:]
    best: dict[Path, Candidate] = {}
    for parent in candidates:
        subs = [s for s in _descend(parent, segment) if s.score >= threshold]
        if rest:
            subs = resolve(subs, rest, config)
        # Overlapping parents reach the same directory; keep its best score
        for sub in subs:
            if sub.path not in best or sub.score > best[sub.path].score:
                best[sub.path] = sub

    logger.debug("Segment '%s': %d candidates", segment, len(best))
    return sorted(best.values(), key=lambda c: -c.score)


def find_candidates(pattern: str, config: HopConfig, cwd: str | Path) -> list[Candidate]:
    """Run the upward search for the first segment, then the rest."""
    segments = split_pattern(pattern)
    if not segments:
        return []

    initial = search_up(cwd, segments[0])
    logger.debug("Upward search for '%s': %d candidates", segments[0], len(initial))
    for candidate in initial:
        candidate.full_score = candidate.score

    return resolve(initial, segments[1:], config)


def literal_directory(pattern: str, cwd: str | Path) -> Path | None:
    """Return the directory a pattern names verbatim, if it exists."""
    if not pattern:
        return Path.home()
    target = Path(cwd) / Path(pattern).expanduser()
    if target.is_dir():
        return Path(os.path.normpath(target))
    return None


def jump(
    pattern: str,
    config: HopConfig,
    selector: Selector,
    cwd: str | Path | None = None,
) -> Path:
    """Resolve a pattern to exactly one directory.

    Raises NoMatchError or NoSelectionError when no single directory results.
    """
    cwd = Path(cwd or Path.cwd())
    if literal := literal_directory(pattern, cwd):
        return literal

    ranked = rank(find_candidates(pattern, config, cwd), config, cwd)
    return choose(ranked, config, selector, pattern)
