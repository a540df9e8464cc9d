"""Final ranking and filtering of segmented search results."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Protocol

from .config import HopConfig
from .errors import NoMatchError, NoSelectionError
from .scanner import Candidate

logger = logging.getLogger(__name__)

LOCALITY_BONUS = 10
CONFIDENCE_RATIO = 0.85
DEPTH_PENALTY = 5
RELATIVE_BAND = 0.8
SCORE_FLOOR = 40


class Selector(Protocol):
    def select(self, candidates: Sequence[Candidate]) -> Path | None: ...


def locality_bonus(path: str | Path, cwd: str | Path) -> int:
    """+10 for every position where the path and cwd share a segment."""
    pairs = zip(Path(path).parts, Path(cwd).parts)
    return sum(LOCALITY_BONUS for a, b in pairs if a == b)


def _by_score(candidates: Iterable[Candidate]) -> list[Candidate]:
    return sorted(candidates, key=lambda c: -c.score)


def rank(candidates: Iterable[Candidate], config: HopConfig, cwd: str | Path) -> list[Candidate]:
    """Apply locality, confidence, depth and threshold filters.

    Returns the survivors best first, each with its contributions sorted
    largest first.
    """
    ranked = list(candidates)
    for candidate in ranked:
        candidate.add("locality bonus", locality_bonus(candidate.path, cwd))
    ranked = _by_score(ranked)

    if not config.show_all:
        # A clear gap between the best two is decisive
        if len(ranked) > 1 and ranked[0].score > 0:
            if ranked[1].score / ranked[0].score < CONFIDENCE_RATIO:
                ranked = ranked[:1]

        for candidate in ranked:
            candidate.add("depth penalty", -candidate.depth * DEPTH_PENALTY)

        if ranked:
            best = max(c.score for c in ranked)
            ranked = [c for c in ranked if c.score > RELATIVE_BAND * best]

    ranked = _by_score(c for c in ranked if c.score > SCORE_FLOOR)
    for candidate in ranked:
        candidate.reasons.sort(key=lambda r: -r.amount)

    logger.debug("Ranking kept %d candidates", len(ranked))
    return ranked


def choose(
    ranked: Sequence[Candidate],
    config: HopConfig,
    selector: Selector,
    pattern: str = "",
) -> Path:
    """Resolve ranked survivors to a single directory.

    Raises NoMatchError when nothing survived and NoSelectionError when the
    selector was dismissed.
    """
    if not ranked:
        raise NoMatchError(pattern)

    if len(ranked) == 1 or config.always_first:
        return ranked[0].path

    chosen = selector.select(ranked)
    if chosen is None:
        raise NoSelectionError()
    return chosen
