"""Fuzzy matching and scoring algorithm."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NamedTuple

EXACT_BONUS = 20.0
START_BONUS = 10.0
CASE_BONUS = 8.0
CONSECUTIVE_STEP = 3.0
PROXIMITY_WINDOW = 5
LENGTH_PENALTY = 0.5

BOUNDARY_CHARS = "-_."


class ScoreContribution(NamedTuple):
    """One named bonus (positive) or penalty (negative)."""

    reason: str
    amount: float


@dataclass
class MatchResult:
    """Outcome of matching one name against one pattern segment."""

    matched: bool
    score: float = 0.0
    positions: list[int] = field(default_factory=list)
    reasons: list[ScoreContribution] = field(default_factory=list)


NO_MATCH = MatchResult(matched=False)


def match(name: str, pattern: str) -> MatchResult:
    """Score a directory name against a single pattern segment.

    Scoring factors:
    - Exact match: +20 when name and pattern are equal ignoring case
    - Start bonus: +10 per char matched at index 0 or after one of ``-_.``
    - Case bonus: +8 per char whose exact case matches the pattern
    - Consecutive bonus: +3 * run length for each char adjacent to the previous
    - Proximity bonus: max(0, 5 - gap) per pair of matched positions
    - Length penalty: 0.5 per name char beyond the pattern length
    """
    if not pattern:
        return NO_MATCH

    # Fold per character: lower() may change the length of a whole string
    name_folded = [char.lower() for char in name]
    pattern_folded = [char.lower() for char in pattern]

    if pattern_folded[0] not in name_folded:
        return NO_MATCH

    reasons: list[ScoreContribution] = []
    if name_folded == pattern_folded:
        reasons.append(ScoreContribution("exact match", EXACT_BONUS))

    start = case = consecutive_total = 0.0
    consecutive = 0
    positions: list[int] = []
    cursor = 0

    for i, char in enumerate(name):
        if cursor >= len(pattern):
            break
        if name_folded[i] != pattern_folded[cursor]:
            continue

        if i == 0 or name[i - 1] in BOUNDARY_CHARS:
            start += START_BONUS

        if char == pattern[cursor]:
            case += CASE_BONUS

        if positions and i == positions[-1] + 1:
            consecutive += 1
            consecutive_total += consecutive * CONSECUTIVE_STEP
        else:
            consecutive = 0

        positions.append(i)
        cursor += 1

    # All pattern chars must match
    if cursor < len(pattern):
        return NO_MATCH

    if start:
        reasons.append(ScoreContribution("start bonus", start))
    if case:
        reasons.append(ScoreContribution("case bonus", case))
    if consecutive_total:
        reasons.append(ScoreContribution("consecutive bonus", consecutive_total))

    proximity = sum(
        max(0, PROXIMITY_WINDOW - (b - a)) for a, b in zip(positions, positions[1:])
    )
    reasons.append(ScoreContribution("proximity bonus", float(proximity)))
    reasons.append(
        ScoreContribution("length penalty", -(len(name) - len(pattern)) * LENGTH_PENALTY)
    )

    return MatchResult(
        matched=True,
        score=sum(r.amount for r in reasons),
        positions=positions,
        reasons=reasons,
    )


def highlight_matches(text: str, query: str) -> str:
    """Wrap matched characters with highlight tokens."""
    if not query:
        return text

    result = match(text, query)
    if not result.matched:
        return text

    marked = set(result.positions)
    return "".join(
        f"{{b}}{char}{{/b}}" if i in marked else char for i, char in enumerate(text)
    )
