"""Search tunables threaded through the pipeline."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from .errors import ConfigError

TRUTHY = frozenset({"1", "true", "yes", "on"})


def parse_threshold(value: str | float | None) -> float:
    """Parse an operator-supplied score threshold.

    Empty or missing input means 0. Anything that is not a finite number
    raises ConfigError.
    """
    if value is None:
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
    try:
        threshold = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid score threshold: {value!r}") from None
    if not math.isfinite(threshold):
        raise ConfigError(f"Invalid score threshold: {value!r}")
    return threshold


def parse_flag(value: str | None) -> bool:
    return (value or "").strip().lower() in TRUTHY


@dataclass(frozen=True)
class HopConfig:
    """Tunables for segmented search and ranking.

    ``threshold`` gates sub-matches inside segmented search. ``show_all``
    disables confidence pruning, the final depth penalty and the relative
    band, and forces the threshold to 0. ``always_first`` skips the
    selector and takes the top-ranked survivor.
    """

    threshold: float = 0.0
    show_all: bool = False
    always_first: bool = False

    @property
    def active_threshold(self) -> float:
        return 0.0 if self.show_all else self.threshold

    @classmethod
    def from_env(cls) -> HopConfig:
        """Build a config from HOP_* environment variables."""
        return cls(
            threshold=parse_threshold(os.environ.get("HOP_THRESHOLD")),
            show_all=parse_flag(os.environ.get("HOP_SHOW_ALL")),
            always_first=parse_flag(os.environ.get("HOP_ALWAYS_FIRST")),
        )
