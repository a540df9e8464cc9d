"""Exception hierarchy for hop.

The search pipeline raises these for its terminal outcomes; the CLI is the
only place that turns them into a message and an exit status. Filesystem
errors met while scanning never surface here, they degrade to partial
results instead.
"""


class HopError(Exception):
    """Base exception for all hop errors."""


class ConfigError(HopError, ValueError):
    """A tunable could not be parsed (e.g. a non-numeric threshold)."""


class NoMatchError(HopError):
    """No directory survived the search and ranking stages."""

    def __init__(self, pattern: str) -> None:
        super().__init__(f"No directory matching '{pattern}'")
        self.pattern = pattern


class NoSelectionError(HopError):
    """The selector was closed without choosing a directory."""

    def __init__(self) -> None:
        super().__init__("No directory selected")
