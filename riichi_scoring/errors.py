from __future__ import annotations


class ScoringError(ValueError):
    """Base class for every failure the scoring engine reports to its caller."""

    code = "scoring_error"

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class InvalidHandShape(ScoringError):
    """No standard, seven-pairs or thirteen-orphans arrangement fits the tiles."""

    code = "invalid_hand_shape"


class NoYakuFound(ScoringError):
    """The hand is complete but no arrangement carries a yaku (dora alone do not count)."""

    code = "no_yaku"


class AmbiguousConfiguration(ScoringError):
    """Context flags contradict each other or the hand."""

    code = "ambiguous_configuration"
