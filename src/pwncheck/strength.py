"""
Password strength scoring.

The estimator itself is zxcvbn; this module only defines the report
shape pwncheck consumes and adapts the library to it.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol

from zxcvbn import zxcvbn

SCORE_LABELS = {
    0: "Very weak",
    1: "Weak",
    2: "Fair",
    3: "Strong",
    4: "Very strong",
}

SCORE_COLORS = {
    0: "red",
    1: "orange3",
    2: "yellow",
    3: "green",
    4: "bold green",
}


@dataclass(frozen=True)
class StrengthReport:
    """Score (0-4) and feedback for a password."""

    score: int
    warning: str | None = None
    suggestions: list[str] = field(default_factory=list)

    def __post_init__(self):
        if self.score not in SCORE_LABELS:
            raise ValueError(f"score must be between 0 and 4, got {self.score}")

    @property
    def label(self) -> str:
        return SCORE_LABELS[self.score]

    @property
    def color(self) -> str:
        return SCORE_COLORS[self.score]

    @property
    def percent(self) -> int:
        return (self.score + 1) * 20

    @classmethod
    def from_estimate(cls, data: dict[str, Any]) -> "StrengthReport":
        """Create a report from a ``{score, feedback}`` estimator result."""
        feedback = data.get("feedback") or {}
        return cls(
            score=int(data["score"]),
            warning=feedback.get("warning") or None,
            suggestions=list(feedback.get("suggestions") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "score": self.score,
            "label": self.label,
            "warning": self.warning,
            "suggestions": self.suggestions,
        }


class StrengthScorer(Protocol):
    def score(self, password: str) -> StrengthReport | None: ...


class ZxcvbnScorer:
    """StrengthScorer backed by the zxcvbn estimator."""

    def __init__(self, user_inputs: list[str] | None = None):
        self.user_inputs = user_inputs or []

    def score(self, password: str) -> StrengthReport | None:
        if not password:
            return None
        return StrengthReport.from_estimate(zxcvbn(password, user_inputs=self.user_inputs))
