"""Placeholder confidence scores for the automated-evaluation task."""

import random
from typing import Callable, Optional

Scorer = Callable[[], float]

DEFAULT_FIXED_SCORE = 0.2
SCORING_STRATEGIES = ("fixed", "random")


def fixed_score(value: float = DEFAULT_FIXED_SCORE) -> Scorer:
    """Scorer that always returns *value*.

    The default of 0.2 forces the auto-approval path of the
    evaluation process.
    """
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"Fixed score must be within [0, 1], got {value}")

    def score() -> float:
        return value

    return score


def random_score(rng: Optional[random.Random] = None) -> Scorer:
    """Scorer drawing uniformly from [0, 1)."""
    rng = rng or random.Random()

    def score() -> float:
        return rng.random()

    return score


def get_scorer(
    strategy: str,
    fixed_value: float = DEFAULT_FIXED_SCORE,
    seed: Optional[int] = None,
) -> Scorer:
    """Return the scorer registered under *strategy*."""
    if strategy == "fixed":
        return fixed_score(fixed_value)
    if strategy == "random":
        return random_score(random.Random(seed))
    raise ValueError(
        f"Unknown scoring strategy '{strategy}'. Use one of: {', '.join(SCORING_STRATEGIES)}"
    )
