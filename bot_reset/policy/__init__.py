"""Reset policy: chance calculation and the decision engine."""

from bot_reset.policy.chance import compute_chance
from bot_reset.policy.decision_engine import (
    RandomSource,
    ResetDecisionEngine,
    decide,
    effective_target,
)

__all__ = [
    "compute_chance",
    "RandomSource",
    "ResetDecisionEngine",
    "decide",
    "effective_target",
]
