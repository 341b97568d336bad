"""Reset chance calculation."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from bot_reset.config.policy_config import PolicyConfig


def compute_chance(level: int, policy: "PolicyConfig") -> int:
    """
    Effective reset chance, in percent, for a bot at ``level``.

    With scaling enabled the chance grows linearly with level and reaches
    the configured chance at max_level. Integer arithmetic keeps the floor
    exact (level=80, max=80 gives the full chance, not 99).

    Args:
        level: Current character level
        policy: Active policy

    Returns:
        Chance in percent

    Raises:
        ValueError: If scaling is requested with resets disabled
    """
    if not policy.scaled_chance:
        return policy.reset_chance_percent
    if policy.max_level <= 0:
        raise ValueError("Scaled chance requires max_level > 0")
    return (level * policy.reset_chance_percent) // policy.max_level
