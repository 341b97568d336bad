"""
Reset/skip decision engine.

Given a fresh BotObservation, the active policy, a uniform [0, 100) random
source and the trigger that caused the evaluation, returns one of
NoAction, Reset(target) or Skip(target). The rules are evaluated in a
fixed order and the first match wins:

1. Humans and player-owned bots are never touched.
2. Level 1 is already the floor.
3. A Death Knight at its starting level (55) is protected.
4. Skip: at skip_from_level jump to skip_to_level (login / level change).
5. max_level == 0 disables resets.
6. Above max_level: reset at once, no roll, no time gate.
7. At max_level: optional time-played gate, then a chance roll.
8. Below max_level with scaled chance: a roll on every level change.

Death Knights are never moved below level 55, whatever the configured
target. The module-level decide() is a pure function; ResetDecisionEngine
wraps it with logging and the run log.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from bot_reset.config.policy_config import PolicyConfig
from bot_reset.data_models import (
    DEATH_KNIGHT_START_LEVEL,
    BotObservation,
    Decision,
    PercentileRng,
    Trigger,
)
from bot_reset.observability.run_log import get_run_log
from bot_reset.policy.chance import compute_chance

logger = logging.getLogger(__name__)

# Zero-argument source of a uniform integer in [0, 100)
RandomSource = Callable[[], int]


def effective_target(configured_level: int, observation: BotObservation) -> int:
    """Apply the Death Knight floor to a configured target level."""
    if observation.is_death_knight:
        return max(configured_level, DEATH_KNIGHT_START_LEVEL)
    return configured_level


def _roll(
    observation: BotObservation,
    policy: PolicyConfig,
    rng: RandomSource,
    context: str,
) -> Decision:
    chance = compute_chance(observation.level, policy)
    roll = rng()
    target = effective_target(policy.reset_to_level, observation)
    if roll < chance:
        return Decision.reset(target, f"{context}: rolled {roll} < {chance}%")
    return Decision.no_action(f"{context}: rolled {roll} >= {chance}%")


def _time_gate_passed(observation: BotObservation, policy: PolicyConfig) -> bool:
    return observation.time_played_at_level >= policy.min_time_played_seconds


def decide(
    observation: BotObservation,
    policy: PolicyConfig,
    rng: RandomSource,
    trigger: Trigger,
) -> Decision:
    """
    Decide whether a bot should be reset or skipped.

    Args:
        observation: Snapshot of the bot
        policy: Active policy
        rng: Uniform [0, 100) source, only called when a roll is needed
        trigger: What caused this evaluation

    Returns:
        The Decision
    """
    if not observation.is_bot:
        return Decision.no_action("not a bot")
    if not observation.is_random_bot:
        return Decision.no_action("not a random bot")

    level = observation.level
    if level == 1:
        return Decision.no_action("already level 1")
    if level == DEATH_KNIGHT_START_LEVEL and observation.is_death_knight:
        return Decision.no_action("Death Knight at starting level")

    if trigger != Trigger.PERIODIC_SCAN and policy.skip_enabled and level == policy.skip_from_level:
        target = effective_target(policy.skip_to_level, observation)
        return Decision.skip(target, f"reached skip level {policy.skip_from_level}")

    if not policy.reset_enabled:
        return Decision.no_action("resets disabled")

    if level > policy.max_level:
        target = effective_target(policy.reset_to_level, observation)
        return Decision.reset(target, f"level {level} above max level {policy.max_level}")

    if level == policy.max_level:
        if trigger == Trigger.PERIODIC_SCAN:
            if not policy.restrict_by_played_time:
                return Decision.no_action("time-played restriction disabled")
            if not _time_gate_passed(observation, policy):
                return Decision.no_action("not enough time played at max level")
        elif policy.restrict_by_played_time:
            if trigger == Trigger.LEVEL_CHANGED:
                return Decision.no_action("deferred to periodic scan")
            if not _time_gate_passed(observation, policy):
                return Decision.no_action("not enough time played at max level")
        return _roll(observation, policy, rng, "max level")

    if policy.scaled_chance and trigger == Trigger.LEVEL_CHANGED:
        return _roll(observation, policy, rng, "scaled level-up")

    return Decision.no_action("below max level")


class ResetDecisionEngine:
    """
    Stateful front for decide().

    Holds the policy and the random source, logs every decision and
    records it in the run log. With debug_mode the reasons are logged at
    INFO, otherwise at DEBUG.
    """

    def __init__(self, policy: PolicyConfig, rng: Optional[RandomSource] = None):
        """
        Initialize the engine.

        Args:
            policy: Active policy
            rng: Uniform [0, 100) source (default: PercentileRng over DiceRoller)
        """
        self._policy = policy
        self._rng = rng or PercentileRng()

    @property
    def policy(self) -> PolicyConfig:
        return self._policy

    def evaluate(self, observation: BotObservation, trigger: Trigger) -> Decision:
        """Run the decision rules for one bot and record the outcome."""
        decision = decide(observation, self._policy, self._rng, trigger)

        level = logging.INFO if self._policy.debug_mode else logging.DEBUG
        logger.log(
            level,
            f"[mod-player-bot-reset] {observation.name or '<unnamed>'} "
            f"(level {observation.level}, {trigger.value}): {decision} - {decision.reason}",
        )
        get_run_log().log_decision(
            character_name=observation.name,
            level=observation.level,
            trigger=trigger.value,
            decision=decision.kind.value,
            target_level=decision.target_level,
            reason=decision.reason,
        )
        return decision
