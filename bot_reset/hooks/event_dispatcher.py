"""
Login and level-change hooks.

Both hooks build a fresh observation, ask the decision engine and hand
any resulting action to the executor. They run synchronously on the
thread that delivers the host event.
"""

from __future__ import annotations

import logging
from typing import Optional

from bot_reset.actions.action_executor import ActionExecutor
from bot_reset.data_models import BotObservation, Decision, Trigger
from bot_reset.host.interfaces import BotIdentity, HostCharacter, NotificationChannel
from bot_reset.policy.decision_engine import ResetDecisionEngine

logger = logging.getLogger(__name__)


MODULE_ACTIVE_MESSAGE = "The [mod-player-bot-reset] module is active on this server."


def observe(character: HostCharacter, identity: BotIdentity) -> Optional[BotObservation]:
    """Build an observation, or None if the character cannot be read."""
    try:
        return BotObservation.from_character(character, identity)
    except ValueError as e:
        logger.error(f"[mod-player-bot-reset] Cannot observe '{character.name}': {e}")
        return None


class EventDispatcher:
    """Routes host login / level-change events into the decision engine."""

    def __init__(
        self,
        engine: ResetDecisionEngine,
        executor: ActionExecutor,
        identity: BotIdentity,
        notifier: NotificationChannel,
    ):
        self._engine = engine
        self._executor = executor
        self._identity = identity
        self._notifier = notifier

    def _evaluate_and_apply(self, character: HostCharacter, trigger: Trigger) -> Decision:
        observation = observe(character, self._identity)
        if observation is None:
            return Decision.no_action("unreadable character")
        try:
            decision = self._engine.evaluate(observation, trigger)
            if decision.is_action:
                self._executor.apply(character, decision)
        except Exception:
            # A failing host call must never reach the host event loop
            logger.exception(
                f"[mod-player-bot-reset] {trigger.value} handling failed for '{character.name}'."
            )
            return Decision.no_action("host error")
        return decision

    def on_login(self, character: Optional[HostCharacter]) -> Optional[Decision]:
        """
        Handle a character entering the world.

        The module-active notice goes out to every character; the decision
        then runs with the time-played gate checked immediately.

        Returns:
            The decision taken, or None if no character was given
        """
        if character is None:
            logger.error("[mod-player-bot-reset] OnLogin called with no character.")
            return None

        try:
            self._notifier.send(character, MODULE_ACTIVE_MESSAGE)
        except Exception:
            logger.exception(
                f"[mod-player-bot-reset] Could not send module notice to '{character.name}'."
            )
        return self._evaluate_and_apply(character, Trigger.LOGIN)

    def on_level_changed(
        self,
        character: Optional[HostCharacter],
        previous_level: int,
    ) -> Optional[Decision]:
        """
        Handle a level change.

        Args:
            character: The character whose level changed
            previous_level: Level before the change (logged only)

        Returns:
            The decision taken, or None if no character was given
        """
        if character is None:
            logger.error("[mod-player-bot-reset] OnLevelChanged called with no character.")
            return None

        logger.debug(f"{character.name} level {previous_level} -> {character.level}")
        return self._evaluate_and_apply(character, Trigger.LEVEL_CHANGED)
