"""
Applies reset and skip decisions to a live character.

All mutation goes through the host's CharacterMutator. The factory
randomize call both sets the level and re-gears the bot for it, so a
reset is a set rather than a delta and applying it twice is harmless.
There is no undo path; the executor is only called with final decisions.
"""

from __future__ import annotations

import logging
from typing import Optional

from bot_reset.data_models import Decision, DecisionType
from bot_reset.host.interfaces import (
    BotIdentity,
    CharacterMutator,
    HostCharacter,
    NotificationChannel,
    SessionNotificationChannel,
)
from bot_reset.observability.run_log import get_run_log

logger = logging.getLogger(__name__)


RESET_MESSAGE = "[mod-player-bot-reset] Your level has been reset to {level}."
SKIP_MESSAGE = "[mod-player-bot-reset] Your level has been adjusted to {level}."


class ActionExecutor:
    """Performs the character mutations behind a Reset or Skip decision."""

    def __init__(
        self,
        identity: BotIdentity,
        mutator: CharacterMutator,
        notifier: Optional[NotificationChannel] = None,
        debug_mode: bool = False,
    ):
        """
        Initialize the executor.

        Args:
            identity: Oracle that hands out the bot automation handle
            mutator: Character mutation API
            notifier: Channel for the confirmation message
            debug_mode: Log every step at INFO instead of DEBUG
        """
        self._identity = identity
        self._mutator = mutator
        self._notifier = notifier or SessionNotificationChannel()
        self._debug_mode = debug_mode

    def _trace(self, message: str) -> None:
        logger.log(logging.INFO if self._debug_mode else logging.DEBUG, message)

    def apply(self, character: Optional[HostCharacter], decision: Decision) -> bool:
        """
        Apply a decision. NO_ACTION is a no-op.

        Returns:
            True if the character was changed
        """
        if decision.kind == DecisionType.RESET:
            return self.apply_reset(character, decision.target_level)
        if decision.kind == DecisionType.SKIP:
            return self.apply_skip(character, decision.target_level)
        return False

    def apply_reset(self, character: Optional[HostCharacter], target_level: int) -> bool:
        """Reset a bot down to target_level and re-gear it."""
        return self._apply(character, target_level, DecisionType.RESET, RESET_MESSAGE)

    def apply_skip(self, character: Optional[HostCharacter], target_level: int) -> bool:
        """Move a bot to target_level and re-gear it."""
        return self._apply(character, target_level, DecisionType.SKIP, SKIP_MESSAGE)

    def _apply(
        self,
        character: Optional[HostCharacter],
        target_level: int,
        action: DecisionType,
        message: str,
    ) -> bool:
        if character is None:
            logger.error(f"[mod-player-bot-reset] {action.value} requested with no character.")
            return False

        name = character.name
        old_level = character.level
        run_log = get_run_log()

        if character.session is None:
            logger.error(f"[mod-player-bot-reset] Bot '{name}' has no session. Skipping {action.value}.")
            run_log.log_action(name, action.value, old_level, old_level, success=False, detail="no session")
            return False

        bot_ai = self._identity.get_bot_ai(character)
        if bot_ai is None:
            logger.error(f"[mod-player-bot-reset] Failed to retrieve PlayerbotAI for bot '{name}'.")
            run_log.log_action(name, action.value, old_level, old_level, success=False, detail="no bot AI")
            return False

        if self._mutator.remove_companion(character):
            self._trace(f"[mod-player-bot-reset] Removed companion of bot '{name}'.")

        self._mutator.factory_randomize(bot_ai, character, target_level)
        self._mutator.reset_experience(character)
        self._mutator.run_maintenance(bot_ai)
        self._trace(
            f"[mod-player-bot-reset] Bot '{name}' {action.value} from level {old_level} "
            f"to {target_level}; gear and stats rebuilt."
        )

        if not self._notifier.send(character, message.format(level=target_level)):
            logger.warning(f"[mod-player-bot-reset] Could not notify bot '{name}' of {action.value}.")

        run_log.log_action(name, action.value, old_level, target_level)
        return True
