"""
Player Bot Reset - module entry point.

Coordinates the reset subsystems and exposes the three hooks a host
registers: on_login, on_level_changed and on_update. Configuration is
read exactly once, in from_config(), and is immutable afterwards.

Usage:
    host = HostServices(identity=..., mutator=..., world=...)
    module = PlayerBotResetModule.from_config(config_source, host)
    module.on_startup()

    # wired into the host's event system
    module.on_login(character)
    module.on_level_changed(character, old_level)
    module.on_update(diff_ms)
"""

from __future__ import annotations

import logging
from typing import Optional

from bot_reset.actions.action_executor import ActionExecutor
from bot_reset.config.config_source import ConfigSource
from bot_reset.config.policy_config import ConfigLoadResult, PolicyConfig, load_policy_config
from bot_reset.data_models import Decision
from bot_reset.hooks.event_dispatcher import EventDispatcher
from bot_reset.hooks.periodic_scanner import PeriodicScanner, ScanResult
from bot_reset.host.interfaces import HostCharacter, HostServices
from bot_reset.observability.run_log import get_run_log
from bot_reset.policy.decision_engine import RandomSource, ResetDecisionEngine

logger = logging.getLogger(__name__)


class PlayerBotResetModule:
    """
    Wires policy, decision engine, executor, dispatcher and scanner together.

    This class is the only object the host needs to hold on to.
    """

    def __init__(
        self,
        policy: PolicyConfig,
        host: HostServices,
        rng: Optional[RandomSource] = None,
    ):
        """
        Initialize the module.

        Args:
            policy: Validated policy (see load_policy_config)
            host: Host collaborators
            rng: Uniform [0, 100) source (default: DiceRoller-backed)
        """
        self.policy = policy
        self.host = host
        self.load_warnings: list[str] = []

        get_run_log().set_max_events(policy.run_log_max_events)
        self.engine = ResetDecisionEngine(policy, rng=rng)
        self.executor = ActionExecutor(
            identity=host.identity,
            mutator=host.mutator,
            notifier=host.notifier,
            debug_mode=policy.debug_mode,
        )
        self.dispatcher = EventDispatcher(
            engine=self.engine,
            executor=self.executor,
            identity=host.identity,
            notifier=host.notifier,
        )
        self.scanner = PeriodicScanner(
            policy=policy,
            engine=self.engine,
            executor=self.executor,
            identity=host.identity,
            world=host.world,
        )

    @classmethod
    def from_config(
        cls,
        source: ConfigSource,
        host: HostServices,
        rng: Optional[RandomSource] = None,
    ) -> "PlayerBotResetModule":
        """Load the policy from the host configuration and build the module."""
        result: ConfigLoadResult = load_policy_config(source)
        module = cls(result.policy, host, rng=rng)
        module.load_warnings = result.warnings
        return module

    def on_startup(self) -> None:
        """Log the active configuration once the world has started."""
        policy = self.policy
        logger.info(
            f"[mod-player-bot-reset] Loaded and active with MaxLevel = {policy.max_level}, "
            f"ResetChance = {policy.reset_chance_percent}%, "
            f"ScaledChance = {'Enabled' if policy.scaled_chance else 'Disabled'}."
        )
        if policy.skip_enabled:
            logger.info(
                f"[mod-player-bot-reset] Skipping bots from level {policy.skip_from_level} "
                f"to level {policy.skip_to_level}."
            )
        if policy.scan_enabled:
            logger.info(
                f"[mod-player-bot-reset] Max-level resets require {policy.min_time_played_seconds}s "
                f"played at level; checking every {policy.scan_interval_seconds}s."
            )

    # =========================================================================
    # HOST HOOKS
    # =========================================================================

    def on_login(self, character: Optional[HostCharacter]) -> Optional[Decision]:
        return self.dispatcher.on_login(character)

    def on_level_changed(
        self,
        character: Optional[HostCharacter],
        previous_level: int,
    ) -> Optional[Decision]:
        return self.dispatcher.on_level_changed(character, previous_level)

    def on_update(self, diff_ms: int) -> Optional[ScanResult]:
        return self.scanner.on_update(diff_ms)
