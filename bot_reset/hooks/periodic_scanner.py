"""
Periodic re-check of bots held back by the time-played gate.

The host world loop calls on_update() with the milliseconds elapsed since
the previous tick. Once scan_interval_seconds have accumulated the
scanner walks every connected character and evaluates it with the
PERIODIC_SCAN trigger. The scanner exists only for the time-played gate,
so with that restriction off (or resets disabled) it never scans.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from bot_reset.actions.action_executor import ActionExecutor
from bot_reset.config.policy_config import PolicyConfig
from bot_reset.data_models import Trigger
from bot_reset.hooks.event_dispatcher import observe
from bot_reset.host.interfaces import BotIdentity, WorldEnumerator
from bot_reset.observability.run_log import get_run_log
from bot_reset.policy.decision_engine import ResetDecisionEngine

logger = logging.getLogger(__name__)


@dataclass
class ScanTimer:
    """Milliseconds accumulated since the last scan."""
    elapsed_ms: int = 0

    def advance(self, diff_ms: int) -> int:
        self.elapsed_ms += diff_ms
        return self.elapsed_ms

    def reset(self) -> None:
        self.elapsed_ms = 0


@dataclass
class ScanResult:
    """Outcome of one sweep over the world."""
    characters_seen: int = 0
    characters_evaluated: int = 0
    actions_applied: int = 0
    errors: int = 0


class PeriodicScanner:
    """World-tick driven sweep over connected bots."""

    def __init__(
        self,
        policy: PolicyConfig,
        engine: ResetDecisionEngine,
        executor: ActionExecutor,
        identity: BotIdentity,
        world: WorldEnumerator,
    ):
        self._policy = policy
        self._engine = engine
        self._executor = executor
        self._identity = identity
        self._world = world
        self._timer = ScanTimer()
        self._scans_completed = 0

    @property
    def enabled(self) -> bool:
        return self._policy.scan_enabled

    @property
    def elapsed_ms(self) -> int:
        return self._timer.elapsed_ms

    @property
    def scans_completed(self) -> int:
        return self._scans_completed

    def on_update(self, diff_ms: int) -> Optional[ScanResult]:
        """
        Advance the timer and scan when the interval has elapsed.

        Args:
            diff_ms: Milliseconds since the previous tick

        Returns:
            ScanResult if a scan ran, None otherwise
        """
        if diff_ms < 0:
            raise ValueError(f"Tick delta cannot be negative: {diff_ms}")

        self._timer.advance(diff_ms)
        if not self.enabled:
            return None
        if self._timer.elapsed_ms < self._policy.scan_interval_ms:
            return None

        self._timer.reset()
        return self.scan()

    def scan(self) -> ScanResult:
        """Evaluate every connected character once."""
        result = ScanResult()

        for character in self._world.iter_characters():
            result.characters_seen += 1
            if character is None or not character.is_in_world:
                continue

            observation = observe(character, self._identity)
            if observation is None:
                result.errors += 1
                continue

            result.characters_evaluated += 1
            try:
                decision = self._engine.evaluate(observation, Trigger.PERIODIC_SCAN)
                if decision.is_action and self._executor.apply(character, decision):
                    result.actions_applied += 1
            except Exception:
                # One broken character must not stall the sweep
                result.errors += 1
                logger.exception(f"[mod-player-bot-reset] Scan failed for '{character.name}'.")

        self._scans_completed += 1
        get_run_log().log_scan(
            result.characters_seen,
            result.characters_evaluated,
            result.actions_applied,
            context={"errors": result.errors},
        )
        logger.debug(
            f"Scan #{self._scans_completed}: seen={result.characters_seen} "
            f"evaluated={result.characters_evaluated} applied={result.actions_applied}"
        )
        return result
