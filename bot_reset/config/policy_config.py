"""
Reset policy configuration.

PolicyConfig is an immutable snapshot of every tunable, loaded and
validated once at startup and passed explicitly to every component.
Out-of-range values are clamped to their documented fallback and logged
at error level; loading never fails.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from bot_reset.config.config_source import ConfigSource
from bot_reset.data_models import MAX_PLAYER_LEVEL
from bot_reset.observability.run_log import DEFAULT_MAX_EVENTS, get_run_log

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIGURATION KEYS
# =============================================================================


KEY_MAX_LEVEL = "ResetBotLevel.MaxLevel"
KEY_RESET_TO_LEVEL = "ResetBotLevel.ResetToLevel"
KEY_SKIP_FROM_LEVEL = "ResetBotLevel.SkipFromLevel"
KEY_SKIP_TO_LEVEL = "ResetBotLevel.SkipToLevel"
KEY_RESET_CHANCE = "ResetBotLevel.ResetChance"
KEY_SCALED_CHANCE = "ResetBotLevel.ScaledChance"
KEY_DEBUG_MODE = "ResetBotLevel.DebugMode"
KEY_RESTRICT_TIME_PLAYED = "ResetBotLevel.RestrictTimePlayed"
KEY_MIN_TIME_PLAYED = "ResetBotLevel.MinTimePlayed"
KEY_CHECK_FREQUENCY = "ResetBotLevel.PlayedTimeCheckFrequency"
KEY_RUN_LOG_MAX_EVENTS = "ResetBotLevel.RunLogMaxEvents"

DEFAULT_MAX_LEVEL = 80
DEFAULT_RESET_TO_LEVEL = 1
DEFAULT_SKIP_FROM_LEVEL = 0
DEFAULT_SKIP_TO_LEVEL = 1
DEFAULT_RESET_CHANCE = 100
DEFAULT_MIN_TIME_PLAYED = 86400  # one day
DEFAULT_CHECK_FREQUENCY = 60
DEFAULT_RUN_LOG_MAX_EVENTS = DEFAULT_MAX_EVENTS


@dataclass(frozen=True)
class PolicyConfig:
    """All reset/skip tunables. Never mutated after load."""
    max_level: int = DEFAULT_MAX_LEVEL          # 0 disables resets
    reset_to_level: int = DEFAULT_RESET_TO_LEVEL
    skip_from_level: int = DEFAULT_SKIP_FROM_LEVEL  # 0 disables skips
    skip_to_level: int = DEFAULT_SKIP_TO_LEVEL
    reset_chance_percent: int = DEFAULT_RESET_CHANCE
    scaled_chance: bool = False
    debug_mode: bool = False
    restrict_by_played_time: bool = False
    min_time_played_seconds: int = DEFAULT_MIN_TIME_PLAYED
    scan_interval_seconds: int = DEFAULT_CHECK_FREQUENCY
    run_log_max_events: int = DEFAULT_RUN_LOG_MAX_EVENTS

    @property
    def reset_enabled(self) -> bool:
        return self.max_level > 0

    @property
    def skip_enabled(self) -> bool:
        return self.skip_from_level > 0

    @property
    def scan_enabled(self) -> bool:
        """The periodic scan only exists to service the time-played gate."""
        return self.restrict_by_played_time and self.reset_enabled

    @property
    def scan_interval_ms(self) -> int:
        return self.scan_interval_seconds * 1000

    def to_dict(self) -> dict[str, Any]:
        """Serialize back to the host's key names."""
        return {
            KEY_MAX_LEVEL: self.max_level,
            KEY_RESET_TO_LEVEL: self.reset_to_level,
            KEY_SKIP_FROM_LEVEL: self.skip_from_level,
            KEY_SKIP_TO_LEVEL: self.skip_to_level,
            KEY_RESET_CHANCE: self.reset_chance_percent,
            KEY_SCALED_CHANCE: self.scaled_chance,
            KEY_DEBUG_MODE: self.debug_mode,
            KEY_RESTRICT_TIME_PLAYED: self.restrict_by_played_time,
            KEY_MIN_TIME_PLAYED: self.min_time_played_seconds,
            KEY_CHECK_FREQUENCY: self.scan_interval_seconds,
            KEY_RUN_LOG_MAX_EVENTS: self.run_log_max_events,
        }


@dataclass
class ConfigLoadResult:
    """Result of loading the policy."""
    policy: PolicyConfig
    warnings: list[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.warnings


class _Corrections:
    """Collects clamped values so each one is logged the same way."""

    def __init__(self):
        self.warnings: list[str] = []

    def clamp(self, key: str, raw: Any, fallback: Any) -> Any:
        message = (
            f"[mod-player-bot-reset] Invalid {key} value: {raw}. "
            f"Using default value {fallback}."
        )
        logger.error(message)
        get_run_log().log_config(key, raw, fallback, message)
        self.warnings.append(message)
        return fallback


def load_policy_config(source: ConfigSource) -> ConfigLoadResult:
    """
    Read and validate every reset tunable from a configuration source.

    Validation order matters: max_level is settled first because the
    level targets are checked against it.

    Args:
        source: Host configuration store

    Returns:
        ConfigLoadResult with the frozen policy and any corrections made
    """
    fix = _Corrections()

    max_level = source.get_option(KEY_MAX_LEVEL, DEFAULT_MAX_LEVEL)
    if max_level != 0 and not 2 <= max_level <= MAX_PLAYER_LEVEL:
        max_level = fix.clamp(KEY_MAX_LEVEL, max_level, DEFAULT_MAX_LEVEL)

    reset_to_level = source.get_option(KEY_RESET_TO_LEVEL, DEFAULT_RESET_TO_LEVEL)
    if reset_to_level < 1 or (max_level > 0 and reset_to_level >= max_level):
        reset_to_level = fix.clamp(KEY_RESET_TO_LEVEL, reset_to_level, DEFAULT_RESET_TO_LEVEL)

    skip_from_level = source.get_option(KEY_SKIP_FROM_LEVEL, DEFAULT_SKIP_FROM_LEVEL)
    if skip_from_level < 0 or skip_from_level > MAX_PLAYER_LEVEL or (
        skip_from_level > 0 and max_level > 0 and skip_from_level >= max_level
    ):
        skip_from_level = fix.clamp(KEY_SKIP_FROM_LEVEL, skip_from_level, DEFAULT_SKIP_FROM_LEVEL)

    skip_to_level = source.get_option(KEY_SKIP_TO_LEVEL, DEFAULT_SKIP_TO_LEVEL)
    if not 1 <= skip_to_level <= MAX_PLAYER_LEVEL or (max_level > 0 and skip_to_level > max_level):
        skip_to_level = fix.clamp(KEY_SKIP_TO_LEVEL, skip_to_level, DEFAULT_SKIP_TO_LEVEL)

    reset_chance = source.get_option(KEY_RESET_CHANCE, DEFAULT_RESET_CHANCE)
    if not 0 <= reset_chance <= 100:
        reset_chance = fix.clamp(KEY_RESET_CHANCE, reset_chance, DEFAULT_RESET_CHANCE)

    min_time_played = source.get_option(KEY_MIN_TIME_PLAYED, DEFAULT_MIN_TIME_PLAYED)
    if min_time_played < 0:
        min_time_played = fix.clamp(KEY_MIN_TIME_PLAYED, min_time_played, DEFAULT_MIN_TIME_PLAYED)

    check_frequency = source.get_option(KEY_CHECK_FREQUENCY, DEFAULT_CHECK_FREQUENCY)
    if check_frequency <= 0:
        check_frequency = fix.clamp(KEY_CHECK_FREQUENCY, check_frequency, DEFAULT_CHECK_FREQUENCY)

    run_log_max_events = source.get_option(KEY_RUN_LOG_MAX_EVENTS, DEFAULT_RUN_LOG_MAX_EVENTS)
    if run_log_max_events < 1:
        run_log_max_events = fix.clamp(
            KEY_RUN_LOG_MAX_EVENTS, run_log_max_events, DEFAULT_RUN_LOG_MAX_EVENTS
        )

    policy = PolicyConfig(
        max_level=max_level,
        reset_to_level=reset_to_level,
        skip_from_level=skip_from_level,
        skip_to_level=skip_to_level,
        reset_chance_percent=reset_chance,
        scaled_chance=source.get_option(KEY_SCALED_CHANCE, False),
        debug_mode=source.get_option(KEY_DEBUG_MODE, False),
        restrict_by_played_time=source.get_option(KEY_RESTRICT_TIME_PLAYED, False),
        min_time_played_seconds=min_time_played,
        scan_interval_seconds=check_frequency,
        run_log_max_events=run_log_max_events,
    )
    return ConfigLoadResult(policy=policy, warnings=fix.warnings)
