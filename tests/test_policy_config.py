"""
Tests for policy loading and validation.

These tests verify:
- Defaults when no keys are set
- Clamping of every out-of-range value
- Coercion of string values from the host store
- JSON file loading
"""

import json
import logging

import pytest

from bot_reset.config.config_source import ConfigValueError, MappingConfigSource, coerce_value
from bot_reset.config.policy_config import (
    KEY_CHECK_FREQUENCY,
    KEY_DEBUG_MODE,
    KEY_MAX_LEVEL,
    KEY_MIN_TIME_PLAYED,
    KEY_RESET_CHANCE,
    KEY_RESET_TO_LEVEL,
    KEY_RESTRICT_TIME_PLAYED,
    KEY_RUN_LOG_MAX_EVENTS,
    KEY_SCALED_CHANCE,
    KEY_SKIP_FROM_LEVEL,
    KEY_SKIP_TO_LEVEL,
    PolicyConfig,
    load_policy_config,
)
from bot_reset.observability.run_log import get_run_log


def load(values):
    return load_policy_config(MappingConfigSource(values))


# =============================================================================
# DEFAULTS
# =============================================================================


class TestDefaults:

    def test_empty_source_gives_defaults(self):
        result = load({})
        assert result.clean
        assert result.policy == PolicyConfig()

    def test_default_values(self):
        policy = load({}).policy
        assert policy.max_level == 80
        assert policy.reset_to_level == 1
        assert policy.skip_from_level == 0
        assert policy.skip_to_level == 1
        assert policy.reset_chance_percent == 100
        assert policy.scaled_chance is False
        assert policy.debug_mode is False
        assert policy.restrict_by_played_time is False
        assert policy.min_time_played_seconds == 86400
        assert policy.scan_interval_seconds == 60

    def test_policy_is_frozen(self):
        policy = PolicyConfig()
        with pytest.raises(AttributeError):
            policy.max_level = 10  # type: ignore[misc]

    def test_derived_flags(self):
        policy = PolicyConfig(max_level=0, restrict_by_played_time=True, scan_interval_seconds=5)
        assert not policy.reset_enabled
        assert not policy.scan_enabled
        assert policy.scan_interval_ms == 5000

    def test_to_dict_uses_host_keys(self):
        data = PolicyConfig().to_dict()
        assert data[KEY_MAX_LEVEL] == 80
        assert data[KEY_CHECK_FREQUENCY] == 60

    def test_full_valid_config_round_trips(self):
        values = {
            KEY_MAX_LEVEL: 70,
            KEY_RESET_TO_LEVEL: 10,
            KEY_SKIP_FROM_LEVEL: 20,
            KEY_SKIP_TO_LEVEL: 40,
            KEY_RESET_CHANCE: 25,
            KEY_SCALED_CHANCE: True,
            KEY_DEBUG_MODE: True,
            KEY_RESTRICT_TIME_PLAYED: True,
            KEY_MIN_TIME_PLAYED: 3600,
            KEY_CHECK_FREQUENCY: 300,
            KEY_RUN_LOG_MAX_EVENTS: 2000,
        }
        result = load(values)
        assert result.clean
        assert result.policy.to_dict() == values


# =============================================================================
# CLAMPING
# =============================================================================


class TestMaxLevel:

    @pytest.mark.parametrize("raw", [1, 81, 255, -3])
    def test_out_of_range_falls_back_to_80(self, raw):
        result = load({KEY_MAX_LEVEL: raw})
        assert result.policy.max_level == 80
        assert len(result.warnings) == 1

    @pytest.mark.parametrize("raw", [0, 2, 60, 80])
    def test_valid_values_kept(self, raw):
        assert load({KEY_MAX_LEVEL: raw}).policy.max_level == raw

    def test_invalid_value_logged_at_error(self, caplog):
        with caplog.at_level(logging.ERROR):
            load({KEY_MAX_LEVEL: 99})
        assert any("Invalid ResetBotLevel.MaxLevel value: 99" in r.message for r in caplog.records)

    def test_correction_recorded_in_run_log(self):
        load({KEY_MAX_LEVEL: 99})
        events = [e for e in get_run_log().get_events() if e.event_type.value == "config"]
        assert len(events) == 1
        assert events[0].key == KEY_MAX_LEVEL
        assert events[0].raw_value == 99
        assert events[0].applied_value == 80


class TestLevelTargets:

    def test_reset_to_must_be_below_max(self):
        policy = load({KEY_MAX_LEVEL: 60, KEY_RESET_TO_LEVEL: 60}).policy
        assert policy.reset_to_level == 1

    def test_reset_to_zero_invalid(self):
        assert load({KEY_RESET_TO_LEVEL: 0}).policy.reset_to_level == 1

    def test_reset_to_unchecked_against_disabled_max(self):
        policy = load({KEY_MAX_LEVEL: 0, KEY_RESET_TO_LEVEL: 30}).policy
        assert policy.reset_to_level == 30

    def test_reset_to_checked_against_clamped_max(self):
        """An invalid max is fixed to 80 before reset_to is compared."""
        result = load({KEY_MAX_LEVEL: 120, KEY_RESET_TO_LEVEL: 79})
        assert result.policy.max_level == 80
        assert result.policy.reset_to_level == 79
        assert len(result.warnings) == 1

    def test_skip_from_must_be_below_max(self):
        policy = load({KEY_MAX_LEVEL: 60, KEY_SKIP_FROM_LEVEL: 60}).policy
        assert policy.skip_from_level == 0
        assert not policy.skip_enabled

    def test_skip_from_kept_when_valid(self):
        assert load({KEY_SKIP_FROM_LEVEL: 20}).policy.skip_from_level == 20

    def test_skip_from_allowed_with_resets_disabled(self):
        assert load({KEY_MAX_LEVEL: 0, KEY_SKIP_FROM_LEVEL: 70}).policy.skip_from_level == 70

    @pytest.mark.parametrize("raw", [0, 81])
    def test_skip_to_out_of_range(self, raw):
        assert load({KEY_SKIP_TO_LEVEL: raw}).policy.skip_to_level == 1

    def test_skip_to_may_equal_max(self):
        assert load({KEY_MAX_LEVEL: 60, KEY_SKIP_TO_LEVEL: 60}).policy.skip_to_level == 60

    def test_skip_to_above_max(self):
        assert load({KEY_MAX_LEVEL: 60, KEY_SKIP_TO_LEVEL: 61}).policy.skip_to_level == 1


class TestOtherValues:

    @pytest.mark.parametrize("raw", [101, 200, -1])
    def test_reset_chance_out_of_range(self, raw):
        assert load({KEY_RESET_CHANCE: raw}).policy.reset_chance_percent == 100

    def test_reset_chance_zero_kept(self):
        assert load({KEY_RESET_CHANCE: 0}).policy.reset_chance_percent == 0

    def test_negative_min_time_played(self):
        assert load({KEY_MIN_TIME_PLAYED: -5}).policy.min_time_played_seconds == 86400

    def test_zero_check_frequency(self):
        assert load({KEY_CHECK_FREQUENCY: 0}).policy.scan_interval_seconds == 60

    def test_run_log_cap_must_be_positive(self):
        assert load({KEY_RUN_LOG_MAX_EVENTS: 0}).policy.run_log_max_events == 5000

    def test_multiple_corrections_collected(self):
        result = load({KEY_MAX_LEVEL: 1, KEY_RESET_CHANCE: 500, KEY_SKIP_TO_LEVEL: 0})
        assert len(result.warnings) == 3


# =============================================================================
# CONFIG SOURCE
# =============================================================================


class TestMappingConfigSource:

    def test_string_values_coerced(self):
        policy = load({
            KEY_MAX_LEVEL: "70",
            KEY_SCALED_CHANCE: "true",
            KEY_RESTRICT_TIME_PLAYED: "1",
            KEY_DEBUG_MODE: "off",
        }).policy
        assert policy.max_level == 70
        assert policy.scaled_chance is True
        assert policy.restrict_by_played_time is True
        assert policy.debug_mode is False

    def test_unreadable_value_uses_default(self, caplog):
        with caplog.at_level(logging.ERROR):
            policy = load({KEY_MAX_LEVEL: "eighty"}).policy
        assert policy.max_level == 80
        assert any("Unreadable value" in r.message for r in caplog.records)

    def test_contains(self):
        source = MappingConfigSource({KEY_MAX_LEVEL: 10})
        assert KEY_MAX_LEVEL in source
        assert KEY_RESET_CHANCE not in source

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "reset.json"
        path.write_text(json.dumps({KEY_MAX_LEVEL: 60, KEY_RESET_CHANCE: 10}), encoding="utf-8")
        policy = load_policy_config(MappingConfigSource.from_json_file(path)).policy
        assert policy.max_level == 60
        assert policy.reset_chance_percent == 10

    def test_from_json_file_rejects_list(self, tmp_path):
        path = tmp_path / "reset.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ValueError):
            MappingConfigSource.from_json_file(path)


class TestCoerceValue:

    def test_bool_from_int(self):
        assert coerce_value(0, False) is False
        assert coerce_value(2, False) is True

    def test_int_from_bool(self):
        assert coerce_value(True, 0) == 1

    def test_bad_bool(self):
        with pytest.raises(ConfigValueError):
            coerce_value("maybe", False)

    def test_bad_int(self):
        with pytest.raises(ConfigValueError):
            coerce_value("1.5", 0)
