"""
Configuration sources for the reset module.

The host hands configuration over as a flat key/value store (for example
``ResetBotLevel.MaxLevel = 80``). Values may arrive already typed or as
raw strings, so the mapping source coerces them to the type of the
default the caller asks with.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Optional, Protocol, TypeVar, Union

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


class ConfigSource(Protocol):
    """Process-wide key/value configuration store."""

    def get_option(self, key: str, default: T) -> T: ...


class ConfigValueError(ValueError):
    """A configuration value could not be coerced to the expected type."""


def coerce_value(raw: Any, default: T) -> T:
    """
    Coerce a raw configuration value to the type of ``default``.

    Args:
        raw: Value as stored (str, int, bool, ...)
        default: Default value whose type is the target type

    Returns:
        The coerced value

    Raises:
        ConfigValueError: If the value cannot be interpreted
    """
    if isinstance(default, bool):
        if isinstance(raw, bool):
            return raw  # type: ignore[return-value]
        if isinstance(raw, int):
            return bool(raw)  # type: ignore[return-value]
        text = str(raw).strip().lower()
        if text in _TRUE_STRINGS:
            return True  # type: ignore[return-value]
        if text in _FALSE_STRINGS:
            return False  # type: ignore[return-value]
        raise ConfigValueError(f"not a boolean: {raw!r}")

    if isinstance(default, int):
        if isinstance(raw, bool):
            return int(raw)  # type: ignore[return-value]
        if isinstance(raw, int):
            return raw  # type: ignore[return-value]
        try:
            return int(str(raw).strip())  # type: ignore[return-value]
        except ValueError:
            raise ConfigValueError(f"not an integer: {raw!r}") from None

    if isinstance(default, str):
        return str(raw)  # type: ignore[return-value]

    return raw


class MappingConfigSource:
    """ConfigSource backed by an in-memory mapping."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: dict[str, Any] = dict(values or {})

    def get_option(self, key: str, default: T) -> T:
        if key not in self._values:
            return default
        raw = self._values[key]
        try:
            return coerce_value(raw, default)
        except ConfigValueError as e:
            logger.error(
                f"[mod-player-bot-reset] Unreadable value for {key}: {e}. "
                f"Using default value {default}."
            )
            return default

    def __contains__(self, key: str) -> bool:
        return key in self._values

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "MappingConfigSource":
        """
        Load a flat JSON object of key/value pairs.

        Args:
            path: Path to the JSON file

        Returns:
            MappingConfigSource over the file contents

        Raises:
            ValueError: If the file does not hold a JSON object
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")
        logger.info(f"Loaded {len(data)} config values from {path}")
        return cls(data)
