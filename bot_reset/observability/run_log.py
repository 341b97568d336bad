"""
Run Log system for reset module event tracking.

Captures every decision, applied action, periodic scan and configuration
correction so a server operator can see why a bot was (or was not) reset.
"""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Callable
import json
import logging

logger = logging.getLogger(__name__)


# Events kept in memory; the oldest are dropped once the cap is reached.
DEFAULT_MAX_EVENTS = 5000


class EventType(str, Enum):
    """Types of events that can be logged."""

    DECISION = "decision"  # Decision engine evaluated a bot
    ACTION = "action"  # Reset or skip applied to a bot
    SCAN = "scan"  # Periodic scan completed
    CONFIG = "config"  # Configuration value corrected at load
    CUSTOM = "custom"  # Custom event


@dataclass
class LogEvent:
    """Base class for all logged events."""

    # event_type has a default so subclass fields can have defaults too;
    # subclasses set the correct value in __post_init__
    event_type: EventType = EventType.CUSTOM
    timestamp: datetime = field(default_factory=datetime.now)
    sequence_number: int = 0
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "event_type": self.event_type.value,
            "timestamp": self.timestamp.isoformat(),
            "sequence_number": self.sequence_number,
            "context": self.context,
        }

    @classmethod
    def _base_kwargs(cls, data: dict[str, Any]) -> dict[str, Any]:
        return {
            "timestamp": datetime.fromisoformat(data["timestamp"]),
            "sequence_number": data.get("sequence_number", 0),
            "context": data.get("context", {}),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LogEvent":
        """Create from dictionary."""
        return cls(event_type=EventType(data["event_type"]), **cls._base_kwargs(data))


@dataclass
class DecisionEvent(LogEvent):
    """The decision engine evaluated one bot."""

    character_name: str = ""
    level: int = 0
    trigger: str = ""
    decision: str = ""  # DecisionType value
    target_level: Optional[int] = None
    reason: str = ""

    def __post_init__(self):
        self.event_type = EventType.DECISION

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "character_name": self.character_name,
                "level": self.level,
                "trigger": self.trigger,
                "decision": self.decision,
                "target_level": self.target_level,
                "reason": self.reason,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DecisionEvent":
        return cls(
            **cls._base_kwargs(data),
            character_name=data.get("character_name", ""),
            level=data.get("level", 0),
            trigger=data.get("trigger", ""),
            decision=data.get("decision", ""),
            target_level=data.get("target_level"),
            reason=data.get("reason", ""),
        )

    def __str__(self) -> str:
        target = f" -> {self.target_level}" if self.target_level is not None else ""
        return (
            f"[{self.sequence_number}] DECISION {self.character_name} L{self.level} "
            f"({self.trigger}): {self.decision}{target} ({self.reason})"
        )


@dataclass
class ActionEvent(LogEvent):
    """A reset or skip was applied (or attempted) on a bot."""

    character_name: str = ""
    action: str = ""  # DecisionType value
    old_level: int = 0
    new_level: int = 0
    success: bool = True
    detail: str = ""

    def __post_init__(self):
        self.event_type = EventType.ACTION

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "character_name": self.character_name,
                "action": self.action,
                "old_level": self.old_level,
                "new_level": self.new_level,
                "success": self.success,
                "detail": self.detail,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActionEvent":
        return cls(
            **cls._base_kwargs(data),
            character_name=data.get("character_name", ""),
            action=data.get("action", ""),
            old_level=data.get("old_level", 0),
            new_level=data.get("new_level", 0),
            success=data.get("success", True),
            detail=data.get("detail", ""),
        )

    def __str__(self) -> str:
        status = "OK" if self.success else "FAILED"
        return (
            f"[{self.sequence_number}] ACTION {self.action} {self.character_name} "
            f"{self.old_level} -> {self.new_level} [{status}] {self.detail}".rstrip()
        )


@dataclass
class ScanEvent(LogEvent):
    """A periodic scan finished."""

    characters_seen: int = 0
    characters_evaluated: int = 0
    actions_applied: int = 0

    def __post_init__(self):
        self.event_type = EventType.SCAN

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "characters_seen": self.characters_seen,
                "characters_evaluated": self.characters_evaluated,
                "actions_applied": self.actions_applied,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ScanEvent":
        return cls(
            **cls._base_kwargs(data),
            characters_seen=data.get("characters_seen", 0),
            characters_evaluated=data.get("characters_evaluated", 0),
            actions_applied=data.get("actions_applied", 0),
        )

    def __str__(self) -> str:
        return (
            f"[{self.sequence_number}] SCAN seen={self.characters_seen} "
            f"evaluated={self.characters_evaluated} applied={self.actions_applied}"
        )


@dataclass
class ConfigEvent(LogEvent):
    """A configuration value was corrected while loading."""

    key: str = ""
    raw_value: Any = None
    applied_value: Any = None
    message: str = ""

    def __post_init__(self):
        self.event_type = EventType.CONFIG

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base.update(
            {
                "key": self.key,
                "raw_value": self.raw_value,
                "applied_value": self.applied_value,
                "message": self.message,
            }
        )
        return base

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ConfigEvent":
        return cls(
            **cls._base_kwargs(data),
            key=data.get("key", ""),
            raw_value=data.get("raw_value"),
            applied_value=data.get("applied_value"),
            message=data.get("message", ""),
        )

    def __str__(self) -> str:
        return f"[{self.sequence_number}] CONFIG {self.key}: {self.raw_value!r} -> {self.applied_value!r}"


_EVENT_CLASSES: dict[EventType, type[LogEvent]] = {
    EventType.DECISION: DecisionEvent,
    EventType.ACTION: ActionEvent,
    EventType.SCAN: ScanEvent,
    EventType.CONFIG: ConfigEvent,
}


class RunLog:
    """
    Central run log for all reset module events.

    Singleton pattern - use get_run_log() to access.

    The server keeps this log for its whole uptime, so only the most
    recent max_events are held. Sequence numbers keep counting across
    dropped events.
    """

    _instance: Optional["RunLog"] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._max_events: int = DEFAULT_MAX_EVENTS
        self._events: deque[LogEvent] = deque(maxlen=self._max_events)
        self._sequence: int = 0
        self._session_start: datetime = datetime.now()
        self._subscribers: list[Callable[[LogEvent], None]] = []
        self._paused: bool = False

    def reset(self) -> None:
        """Reset the log for a new session."""
        self._events = deque(maxlen=self._max_events)
        self._sequence = 0
        self._session_start = datetime.now()
        logger.debug("RunLog reset")

    @property
    def max_events(self) -> int:
        return self._max_events

    def set_max_events(self, max_events: int) -> None:
        """
        Change how many events are kept, dropping the oldest if needed.

        Args:
            max_events: New cap, at least 1
        """
        if max_events < 1:
            raise ValueError(f"max_events must be at least 1: {max_events}")
        self._max_events = max_events
        self._events = deque(self._events, maxlen=max_events)

    def pause(self) -> None:
        """Pause logging."""
        self._paused = True

    def resume(self) -> None:
        """Resume logging."""
        self._paused = False

    def is_paused(self) -> bool:
        """Check if logging is paused."""
        return self._paused

    def subscribe(self, callback: Callable[[LogEvent], None]) -> None:
        """Subscribe to receive events as they are logged."""
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[LogEvent], None]) -> None:
        """Unsubscribe from events."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def _log_event(self, event: LogEvent) -> None:
        if self._paused:
            return

        self._sequence += 1
        event.sequence_number = self._sequence
        self._events.append(event)

        # Subscribers must never break the caller's flow
        for subscriber in self._subscribers:
            try:
                subscriber(event)
            except Exception as e:
                logger.warning(f"Subscriber error: {e}")

    def log_decision(
        self,
        character_name: str,
        level: int,
        trigger: str,
        decision: str,
        target_level: Optional[int] = None,
        reason: str = "",
        context: Optional[dict[str, Any]] = None,
    ) -> DecisionEvent:
        """Log a decision engine evaluation."""
        event = DecisionEvent(
            character_name=character_name,
            level=level,
            trigger=trigger,
            decision=decision,
            target_level=target_level,
            reason=reason,
            context=context or {},
        )
        self._log_event(event)
        return event

    def log_action(
        self,
        character_name: str,
        action: str,
        old_level: int,
        new_level: int,
        success: bool = True,
        detail: str = "",
        context: Optional[dict[str, Any]] = None,
    ) -> ActionEvent:
        """Log an applied (or failed) reset/skip."""
        event = ActionEvent(
            character_name=character_name,
            action=action,
            old_level=old_level,
            new_level=new_level,
            success=success,
            detail=detail,
            context=context or {},
        )
        self._log_event(event)
        return event

    def log_scan(
        self,
        characters_seen: int,
        characters_evaluated: int,
        actions_applied: int,
        context: Optional[dict[str, Any]] = None,
    ) -> ScanEvent:
        """Log a completed periodic scan."""
        event = ScanEvent(
            characters_seen=characters_seen,
            characters_evaluated=characters_evaluated,
            actions_applied=actions_applied,
            context=context or {},
        )
        self._log_event(event)
        return event

    def log_config(
        self,
        key: str,
        raw_value: Any,
        applied_value: Any,
        message: str = "",
    ) -> ConfigEvent:
        """Log a configuration correction."""
        event = ConfigEvent(
            key=key,
            raw_value=raw_value,
            applied_value=applied_value,
            message=message,
        )
        self._log_event(event)
        return event

    def log_custom(
        self,
        event_name: str,
        details: dict[str, Any],
    ) -> LogEvent:
        """Log a custom event."""
        event = LogEvent(
            event_type=EventType.CUSTOM,
            context={"event_name": event_name, **details},
        )
        self._log_event(event)
        return event

    def get_events(
        self,
        event_type: Optional[EventType] = None,
        since_sequence: int = 0,
    ) -> list[LogEvent]:
        """
        Get logged events.

        Args:
            event_type: Filter by event type (None = all)
            since_sequence: Only events after this sequence number

        Returns:
            List of events
        """
        events = [e for e in self._events if e.sequence_number > since_sequence]
        if event_type:
            events = [e for e in events if e.event_type == event_type]
        return events

    def get_decisions(self) -> list[DecisionEvent]:
        """Get all decision events."""
        return [e for e in self._events if isinstance(e, DecisionEvent)]

    def get_actions(self) -> list[ActionEvent]:
        """Get all action events."""
        return [e for e in self._events if isinstance(e, ActionEvent)]

    def get_scans(self) -> list[ScanEvent]:
        """Get all scan events."""
        return [e for e in self._events if isinstance(e, ScanEvent)]

    def get_event_count(self) -> int:
        """Get total number of logged events."""
        return len(self._events)

    def get_summary(self) -> dict[str, Any]:
        """Get a summary of the run log."""
        return {
            "session_start": self._session_start.isoformat(),
            "total_events": len(self._events),
            "decisions": len(self.get_decisions()),
            "actions": len(self.get_actions()),
            "scans": len(self.get_scans()),
            "last_sequence": self._sequence,
        }

    def to_dict(self) -> dict[str, Any]:
        """Serialize the entire log to a dictionary."""
        return {
            "session_start": self._session_start.isoformat(),
            "sequence": self._sequence,
            "events": [e.to_dict() for e in self._events],
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize the log to JSON."""
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def save(self, filepath: str) -> None:
        """Save the log to a file."""
        with open(filepath, "w", encoding="utf-8") as f:
            f.write(self.to_json())
        logger.info(f"RunLog saved to {filepath}")

    @classmethod
    def load(cls, filepath: str) -> "RunLog":
        """Load a log from a file, replacing the current contents."""
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)

        log = get_run_log()
        log.reset()
        log._session_start = datetime.fromisoformat(data["session_start"])
        log._sequence = data.get("sequence", 0)

        for event_data in data.get("events", []):
            event_type = EventType(event_data["event_type"])
            event_cls = _EVENT_CLASSES.get(event_type, LogEvent)
            log._events.append(event_cls.from_dict(event_data))

        logger.info(f"RunLog loaded from {filepath}: {len(log._events)} events")
        return log

    def format_log(
        self,
        event_types: Optional[list[EventType]] = None,
        max_events: Optional[int] = None,
    ) -> str:
        """
        Format the log as a human-readable string.

        Args:
            event_types: Filter by event types (None = all)
            max_events: Maximum number of events to include

        Returns:
            Formatted log string
        """
        lines = [
            "=== Run Log ===",
            f"Session: {self._session_start.isoformat()}",
            f"Total Events: {len(self._events)}",
            "",
        ]

        events = list(self._events)
        if event_types:
            events = [e for e in events if e.event_type in event_types]
        if max_events:
            events = events[-max_events:]

        for event in events:
            lines.append(str(event))

        return "\n".join(lines)


# Singleton access
_run_log: Optional[RunLog] = None


def get_run_log() -> RunLog:
    """Get the global RunLog instance."""
    global _run_log
    if _run_log is None:
        _run_log = RunLog()
    return _run_log


def reset_run_log() -> RunLog:
    """Reset and return the global RunLog instance."""
    log = get_run_log()
    log.reset()
    return log
