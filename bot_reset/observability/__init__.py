"""
Observability for the player bot reset module.

Records every decision, applied action, scan and configuration correction.
"""

from bot_reset.observability.run_log import (
    DEFAULT_MAX_EVENTS,
    RunLog,
    LogEvent,
    EventType,
    DecisionEvent,
    ActionEvent,
    ScanEvent,
    ConfigEvent,
    get_run_log,
    reset_run_log,
)

__all__ = [
    "DEFAULT_MAX_EVENTS",
    "RunLog",
    "LogEvent",
    "EventType",
    "DecisionEvent",
    "ActionEvent",
    "ScanEvent",
    "ConfigEvent",
    "get_run_log",
    "reset_run_log",
]
