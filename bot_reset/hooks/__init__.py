"""Entry points driven by host events and the world tick."""

from bot_reset.hooks.event_dispatcher import EventDispatcher, MODULE_ACTIVE_MESSAGE, observe
from bot_reset.hooks.periodic_scanner import PeriodicScanner, ScanResult, ScanTimer

__all__ = [
    "EventDispatcher",
    "MODULE_ACTIVE_MESSAGE",
    "observe",
    "PeriodicScanner",
    "ScanResult",
    "ScanTimer",
]
