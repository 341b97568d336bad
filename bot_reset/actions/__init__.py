"""Reset and skip actions."""

from bot_reset.actions.action_executor import (
    ActionExecutor,
    RESET_MESSAGE,
    SKIP_MESSAGE,
)

__all__ = [
    "ActionExecutor",
    "RESET_MESSAGE",
    "SKIP_MESSAGE",
]
