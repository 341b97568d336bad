"""Host collaborator contracts."""

from bot_reset.host.interfaces import (
    HostSession,
    HostCharacter,
    BotIdentity,
    CharacterMutator,
    NotificationChannel,
    WorldEnumerator,
    SessionNotificationChannel,
    HostServices,
)

__all__ = [
    "HostSession",
    "HostCharacter",
    "BotIdentity",
    "CharacterMutator",
    "NotificationChannel",
    "WorldEnumerator",
    "SessionNotificationChannel",
    "HostServices",
]
