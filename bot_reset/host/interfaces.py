"""
Contracts for the host collaborators the reset module calls into.

The host world server owns characters, sessions and the bot automation
layer. This module only describes the narrow surface the reset module
needs from each of them; any object with matching methods satisfies it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Protocol, runtime_checkable


@runtime_checkable
class HostSession(Protocol):
    """The network session a character is attached to."""

    def send_system_message(self, text: str) -> None: ...


@runtime_checkable
class HostCharacter(Protocol):
    """A connected character as exposed by the host."""

    name: str
    level: int
    class_id: int
    # Seconds played since the last level change, maintained by the host.
    time_played_at_level: int

    @property
    def session(self) -> Optional[HostSession]: ...

    @property
    def is_in_world(self) -> bool: ...


class BotIdentity(Protocol):
    """Oracle deciding whether a character is automated."""

    def is_bot(self, character: HostCharacter) -> bool: ...

    def is_random_bot(self, character: HostCharacter) -> bool: ...

    def get_bot_ai(self, character: HostCharacter) -> Optional[Any]:
        """Return the automation handle for a bot, or None if unavailable."""
        ...


class CharacterMutator(Protocol):
    """Character mutation API."""

    def factory_randomize(self, bot_ai: Any, character: HostCharacter, level: int) -> None:
        """Set the level and re-gear / re-stat the character for it."""
        ...

    def reset_experience(self, character: HostCharacter) -> None: ...

    def remove_companion(self, character: HostCharacter) -> bool:
        """Dismiss and delete the active companion. Returns True if one existed."""
        ...

    def run_maintenance(self, bot_ai: Any) -> None:
        """Run the bot's level-up maintenance pass."""
        ...


class NotificationChannel(Protocol):
    """Delivers short text lines to a character's session."""

    def send(self, character: HostCharacter, text: str) -> bool: ...


class WorldEnumerator(Protocol):
    """Enumerates connected characters. Entries may be None for sessions without a character."""

    def iter_characters(self) -> Iterable[Optional[HostCharacter]]: ...


class SessionNotificationChannel:
    """NotificationChannel that writes straight to the character's session."""

    def send(self, character: HostCharacter, text: str) -> bool:
        session = character.session
        if session is None:
            return False
        session.send_system_message(text)
        return True


@dataclass
class HostServices:
    """Bundle of host collaborators handed to the module at startup."""
    identity: BotIdentity
    mutator: CharacterMutator
    world: WorldEnumerator
    notifier: NotificationChannel = None  # type: ignore[assignment]

    def __post_init__(self):
        if self.notifier is None:
            self.notifier = SessionNotificationChannel()
