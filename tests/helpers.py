"""
Test helpers for the player bot reset test suite.

Provides in-memory stand-ins for the host collaborators:
- FakeCharacter / FakeSession for connected characters
- FakeIdentity, FakeMutator and FakeWorld for the host APIs
- FixedRng / SequenceRng for deterministic rolls
- HostBuilder for wiring a module around the fakes
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional

from bot_reset.config.policy_config import PolicyConfig
from bot_reset.data_models import CharacterClass
from bot_reset.host.interfaces import HostServices
from bot_reset.module import PlayerBotResetModule


# =============================================================================
# CHARACTERS
# =============================================================================


@dataclass
class FakeSession:
    """Captures system messages sent to a character."""
    messages: list[str] = field(default_factory=list)

    def send_system_message(self, text: str) -> None:
        self.messages.append(text)


@dataclass
class FakeCharacter:
    """A connected character with just enough state for the reset module."""
    name: str
    level: int
    class_id: int = CharacterClass.WARRIOR
    time_played_at_level: int = 0
    experience: int = 1000
    has_companion: bool = False
    in_world: bool = True
    is_bot: bool = True
    is_random_bot: bool = True
    has_bot_ai: bool = True
    session: Optional[FakeSession] = field(default_factory=FakeSession)

    @property
    def is_in_world(self) -> bool:
        return self.in_world

    @property
    def messages(self) -> list[str]:
        return self.session.messages if self.session else []


def make_bot(name: str = "Bot", level: int = 80, **kwargs: Any) -> FakeCharacter:
    """Create a random bot."""
    return FakeCharacter(name=name, level=level, **kwargs)


def make_human(name: str = "Player", level: int = 80, **kwargs: Any) -> FakeCharacter:
    """Create a human-controlled character."""
    return FakeCharacter(name=name, level=level, is_bot=False, is_random_bot=False, **kwargs)


# =============================================================================
# HOST APIS
# =============================================================================


class FakeIdentity:
    """Reads bot flags straight off FakeCharacter."""

    def is_bot(self, character: FakeCharacter) -> bool:
        return character.is_bot

    def is_random_bot(self, character: FakeCharacter) -> bool:
        return character.is_random_bot

    def get_bot_ai(self, character: FakeCharacter) -> Optional[str]:
        if not character.has_bot_ai:
            return None
        return f"ai:{character.name}"


class FakeMutator:
    """Applies mutations to FakeCharacter and records each call."""

    def __init__(self):
        self.calls: list[tuple[str, str, Any]] = []

    def factory_randomize(self, bot_ai: Any, character: FakeCharacter, level: int) -> None:
        character.level = level
        character.time_played_at_level = 0
        self.calls.append(("factory_randomize", character.name, level))

    def reset_experience(self, character: FakeCharacter) -> None:
        character.experience = 0
        self.calls.append(("reset_experience", character.name, None))

    def remove_companion(self, character: FakeCharacter) -> bool:
        had = character.has_companion
        character.has_companion = False
        self.calls.append(("remove_companion", character.name, had))
        return had

    def run_maintenance(self, bot_ai: Any) -> None:
        self.calls.append(("run_maintenance", bot_ai, None))

    def call_names(self) -> list[str]:
        return [c[0] for c in self.calls]


class FakeWorld:
    """Holds the connected character list (None entries allowed)."""

    def __init__(self, characters: Optional[Iterable[Optional[FakeCharacter]]] = None):
        self.characters: list[Optional[FakeCharacter]] = list(characters or [])

    def iter_characters(self) -> Iterable[Optional[FakeCharacter]]:
        return iter(list(self.characters))


# =============================================================================
# RANDOMNESS
# =============================================================================


class FixedRng:
    """Always returns the same roll and counts calls."""

    def __init__(self, value: int):
        self.value = value
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        return self.value


class SequenceRng:
    """Returns rolls from a list, in order."""

    def __init__(self, values: list[int]):
        self._values = list(values)
        self.calls = 0

    def __call__(self) -> int:
        value = self._values[self.calls]
        self.calls += 1
        return value


class ExplodingRng:
    """Fails the test if a roll is ever requested."""

    def __call__(self) -> int:
        raise AssertionError("random source must not be consulted")


# =============================================================================
# MODULE BUILDER
# =============================================================================


class HostBuilder:
    """
    Builder for a PlayerBotResetModule over in-memory fakes.

    Usage:
        module, host = (HostBuilder()
            .with_policy(max_level=80, reset_chance_percent=100)
            .with_characters(make_bot("Alpha", 80))
            .with_rng(FixedRng(0))
            .build())
    """

    def __init__(self):
        self._policy = PolicyConfig()
        self._characters: list[Optional[FakeCharacter]] = []
        self._rng: Any = FixedRng(0)

    def with_policy(self, **overrides: Any) -> "HostBuilder":
        self._policy = PolicyConfig(**overrides)
        return self

    def with_characters(self, *characters: Optional[FakeCharacter]) -> "HostBuilder":
        self._characters.extend(characters)
        return self

    def with_rng(self, rng: Any) -> "HostBuilder":
        self._rng = rng
        return self

    def build(self) -> tuple[PlayerBotResetModule, HostServices]:
        host = HostServices(
            identity=FakeIdentity(),
            mutator=FakeMutator(),
            world=FakeWorld(self._characters),
        )
        return PlayerBotResetModule(self._policy, host, rng=self._rng), host
