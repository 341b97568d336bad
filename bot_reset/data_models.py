"""
Shared data structures for the player bot reset module.

These structures are built fresh for every evaluation and are never
persisted. The host owns the real character; the engine only ever sees
a BotObservation snapshot of it.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Optional
import random

if TYPE_CHECKING:
    from bot_reset.host.interfaces import BotIdentity, HostCharacter


# =============================================================================
# CONSTANTS
# =============================================================================


# Highest level a character can reach in the world.
MAX_PLAYER_LEVEL = 80

# Death Knights start at this level and may never be pushed below it.
DEATH_KNIGHT_START_LEVEL = 55

# Most recent rolls kept by DiceRoller; older ones are dropped.
ROLL_LOG_LIMIT = 1000


# =============================================================================
# ENUMS
# =============================================================================


class CharacterClass(int, Enum):
    """Playable classes, keyed by the host's class id."""
    WARRIOR = 1
    PALADIN = 2
    HUNTER = 3
    ROGUE = 4
    PRIEST = 5
    DEATH_KNIGHT = 6
    SHAMAN = 7
    MAGE = 8
    WARLOCK = 9
    DRUID = 11


class Trigger(str, Enum):
    """What caused the decision engine to run."""
    LEVEL_CHANGED = "level_changed"
    LOGIN = "login"
    PERIODIC_SCAN = "periodic_scan"


class DecisionType(str, Enum):
    """Outcome of a single decision."""
    NO_ACTION = "no_action"
    RESET = "reset"
    SKIP = "skip"


# =============================================================================
# OBSERVATION
# =============================================================================


@dataclass(frozen=True)
class BotObservation:
    """Snapshot of a character as seen by the decision engine."""
    level: int
    class_id: Optional[CharacterClass]   # None only for unrecognised non-bots
    time_played_at_level: int = 0   # seconds at the current level
    is_bot: bool = True
    is_random_bot: bool = True
    name: str = ""

    @property
    def is_death_knight(self) -> bool:
        return self.class_id == CharacterClass.DEATH_KNIGHT

    @classmethod
    def from_character(
        cls,
        character: "HostCharacter",
        identity: "BotIdentity",
    ) -> "BotObservation":
        """
        Build an observation from a live host character.

        Args:
            character: The host character
            identity: Oracle answering bot / random-bot questions

        Returns:
            A frozen snapshot for one evaluation

        Raises:
            ValueError: If a random bot has a class id outside CharacterClass
        """
        is_bot = identity.is_bot(character)
        is_random_bot = is_bot and identity.is_random_bot(character)
        class_id: Optional[CharacterClass] = None
        try:
            class_id = CharacterClass(character.class_id)
        except ValueError:
            # Only random bots are ever judged by class
            if is_random_bot:
                raise
        return cls(
            level=character.level,
            class_id=class_id,
            time_played_at_level=character.time_played_at_level,
            is_bot=is_bot,
            is_random_bot=is_random_bot,
            name=character.name,
        )


# =============================================================================
# DECISION
# =============================================================================


@dataclass(frozen=True)
class Decision:
    """
    Output of the decision engine.

    target_level is None only for NO_ACTION. The reason is informational
    and does not take part in equality.
    """
    kind: DecisionType
    target_level: Optional[int] = None
    reason: str = field(default="", compare=False)

    @classmethod
    def no_action(cls, reason: str = "") -> "Decision":
        return cls(DecisionType.NO_ACTION, None, reason)

    @classmethod
    def reset(cls, target_level: int, reason: str = "") -> "Decision":
        return cls(DecisionType.RESET, target_level, reason)

    @classmethod
    def skip(cls, target_level: int, reason: str = "") -> "Decision":
        return cls(DecisionType.SKIP, target_level, reason)

    @property
    def is_action(self) -> bool:
        return self.kind != DecisionType.NO_ACTION

    def __str__(self) -> str:
        if self.kind == DecisionType.NO_ACTION:
            return "NoAction"
        return f"{self.kind.value.capitalize()}({self.target_level})"


# =============================================================================
# DICE
# =============================================================================


class DiceRoller:
    """
    Centralized randomization interface.
    All rolls must go through this class for reproducibility and logging.
    """

    _instance = None
    _seed: Optional[int] = None
    _roll_log: deque = deque(maxlen=ROLL_LOG_LIMIT)

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    def set_seed(cls, seed: int) -> None:
        """Set random seed for reproducibility."""
        cls._seed = seed
        random.seed(seed)

    @classmethod
    def randint(cls, a: int, b: int, reason: str = "") -> int:
        """
        Return a random integer in [a, b], inclusive, and log it.

        Args:
            a: Minimum value
            b: Maximum value
            reason: Why this roll is being made (for logging)
        """
        value = random.randint(a, b)
        cls._roll_log.append(
            DiceResult(notation=f"range({a}-{b})", rolls=[value], total=value, reason=reason)
        )
        return value

    @classmethod
    def get_roll_log(cls) -> list:
        """Get the most recent rolls, oldest first."""
        return list(cls._roll_log)

    @classmethod
    def clear_roll_log(cls) -> None:
        """Clear the roll log."""
        cls._roll_log = deque(maxlen=ROLL_LOG_LIMIT)


@dataclass
class DiceResult:
    """Result of a roll with full information."""
    notation: str
    rolls: list[int]
    total: int
    reason: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"{self.notation}: {self.rolls} = {self.total}"


class PercentileRng:
    """
    Adapter that turns DiceRoller into the uniform [0, 100) source the
    decision engine takes.

    Usage:
        rng = PercentileRng(reason_prefix="ResetRoll")
        engine = ResetDecisionEngine(policy, rng=rng)
    """

    def __init__(
        self,
        reason_prefix: str = "ResetChance",
        dice_roller: Optional[DiceRoller] = None,
    ):
        self._reason_prefix = reason_prefix
        self._dice_roller = dice_roller
        self._roll_count = 0

    def _get_dice_roller(self) -> DiceRoller:
        if self._dice_roller is not None:
            return self._dice_roller
        return DiceRoller()

    def __call__(self) -> int:
        self._roll_count += 1
        reason = f"{self._reason_prefix}: d100 (roll #{self._roll_count})"
        return self._get_dice_roller().randint(0, 99, reason)

    @property
    def roll_count(self) -> int:
        """Get the number of rolls made through this adapter."""
        return self._roll_count

    def reset_count(self) -> None:
        """Reset the roll counter."""
        self._roll_count = 0
