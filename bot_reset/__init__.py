"""
Player Bot Reset.

Decides when automated random bots in a persistent world should have
their level reset or skipped, and applies the change through the host.
"""

from bot_reset.config import MappingConfigSource, PolicyConfig, load_policy_config
from bot_reset.data_models import BotObservation, CharacterClass, Decision, DecisionType, Trigger
from bot_reset.host import HostServices
from bot_reset.module import PlayerBotResetModule

__all__ = [
    "MappingConfigSource",
    "PolicyConfig",
    "load_policy_config",
    "BotObservation",
    "CharacterClass",
    "Decision",
    "DecisionType",
    "Trigger",
    "HostServices",
    "PlayerBotResetModule",
]
