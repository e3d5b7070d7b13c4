"""Bot strategies for Vändtia."""

from .policy import ScriptedBot
from .random_bot import RandomBot

__all__ = ["ScriptedBot", "RandomBot"]
