"""Topic bus connecting the navigation panel to the pages it drives."""

from . import topics
from .bus import Handler, RuntimeBus, get_global_bus
from .messages import MessageEnvelope

__all__ = ["Handler", "MessageEnvelope", "RuntimeBus", "get_global_bus", "topics"]
