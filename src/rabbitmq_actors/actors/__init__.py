from .agent import Agent
from .consumer import Consumer, ConsumerState
from .producer import Producer

__all__ = ["Agent", "Consumer", "ConsumerState", "Producer"]
