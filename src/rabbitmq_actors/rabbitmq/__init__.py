"""
RabbitMQ building blocks shared by every agent.

    - ConnectionProvider: lazily opened broker connection
    - ExchangeConfig, QueueConfig, AgentOptions: configuration dataclasses
    - Topology and its five patterns: exchange selection and queue binding
"""

from .config import (
    AgentOptions,
    ExchangeConfig,
    ExchangeKind,
    HeadersMatch,
    QueueConfig,
    TopicWildcard,
)
from .connection import ConnectionProvider
from .topology import Topology, TopologyKind, get_topology

__all__ = [
    "AgentOptions",
    "ExchangeConfig",
    "ExchangeKind",
    "HeadersMatch",
    "QueueConfig",
    "TopicWildcard",
    "ConnectionProvider",
    "Topology",
    "TopologyKind",
    "get_topology",
]
