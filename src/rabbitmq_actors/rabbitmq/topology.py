"""
Messaging topologies.

A topology knows which exchange a pattern talks to, which options it
requires and how a consumer queue gets bound. Agents hold one topology and
call it at fixed points of their construction:

    validate          -> before any broker resource is touched
    declare_topology  -> when the exchange is first needed
    bind_topology     -> after the consumer queue exists
"""

import abc
from enum import Enum
from typing import Any, Optional, Union

from amqpstorm import Channel

from rabbitmq_actors.exceptions import InvalidConfiguration, MissingOptionError
from rabbitmq_actors.rabbitmq.config import (
    X_MATCH,
    AgentOptions,
    ExchangeConfig,
    ExchangeKind,
    HeadersMatch,
    TopicWildcard,
)
from rabbitmq_actors.rabbitmq.util import bind_queue, ensure_exchange, normalize_binding_keys


class TopologyKind(Enum):
    MASTER_WORKERS = "master_workers"
    PUBLISH_SUBSCRIBE = "publish_subscribe"
    ROUTING = "routing"
    TOPICS = "topics"
    HEADERS = "headers"


class Topology(abc.ABC):
    """Exchange selection and binding rules of one messaging pattern."""

    kind: TopologyKind
    exchange_kind: ExchangeKind

    # option holding the exchange name, None for the default exchange
    name_option: Optional[str] = None

    # queue options forced by the pattern whatever the caller asked for
    queue_overrides: dict[str, Any] = {}

    def __init__(self, options: AgentOptions, agent: Optional[str] = None):
        self._options = options
        self._agent = agent

    @property
    def options(self) -> AgentOptions:
        return self._options

    def validate(self, consumer: bool = False) -> None:
        """
        Check the options this pattern needs.

        :param consumer: Whether the owning agent consumes, which may need binding options.
        :raises MissingOptionError: If a required option is missing.
        """
        if self.name_option is not None:
            self._options.require(self.name_option, agent=self._agent)

    def exchange_config(self) -> ExchangeConfig:
        name = getattr(self._options, self.name_option) if self.name_option else ""
        return ExchangeConfig(kind=self.exchange_kind, name=name)

    def declare_topology(self, channel: Channel) -> ExchangeConfig:
        return ensure_exchange(channel, self.exchange_config())

    def bind_topology(self, channel: Channel, queue_name: str, exchange: ExchangeConfig) -> None:
        """Bind a consumer queue to the exchange. Nothing to do by default."""

    def routing_key_for(self, queue_name: Optional[str], routing_key: Optional[str]) -> str:
        return routing_key or ""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.exchange_config()})"


class MasterWorkersTopology(Topology):
    """Work queue on the default exchange, routed by queue name and shared by workers."""

    kind = TopologyKind.MASTER_WORKERS
    exchange_kind = ExchangeKind.DEFAULT
    queue_overrides = {"exclusive": False}

    def validate(self, consumer: bool = False) -> None:
        if not self._options.queue_name:
            raise MissingOptionError("queue_name", agent=self._agent)

    def routing_key_for(self, queue_name: Optional[str], routing_key: Optional[str]) -> str:
        return queue_name


class PublishSubscribeTopology(Topology):
    """Fanout exchange, every bound queue receives every message."""

    kind = TopologyKind.PUBLISH_SUBSCRIBE
    exchange_kind = ExchangeKind.FANOUT
    name_option = "exchange_name"

    def bind_topology(self, channel: Channel, queue_name: str, exchange: ExchangeConfig) -> None:
        bind_queue(channel, queue_name, exchange)


class _BindingKeysTopology(Topology):
    default_binding_keys = TopicWildcard.ALL.value

    @property
    def binding_keys(self) -> list[str]:
        keys = self._options.binding_keys
        if keys is None:
            keys = self.default_binding_keys
        return normalize_binding_keys(keys)

    def validate(self, consumer: bool = False) -> None:
        super().validate(consumer)
        if consumer and not self.binding_keys:
            raise InvalidConfiguration("At least one binding key is required")

    def bind_topology(self, channel: Channel, queue_name: str, exchange: ExchangeConfig) -> None:
        for key in self.binding_keys:
            bind_queue(channel, queue_name, exchange, routing_key=key)


class RoutingTopology(_BindingKeysTopology):
    """Direct exchange, queues receive messages whose routing key equals a binding key."""

    kind = TopologyKind.ROUTING
    exchange_kind = ExchangeKind.DIRECT
    name_option = "exchange_name"


class TopicsTopology(_BindingKeysTopology):
    """
    Topic exchange, queues receive messages whose routing key matches a pattern.

    Words are separated by ``.``; ``*`` stands for exactly one word and
    ``#`` for zero or more words.
    """

    kind = TopologyKind.TOPICS
    exchange_kind = ExchangeKind.TOPIC
    name_option = "topic_name"


class HeadersTopology(Topology):
    """Headers exchange, queues receive messages whose headers match the binding predicate."""

    kind = TopologyKind.HEADERS
    exchange_kind = ExchangeKind.HEADERS
    name_option = "headers_name"

    @property
    def binding_headers(self) -> Optional[dict[str, Any]]:
        return self._options.binding_headers

    def validate(self, consumer: bool = False) -> None:
        super().validate(consumer)
        if not consumer:
            return
        headers = self._options.require("binding_headers", agent=self._agent)
        x_match = headers.get(X_MATCH)
        if x_match not in {m.value for m in HeadersMatch}:
            raise InvalidConfiguration(
                f"binding_headers must contain '{X_MATCH}' set to 'any' or 'all', got {x_match!r}"
            )

    def bind_topology(self, channel: Channel, queue_name: str, exchange: ExchangeConfig) -> None:
        bind_queue(channel, queue_name, exchange, arguments=self.binding_headers)


TOPOLOGIES: dict[TopologyKind, type[Topology]] = {
    topology.kind: topology
    for topology in (
        MasterWorkersTopology,
        PublishSubscribeTopology,
        RoutingTopology,
        TopicsTopology,
        HeadersTopology,
    )
}


def get_topology(
    kind: Union[TopologyKind, str], options: AgentOptions, agent: Optional[str] = None
) -> Topology:
    """
    Build the topology for a messaging pattern.

    :param kind: Pattern, as enum member or its value.
    :param options: Options of the agent owning the topology.
    :param agent: Agent name used in error messages.
    :raises InvalidConfiguration: If the pattern is unknown.
    """
    try:
        kind = TopologyKind(kind)
    except ValueError as e:
        raise InvalidConfiguration(f"Unknown topology: {kind!r}") from e
    return TOPOLOGIES[kind](options, agent=agent)
