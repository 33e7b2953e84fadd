"""
Base class of every broker facing role.

An agent owns one channel, at most one queue and a logger. Construction
always runs the same four steps:

    1. ``_pre_initialize``  -> capture and validate options, no broker access
    2. queue declaration     -> only when ``queue_name`` was given
    3. logger installation
    4. ``_post_initialize`` -> bindings that need the queue and exchange
"""

import dataclasses
import logging
from typing import Optional

from amqpstorm import Channel, UriConnection

from rabbitmq_actors.exceptions import ResourceAlreadySetError
from rabbitmq_actors.logging_config import get_default_logger
from rabbitmq_actors.rabbitmq.config import AgentOptions, ExchangeConfig, QueueConfig
from rabbitmq_actors.rabbitmq.connection import ConnectionProvider
from rabbitmq_actors.rabbitmq.topology import TOPOLOGIES, Topology, TopologyKind
from rabbitmq_actors.rabbitmq.util import declare_queue
from rabbitmq_actors.util import get_rabbitmq_connection_provider

logger = logging.getLogger(__name__)


class Agent:
    """
    Basic client exchanging messages with a RabbitMQ server.

    Subclasses pick a messaging pattern through ``topology_kind`` and may
    extend ``_pre_initialize`` / ``_post_initialize``.
    """

    topology_kind: Optional[TopologyKind] = None

    # consuming agents validate and bind their queue to the exchange
    consuming: bool = False

    def __init__(self, connection_provider: Optional[ConnectionProvider] = None, **opts):
        """
        :param connection_provider: Provider of the broker connection, the process default if None.
        :param opts: Agent options, see ``AgentOptions``.
            queue_name: the queue to attach the agent to, if any.
            exclusive (True): whether only this agent's connection may use the queue.
            auto_delete (True): whether the queue is deleted when its last consumer leaves.
            logger: where to log agent activity, standard output if None.
        :raises InvalidConfiguration: If options are missing or inconsistent.
        """
        self._connection_provider = connection_provider
        self._connection: Optional[UriConnection] = None
        self._channel: Optional[Channel] = None
        self._queue: Optional[QueueConfig] = None
        self._exchange: Optional[ExchangeConfig] = None
        self._logger: Optional[logging.Logger] = None

        options = AgentOptions.from_kwargs(**opts)
        self._topology: Optional[Topology] = None
        if self.topology_kind is not None:
            topology_class = TOPOLOGIES[self.topology_kind]
            options = dataclasses.replace(options, **topology_class.queue_overrides)
            self._topology = topology_class(options, agent=self.__class__.__name__)
        self._options = options

        self._pre_initialize(options)
        if options.queue_name is not None:
            self._set_queue(
                options.queue_name,
                auto_delete=options.auto_delete,
                exclusive=options.exclusive,
            )
        self._set_logger(options.logger)
        self._post_initialize(options)

    def __str__(self) -> str:
        return f"{self.__class__.__name__}<{self.queue_name or '-'}>"

    @property
    def queue(self) -> Optional[QueueConfig]:
        """The queue this agent is attached to, None if it has none."""
        return self._queue

    @property
    def queue_name(self) -> Optional[str]:
        return self._queue.build_name() if self._queue is not None else None

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @property
    def options(self) -> AgentOptions:
        return self._options

    @property
    def connection(self) -> UriConnection:
        """The broker connection, taken from the provider on first access."""
        if self._connection is None:
            if self._connection_provider is None:
                self._connection_provider = get_rabbitmq_connection_provider()
            self._connection = self._connection_provider.get_connection()
        return self._connection

    @property
    def channel(self) -> Channel:
        """The channel owned by this agent, opened on first access."""
        if self._channel is None:
            self._channel = self.connection.channel()
            logger.debug("%s opened channel %s", self, self._channel)
        return self._channel

    @property
    def exchange(self) -> ExchangeConfig:
        """
        The exchange of this agent's pattern, declared on first access.

        :raises NotImplementedError: If the agent has no messaging pattern.
        """
        if self._exchange is None:
            if self._topology is None:
                raise NotImplementedError(
                    f"{self.__class__.__name__} has no exchange. Set topology_kind in a subclass"
                )
            self._exchange = self._topology.declare_topology(self.channel)
        return self._exchange

    def _pre_initialize(self, options: AgentOptions) -> None:
        """Run before any broker resource is touched."""
        if self._topology is not None:
            self._topology.validate(consumer=self.consuming)

    def _post_initialize(self, options: AgentOptions) -> None:
        """Run once the queue, if any, is declared."""

    def _set_queue(self, name: str, auto_delete: bool = True, exclusive: bool = True) -> QueueConfig:
        """
        Declare the durable queue of this agent.

        :raises ResourceAlreadySetError: If the queue was already set.
        """
        if self._queue is not None:
            raise ResourceAlreadySetError("queue")
        self._queue = declare_queue(
            self.channel,
            QueueConfig(name=name, durable=True, exclusive=exclusive, auto_delete=auto_delete),
        )
        return self._queue

    def _set_logger(self, agent_logger: Optional[logging.Logger]) -> logging.Logger:
        self._logger = agent_logger or get_default_logger(self.__class__.__name__)
        return self._logger
