"""
Publish/subscribe pattern.

A publisher sends messages to a fanout exchange and every subscriber gets
its own exclusive queue bound to it, so every subscriber receives every message.
"""

from typing import Optional

from rabbitmq_actors.actors.consumer import Consumer
from rabbitmq_actors.actors.producer import Producer
from rabbitmq_actors.rabbitmq.topology import TopologyKind


class Publisher(Producer):
    topology_kind = TopologyKind.PUBLISH_SUBSCRIBE

    def __init__(self, exchange_name: Optional[str] = None, **opts):
        """
        :param exchange_name: Name of the fanout exchange to publish to. Required.
        """
        super().__init__(exchange_name=exchange_name, **opts)

    @property
    def exchange_name(self) -> str:
        return self._options.exchange_name


class Subscriber(Consumer):
    topology_kind = TopologyKind.PUBLISH_SUBSCRIBE

    def __init__(self, exchange_name: Optional[str] = None, **opts):
        """
        :param exchange_name: Name of the fanout exchange to listen to. Required.
        """
        super().__init__(exchange_name=exchange_name, **opts)

    @property
    def exchange_name(self) -> str:
        return self._options.exchange_name
