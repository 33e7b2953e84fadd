"""
Routing pattern.

A routing producer sends messages with a routing key to a direct exchange.
A routing consumer receives the messages whose routing key equals one of its
binding keys.
"""

from typing import Any, Optional, Union

from rabbitmq_actors.actors.consumer import Consumer
from rabbitmq_actors.actors.producer import Producer
from rabbitmq_actors.rabbitmq.topology import TopologyKind


class RoutingProducer(Producer):
    topology_kind = TopologyKind.ROUTING

    def __init__(self, exchange_name: Optional[str] = None, **opts):
        super().__init__(exchange_name=exchange_name, **opts)

    @property
    def exchange_name(self) -> str:
        return self._options.exchange_name

    def publish(self, body: Any, message_id: str, routing_key: str, **options) -> "RoutingProducer":
        """
        :param routing_key: Consumers bound with this exact key receive the message.
        """
        return super().publish(body, message_id, routing_key=routing_key, **options)


class RoutingConsumer(Consumer):
    topology_kind = TopologyKind.ROUTING

    def __init__(
        self,
        exchange_name: Optional[str] = None,
        binding_keys: Union[str, list[str]] = "#",
        **opts,
    ):
        """
        :param exchange_name: Name of the direct exchange to listen to. Required.
        :param binding_keys: Routing key or keys to receive messages for.
        """
        super().__init__(exchange_name=exchange_name, binding_keys=binding_keys, **opts)

    @property
    def exchange_name(self) -> str:
        return self._options.exchange_name

    @property
    def binding_keys(self) -> list[str]:
        return self._topology.binding_keys
