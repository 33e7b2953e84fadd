"""
Topics pattern.

A topic producer sends messages to a topic exchange with a routing key made
of words separated by dots, e.g. ``europe.tennis.clay.spain``. A topic
consumer binds its queue once per pattern, where ``*`` matches exactly one
word and ``#`` zero or more words, and receives a message when any of its
patterns match.

    TopicConsumer(topic_name="scores", binding_keys=["*.tennis.#", "#.spain.#"])
"""

from typing import Any, Optional, Union

from rabbitmq_actors.actors.consumer import Consumer
from rabbitmq_actors.actors.producer import Producer
from rabbitmq_actors.rabbitmq.topology import TopologyKind


class TopicProducer(Producer):
    topology_kind = TopologyKind.TOPICS

    def __init__(self, topic_name: Optional[str] = None, **opts):
        super().__init__(topic_name=topic_name, **opts)

    @property
    def topic_name(self) -> str:
        return self._options.topic_name

    def publish(self, body: Any, message_id: str, routing_key: str, **options) -> "TopicProducer":
        return super().publish(body, message_id, routing_key=routing_key, **options)


class TopicConsumer(Consumer):
    topology_kind = TopologyKind.TOPICS

    def __init__(
        self,
        topic_name: Optional[str] = None,
        binding_keys: Union[str, list[str]] = "#",
        **opts,
    ):
        super().__init__(topic_name=topic_name, binding_keys=binding_keys, **opts)

    @property
    def topic_name(self) -> str:
        return self._options.topic_name

    @property
    def binding_keys(self) -> list[str]:
        return self._topology.binding_keys
