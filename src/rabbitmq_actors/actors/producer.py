import logging
from typing import Any, Callable, Optional

from amqpstorm import AMQPMessageError

from rabbitmq_actors.actors.agent import Agent
from rabbitmq_actors.exceptions import ResourceAlreadySetError
from rabbitmq_actors.models import PublishOptions, encode_body
from rabbitmq_actors.rabbitmq.config import AgentOptions, QueueConfig
from rabbitmq_actors.rabbitmq.util import declare_queue, publish_message

logger = logging.getLogger(__name__)


class Producer(Agent):
    """
    Sender of messages to a RabbitMQ exchange.

    Concrete producers pick the exchange through ``topology_kind``. A
    ``reply_queue_name`` option declares a queue consumers should reply to;
    its name is sent as ``reply_to`` with every message.

    Messages the broker returns, unroutable ones published with
    ``mandatory=True``, are handed to the ``on_return`` option as the
    ``AMQPMessageError`` amqpstorm raised. Without ``on_return`` that error
    propagates out of ``publish``.
    """

    @property
    def reply_queue(self) -> Optional[QueueConfig]:
        return self._reply_queue

    @property
    def on_return(self) -> Optional[Callable[[AMQPMessageError], Any]]:
        return self._on_return

    def publish(self, body: Any, message_id: str, **options) -> "Producer":
        """
        Send a message.

        :param body: Message body. Anything but str and bytes is sent as JSON.
        :param message_id: Caller defined id, replies refer to it through ``correlation_id``.
        :param options: See ``PublishOptions``: persistent (True), routing_key, mandatory,
            headers, reply_to, content_type, content_encoding, priority, correlation_id,
            expiration, timestamp, type, user_id, app_id.
        :return: This producer, for chaining.
        :raises InvalidConfiguration: If an option is unknown or has a bad value.
        :raises NotImplementedError: If the producer has no exchange.
        :raises AMQPMessageError: If the broker returned a message and no ``on_return`` is set.
        """
        exchange = self.exchange

        options = {"persistent": True, **options, "message_id": message_id}
        routing_key = self._topology.routing_key_for(self.queue_name, options.get("routing_key"))
        if routing_key:
            options["routing_key"] = routing_key
        if self._reply_queue is not None:
            options.setdefault("reply_to", self._reply_queue.build_name())

        payload, content_type = encode_body(body)
        if content_type is not None:
            options.setdefault("content_type", content_type)
        publish_options = PublishOptions.build(**options)

        self.logger.info(
            "Just Before %s publishes message: %s with options: %s", self, body, options
        )
        publish_message(
            self.channel,
            exchange,
            payload,
            routing_key=publish_options.routing_key,
            properties=publish_options.to_properties(),
            mandatory=publish_options.mandatory,
        )
        self._check_returned()
        self.logger.info(
            "Just After %s publishes message: %s with options: %s", self, body, options
        )
        return self

    def close(self) -> None:
        """Close the channel of this producer."""
        self.logger.info("Just Before %s closes RabbitMQ channel!", self)
        self.channel.close()
        self.logger.info("Just After %s closes RabbitMQ channel!", self)

    and_close = close

    def _pre_initialize(self, options: AgentOptions) -> None:
        super()._pre_initialize(options)
        self._reply_queue: Optional[QueueConfig] = None
        self._on_return = options.on_return

    def _post_initialize(self, options: AgentOptions) -> None:
        super()._post_initialize(options)
        if options.reply_queue_name:
            self._set_reply_queue(options.reply_queue_name)

    def _set_reply_queue(self, name: str) -> QueueConfig:
        """
        Declare the queue consumers should reply to.

        :raises ResourceAlreadySetError: If the reply queue was already set.
        """
        if self._reply_queue is not None:
            raise ResourceAlreadySetError("reply queue")
        self._reply_queue = declare_queue(
            self.channel,
            QueueConfig(name=name, durable=True, exclusive=False, auto_delete=True),
        )
        logger.debug("%s replies expected on %s", self, self._reply_queue.build_name())
        return self._reply_queue

    def _check_returned(self) -> None:
        try:
            self.channel.check_for_errors()
        except AMQPMessageError as e:
            if self._on_return is None:
                raise
            self.logger.error("%s message returned by RabbitMQ: %s", self, e)
            self._on_return(e)
