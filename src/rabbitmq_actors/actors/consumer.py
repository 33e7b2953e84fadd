"""
Base class of message consuming roles.

``Consumer.start`` blocks on the broker subscription and hands every
delivery to ``perform``. The consumer walks its states once:

    IDLE --start()--> SUBSCRIBED --subscription ends / perform fails--> CANCELLED

Leaving SUBSCRIBED always goes through ``cancel``, which runs the
``on_cancellation`` callback and closes the connection exactly once.
"""

import threading
from enum import Enum
from typing import Any, Callable, Optional

from amqpstorm import Message

from rabbitmq_actors.actors.agent import Agent
from rabbitmq_actors.config import PREFETCH_COUNT
from rabbitmq_actors.exceptions import ConsumerCancelledError, HandlerFailure
from rabbitmq_actors.rabbitmq.config import AgentOptions


class ConsumerState(Enum):
    IDLE = "idle"
    SUBSCRIBED = "subscribed"
    CANCELLED = "cancelled"


def _no_op() -> None:
    pass


class Consumer(Agent):
    """
    Listener of messages from a RabbitMQ queue.

    Subclass and override ``perform`` to process received messages::

        class Printer(Worker):
            def perform(self, delivery_info, properties, body):
                print(body)
                return "printed"

        Printer(queue_name="jobs", manual_ack=True).start()
    """

    consuming = True

    def __init__(self, queue_name: str = "", **opts):
        """
        :param queue_name: The queue to listen to. An empty name lets the broker pick one.
        :param opts: Agent options, plus:
            manual_ack (False): acknowledge each delivery once ``perform`` succeeded instead
                of letting the broker drop it as soon as it is delivered.
            on_cancellation: zero argument callable run once when the consumer is cancelled.
        """
        super().__init__(queue_name=queue_name, **opts)

    @property
    def manual_ack(self) -> bool:
        return self._manual_ack

    @property
    def on_cancellation(self) -> Callable[[], Any]:
        return self._on_cancellation

    @property
    def state(self) -> ConsumerState:
        return self._state

    @property
    def cancelled(self) -> bool:
        return self._state is ConsumerState.CANCELLED

    @property
    def perform_result(self) -> Any:
        """Result of the last successful ``perform`` call."""
        return self._perform_result

    def start(self) -> Any:
        """
        Listen to the queue, blocking until the subscription ends.

        Each delivery is passed to ``perform`` and acknowledged when manual
        acknowledgment is on. The consumer is cancelled when the subscription
        ends, whether the broker ended it, ``perform`` failed or the process
        was interrupted.

        :return: The result of the last ``perform`` call.
        :raises HandlerFailure: If ``perform`` raised. The consumer is already cancelled.
        :raises NotImplementedError: If ``perform`` was not overridden.
        :raises ConsumerCancelledError: If the consumer was already started.
        """
        with self._state_lock:
            if self._state is not ConsumerState.IDLE:
                raise ConsumerCancelledError(
                    f"{self} cannot be started from state {self._state.value}"
                )
            self._state = ConsumerState.SUBSCRIBED

        self.channel.basic.qos(prefetch_count=PREFETCH_COUNT)
        self.channel.basic.consume(
            callback=self._on_message,
            queue=self.queue_name,
            no_ack=not self._manual_ack,
        )
        self.logger.debug("%s subscribed to queue %s", self, self.queue_name)

        # returns once the broker cancelled the consumer or the channel closed
        try:
            self.channel.start_consuming()
        finally:
            self.cancel()
        return self._perform_result

    def cancel(self) -> None:
        """
        Run the cancellation callback and close the connection.

        Only the first call does anything.
        """
        with self._state_lock:
            if self._state is ConsumerState.CANCELLED:
                return
            self._state = ConsumerState.CANCELLED

        self.logger.debug("%s cancelled, closing connection", self)
        try:
            self._on_cancellation()
        finally:
            self.connection.close()

    def perform(self, delivery_info: dict, properties: dict, body: Any) -> Any:
        """
        Process one delivered message.

        :param delivery_info: Delivery method frame, holds ``delivery_tag``, ``routing_key``...
        :param properties: Message properties, holds ``message_id``, ``headers``, ``reply_to``...
        :param body: Message body.
        :raises NotImplementedError: Override this method in your subclass.
        """
        raise NotImplementedError(
            f"No work defined for this task: {body!r}. Define perform in your class"
        )

    def _pre_initialize(self, options: AgentOptions) -> None:
        super()._pre_initialize(options)
        self._manual_ack = bool(options.manual_ack)
        self._on_cancellation = options.on_cancellation or _no_op
        self._perform_result: Optional[Any] = None
        self._state = ConsumerState.IDLE
        self._state_lock = threading.Lock()

    def _post_initialize(self, options: AgentOptions) -> None:
        super()._post_initialize(options)
        if self._topology is not None:
            self._topology.bind_topology(self.channel, self.queue_name, self.exchange)

    def _on_message(self, message: Message) -> None:
        self.logger.info("%s received task: %s", self, message.body)
        try:
            self._perform_result = self.perform(
                delivery_info=message.method,
                properties=message.properties,
                body=message.body,
            )
            self._done(message)
        except NotImplementedError:
            self.logger.error("%s has no perform defined", self)
            self.cancel()
            raise
        except Exception as e:
            self.logger.error("Error when %s performing task: %s", self, e)
            self.cancel()
            raise HandlerFailure(message.delivery_tag, e) from e
        self.logger.info("%s performed task!", self)

    def _done(self, message: Message) -> None:
        if self._manual_ack:
            self.channel.basic.ack(delivery_tag=message.delivery_tag)
