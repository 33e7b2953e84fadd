import logging
from typing import Any, Optional, Union

from amqpstorm import Channel

from rabbitmq_actors.rabbitmq.config import ExchangeConfig, QueueConfig

logger = logging.getLogger(__name__)


def normalize_binding_keys(binding_keys: Union[str, list[str], tuple, None]) -> list[str]:
    """
    Normalize binding keys to a list.

    :param binding_keys: A single key, a sequence of keys or None.
    :return: A new list of keys, empty for None.
    """
    if binding_keys is None:
        return []
    if isinstance(binding_keys, str):
        return [binding_keys]
    return list(binding_keys)


def ensure_exchange(channel: Channel, exchange: ExchangeConfig) -> ExchangeConfig:
    """
    Declare an exchange unless it is the broker's default exchange.

    :param channel: The AMQP channel to use for declaration.
    :param exchange: Kind and name of the exchange.
    :return: The same exchange config, for chaining.
    """
    if exchange.is_default:
        logger.debug("Using default exchange, nothing to declare")
        return exchange

    channel.exchange.declare(
        exchange=exchange.name,
        exchange_type=exchange.kind.value,
        durable=exchange.durable,
    )
    logger.info("Exchange declared: %s (%s)", exchange.name, exchange.kind.value)
    return exchange


def declare_queue(channel: Channel, queue_config: QueueConfig) -> QueueConfig:
    """
    Declare a queue and record the name the broker gave it.

    :param channel: The AMQP channel to use for declaration.
    :param queue_config: Name and flags of the queue. An empty name lets the broker pick one.
    :return: The queue config with ``actual_queue_name`` set.
    """
    logger.debug("declaring queue with config: %s", queue_config)
    result = channel.queue.declare(
        queue=queue_config.name or "",
        durable=queue_config.durable,
        exclusive=queue_config.exclusive,
        auto_delete=queue_config.auto_delete,
    )
    if not result:
        logger.error("Unable to declare queue with name %s", queue_config.name)
        raise RuntimeError("Failed to create queue")

    # mutate config to store actual name
    queue_config.actual_queue_name = result.get("queue", queue_config.name)
    logger.info("Queue declared: %s", queue_config.actual_queue_name)
    return queue_config


def bind_queue(
    channel: Channel,
    queue_name: str,
    exchange: ExchangeConfig,
    routing_key: str = "",
    arguments: Optional[dict[str, Any]] = None,
) -> None:
    """
    Bind a queue to an exchange.

    :param channel: The AMQP channel to use for binding.
    :param queue_name: Name of the queue to bind.
    :param exchange: The exchange to bind to.
    :param routing_key: Key or pattern to match, empty when the exchange ignores it.
    :param arguments: Binding arguments, the header predicate for headers exchanges.
    """
    channel.queue.bind(
        queue=queue_name,
        exchange=exchange.name,
        routing_key=routing_key,
        arguments=arguments,
    )
    logger.info(
        "Queue %s bound to exchange %s with routing key '%s' and arguments %s",
        queue_name,
        exchange.name,
        routing_key,
        arguments,
    )


def publish_message(
    channel: Channel,
    exchange: ExchangeConfig,
    body: Union[str, bytes],
    routing_key: str = "",
    properties: Optional[dict[str, Any]] = None,
    mandatory: bool = False,
) -> None:
    """
    Publish one message to an exchange.

    :param channel: The AMQP channel to publish through.
    :param exchange: The exchange to publish to.
    :param body: Encoded message body.
    :param routing_key: Routing key, the queue name for the default exchange.
    :param properties: AMQP message properties.
    :param mandatory: Ask the broker to return the message if it cannot be routed.
    """
    channel.basic.publish(
        body=body,
        routing_key=routing_key,
        exchange=exchange.name,
        properties=properties,
        mandatory=mandatory,
    )
    logger.debug(
        "Message published to exchange '%s' with routing key '%s'",
        exchange.name,
        routing_key,
    )
