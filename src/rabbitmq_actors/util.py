import logging
import threading
from typing import Optional

import amqpstorm

from rabbitmq_actors.config import BrokerConfig
from rabbitmq_actors.rabbitmq.connection import ConnectionProvider

logger = logging.getLogger(__name__)

__GLOBALS = {}
__GLOBALS_LOCK = threading.RLock()


def init_rabbitmq(
    url: Optional[str] = None,
    heartbeat: Optional[int] = None,
    timeout: Optional[int] = None,
) -> ConnectionProvider:
    """
    Install the process default connection provider.

    Missing arguments are read from the environment. Replacing an existing
    provider closes its connection; agents built before keep the old provider.

    :param url: AMQP url of the broker.
    :param heartbeat: AMQP heartbeat interval in seconds.
    :param timeout: Socket timeout in seconds.
    :return: The new default provider.
    """
    env_config = BrokerConfig.from_env()
    provider = ConnectionProvider.from_config(
        BrokerConfig(
            url=url or env_config.url,
            heartbeat=heartbeat if heartbeat is not None else env_config.heartbeat,
            timeout=timeout if timeout is not None else env_config.timeout,
        )
    )

    with __GLOBALS_LOCK:
        previous: Optional[ConnectionProvider] = __GLOBALS.get("rmq_connection_provider")
        __GLOBALS["rmq_connection_provider"] = provider

    if previous is not None:
        logger.info("replacing rmq connection provider for %s", previous)
        previous.close()

    logger.info("rmq connection provider configured for %s", provider)
    return provider


def get_rabbitmq_connection_provider() -> ConnectionProvider:
    """Get the process default provider, configuring it from the environment on first use."""
    with __GLOBALS_LOCK:
        provider = __GLOBALS.get("rmq_connection_provider")
        if provider is None:
            provider = init_rabbitmq()
    return provider


def get_rabbitmq_url() -> str:
    return get_rabbitmq_connection_provider().url


def get_rabbitmq_connection() -> amqpstorm.UriConnection:
    """Get the RabbitMQ connection of the process default provider."""
    return get_rabbitmq_connection_provider().get_connection()


def shutdown_rabbitmq() -> None:
    """Close and forget the process default provider."""
    with __GLOBALS_LOCK:
        provider: Optional[ConnectionProvider] = __GLOBALS.pop("rmq_connection_provider", None)
    if provider is not None:
        provider.close()
