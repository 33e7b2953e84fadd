"""
Actors for RabbitMQ messaging patterns.

This package gives application code ready made roles talking to a RabbitMQ
server: producers that publish and consumers that block listening to a queue.

Public API:
    - Agent, Producer, Consumer: base roles
    - MasterProducer, Worker: work queue shared by a pool of workers
    - Publisher, Subscriber: fanout publish/subscribe
    - RoutingProducer, RoutingConsumer: direct exchange with routing keys
    - TopicProducer, TopicConsumer: topic exchange with routing patterns
    - HeadersProducer, HeadersConsumer: headers exchange with header matching
    - ConnectionProvider, init_rabbitmq: broker connection setup
"""

from .actors import Agent, Consumer, ConsumerState, Producer
from .actors.patterns import (
    HeadersConsumer,
    HeadersProducer,
    MasterProducer,
    Publisher,
    RoutingConsumer,
    RoutingProducer,
    Subscriber,
    TopicConsumer,
    TopicProducer,
    Worker,
)
from .exceptions import (
    ActorError,
    ConsumerCancelledError,
    HandlerFailure,
    InvalidConfiguration,
    MissingOptionError,
    ResourceAlreadySetError,
)
from .rabbitmq.connection import ConnectionProvider
from .util import get_rabbitmq_connection_provider, init_rabbitmq, shutdown_rabbitmq

__all__ = [
    # Base roles
    "Agent",
    "Consumer",
    "ConsumerState",
    "Producer",
    # Patterns
    "HeadersConsumer",
    "HeadersProducer",
    "MasterProducer",
    "Worker",
    "Publisher",
    "Subscriber",
    "RoutingConsumer",
    "RoutingProducer",
    "TopicConsumer",
    "TopicProducer",
    # Errors
    "ActorError",
    "ConsumerCancelledError",
    "HandlerFailure",
    "InvalidConfiguration",
    "MissingOptionError",
    "ResourceAlreadySetError",
    # Connection
    "ConnectionProvider",
    "get_rabbitmq_connection_provider",
    "init_rabbitmq",
    "shutdown_rabbitmq",
]
