import logging
from typing import Any, Optional

import typer
from typing_extensions import Annotated

from rabbitmq_actors.actors.consumer import Consumer
from rabbitmq_actors.actors.patterns import (
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
from rabbitmq_actors.config import DEFAULT_URL, URL_ENV_VAR
from rabbitmq_actors.exceptions import InvalidConfiguration
from rabbitmq_actors.logging_config import setup_logging
from rabbitmq_actors.rabbitmq.config import X_MATCH, HeadersMatch
from rabbitmq_actors.rabbitmq.connection import ConnectionProvider
from rabbitmq_actors.rabbitmq.topology import TopologyKind

app = typer.Typer(help="Publish to and listen on RabbitMQ messaging patterns.")
logger = logging.getLogger(__name__)

# pattern -> (role class, option naming the queue or exchange)
PRODUCERS = {
    TopologyKind.MASTER_WORKERS: (MasterProducer, "queue_name"),
    TopologyKind.PUBLISH_SUBSCRIBE: (Publisher, "exchange_name"),
    TopologyKind.ROUTING: (RoutingProducer, "exchange_name"),
    TopologyKind.TOPICS: (TopicProducer, "topic_name"),
    TopologyKind.HEADERS: (HeadersProducer, "headers_name"),
}
CONSUMERS = {
    TopologyKind.MASTER_WORKERS: (Worker, "queue_name"),
    TopologyKind.PUBLISH_SUBSCRIBE: (Subscriber, "exchange_name"),
    TopologyKind.ROUTING: (RoutingConsumer, "exchange_name"),
    TopologyKind.TOPICS: (TopicConsumer, "topic_name"),
    TopologyKind.HEADERS: (HeadersConsumer, "headers_name"),
}


def env_list_to_dict(env_list: list[str]) -> dict[str, str]:
    """Convert a list of key=value strings to a dictionary."""
    env_dict = {}
    for env in env_list:
        if "=" not in env:
            raise typer.BadParameter(f"Invalid header: {env}, expected key=value")
        key, value = env.split("=", 1)
        env_dict[key] = value
    return env_dict


def echo_consumer_class(consumer_class: type[Consumer]) -> type[Consumer]:
    """Subclass a consumer so it prints every message it receives."""

    class EchoConsumer(consumer_class):
        def perform(self, delivery_info: dict, properties: dict, body: Any) -> Any:
            self.logger.info(
                "routing_key=%s message_id=%s",
                delivery_info.get("routing_key"),
                properties.get("message_id"),
            )
            typer.echo(body)
            return body

    EchoConsumer.__name__ = f"Echo{consumer_class.__name__}"
    return EchoConsumer


@app.command()
def publish(
    pattern: Annotated[TopologyKind, typer.Argument(help="Messaging pattern")],
    name: Annotated[str, typer.Argument(help="Queue name for master_workers, exchange name otherwise")],
    body: Annotated[str, typer.Argument(help="Message body")],
    message_id: Annotated[str, typer.Option(help="Id of the message")],
    routing_key: Annotated[Optional[str], typer.Option(help="Routing key (routing, topics)")] = None,
    header: Annotated[Optional[list[str]], typer.Option(help="key=value message header (headers)")] = None,
    reply_queue: Annotated[Optional[str], typer.Option(help="Queue replies should go to")] = None,
    content_type: Annotated[Optional[str], typer.Option()] = None,
    url: Annotated[str, typer.Option(envvar=URL_ENV_VAR)] = DEFAULT_URL,
):
    """Publish one message."""
    setup_logging(component="publish")
    producer_class, name_option = PRODUCERS[pattern]
    options = {}
    if routing_key is not None:
        options["routing_key"] = routing_key
    elif pattern in (TopologyKind.ROUTING, TopologyKind.TOPICS):
        raise typer.BadParameter(f"--routing-key is required for {pattern.value}")
    if pattern is TopologyKind.HEADERS:
        options["headers"] = env_list_to_dict(header or [])
    elif header:
        raise typer.BadParameter(f"--header is only supported for {TopologyKind.HEADERS.value}")
    if content_type is not None:
        options["content_type"] = content_type

    with ConnectionProvider(url) as provider:
        try:
            producer = producer_class(
                connection_provider=provider,
                logger=logger,
                reply_queue_name=reply_queue,
                **{name_option: name},
            )
            producer.publish(body, message_id, **options).close()
        except InvalidConfiguration as e:
            raise typer.BadParameter(str(e)) from e


@app.command()
def listen(
    pattern: Annotated[TopologyKind, typer.Argument(help="Messaging pattern")],
    name: Annotated[str, typer.Argument(help="Queue name for master_workers, exchange name otherwise")],
    binding_key: Annotated[Optional[list[str]], typer.Option(help="Binding key (routing, topics)")] = None,
    header: Annotated[Optional[list[str]], typer.Option(help="key=value binding header (headers)")] = None,
    match: Annotated[HeadersMatch, typer.Option(help="Header matching (headers)")] = HeadersMatch.ALL,
    queue_name: Annotated[str, typer.Option(help="Queue to listen on, generated if empty")] = "",
    manual_ack: Annotated[bool, typer.Option(help="Acknowledge messages after printing them")] = False,
    url: Annotated[str, typer.Option(envvar=URL_ENV_VAR)] = DEFAULT_URL,
):
    """Print messages until the subscription ends."""
    setup_logging(component="listen")
    consumer_class, name_option = CONSUMERS[pattern]
    options: dict[str, Any] = {name_option: name, "manual_ack": manual_ack}
    if pattern is not TopologyKind.MASTER_WORKERS:
        options["queue_name"] = queue_name
    if binding_key and pattern in (TopologyKind.ROUTING, TopologyKind.TOPICS):
        options["binding_keys"] = binding_key
    elif binding_key:
        raise typer.BadParameter("--binding-key is only supported for routing and topics")
    if pattern is TopologyKind.HEADERS:
        options["binding_headers"] = {**env_list_to_dict(header or []), X_MATCH: match.value}
    elif header:
        raise typer.BadParameter(f"--header is only supported for {TopologyKind.HEADERS.value}")

    provider = ConnectionProvider(url)
    try:
        consumer = echo_consumer_class(consumer_class)(
            connection_provider=provider, logger=logger, **options
        )
    except InvalidConfiguration as e:
        provider.close()
        raise typer.BadParameter(str(e)) from e

    logger.info("listening with %s", consumer)
    consumer.start()


if __name__ == "__main__":
    app()
