import json

import pytest

from rabbitmq_actors.actors.patterns import MasterProducer, Worker
from rabbitmq_actors.exceptions import MissingOptionError


class Cashier(Worker):
    def perform(self, delivery_info, properties, body):
        return "ok"


def test_master_producer_publishes_to_queue(provider, quiet_logger):
    """Tasks go through the default exchange with the queue name as routing key."""
    master = MasterProducer(queue_name="purchases", connection_provider=provider, logger=quiet_logger)

    master.publish({"stock": "Apple", "number": 1000}, message_id="123")

    provider.channel.exchange.declare.assert_not_called()
    provider.channel.basic.publish.assert_called_once_with(
        body='{"stock": "Apple", "number": 1000}',
        routing_key="purchases",
        exchange="",
        properties={
            "message_id": "123",
            "delivery_mode": 2,
            "content_type": "application/json",
        },
        mandatory=False,
    )
    body = provider.channel.basic.publish.call_args.kwargs["body"]
    assert json.loads(body) == {"stock": "Apple", "number": 1000}


def test_master_producer_queue_is_shared(provider, quiet_logger):
    """The work queue is never exclusive, whatever was asked."""
    master = MasterProducer(
        queue_name="purchases", exclusive=True, connection_provider=provider, logger=quiet_logger
    )

    provider.channel.queue.declare.assert_called_once_with(
        queue="purchases", durable=True, exclusive=False, auto_delete=True
    )
    assert master.queue.exclusive is False


def test_master_producer_ignores_routing_key(provider, quiet_logger):
    master = MasterProducer(queue_name="purchases", connection_provider=provider, logger=quiet_logger)

    master.publish("task", message_id="1", routing_key="elsewhere")

    assert provider.channel.basic.publish.call_args.kwargs["routing_key"] == "purchases"


def test_master_producer_requires_queue_name(provider, quiet_logger):
    with pytest.raises(MissingOptionError) as exc_info:
        MasterProducer(connection_provider=provider, logger=quiet_logger)

    assert exc_info.value.option == "queue_name"
    provider.connection.channel.assert_not_called()


def test_master_producer_rejects_empty_queue_name(provider, quiet_logger):
    with pytest.raises(MissingOptionError):
        MasterProducer(queue_name="", connection_provider=provider, logger=quiet_logger)


def test_worker_queue_is_shared(provider, quiet_logger):
    worker = Cashier(queue_name="purchases", connection_provider=provider, logger=quiet_logger)

    provider.channel.queue.declare.assert_called_once_with(
        queue="purchases", durable=True, exclusive=False, auto_delete=True
    )
    provider.channel.queue.bind.assert_not_called()
    assert worker.queue_name == "purchases"


def test_worker_requires_queue_name(provider, quiet_logger):
    with pytest.raises(MissingOptionError):
        Cashier(connection_provider=provider, logger=quiet_logger)


def test_worker_performs_task(provider, quiet_logger):
    provider.deliver('{"stock": "Apple", "number": 1000}', routing_key="purchases")
    worker = Cashier(
        queue_name="purchases", manual_ack=True, connection_provider=provider, logger=quiet_logger
    )

    result = worker.start()

    assert result == "ok"
    provider.channel.basic.consume.assert_called_once()
    assert provider.channel.basic.consume.call_args.kwargs["queue"] == "purchases"
    provider.channel.basic.ack.assert_called_once_with(delivery_tag=1)
    provider.connection.close.assert_called_once()


def test_worker_answers_through_reply_queue(provider, quiet_logger):
    """A worker can publish its answer to the reply queue named in the task."""
    replies = []

    class Replier(Worker):
        def perform(self, delivery_info, properties, body):
            reply = MasterProducer(
                queue_name=properties["reply_to"],
                connection_provider=provider,
                logger=quiet_logger,
            )
            reply.publish("done", message_id="r1", correlation_id=properties["message_id"])
            replies.append(reply)
            return "replied"

    master = MasterProducer(
        queue_name="purchases",
        reply_queue_name="answers",
        connection_provider=provider,
        logger=quiet_logger,
    )
    master.publish("buy", message_id="123")
    sent = provider.channel.basic.publish.call_args.kwargs["properties"]
    provider.deliver("buy", properties=sent)

    result = Replier(queue_name="purchases", connection_provider=provider, logger=quiet_logger).start()

    assert result == "replied"
    reply_kwargs = provider.channel.basic.publish.call_args.kwargs
    assert reply_kwargs["routing_key"] == "answers"
    assert reply_kwargs["properties"]["correlation_id"] == "123"
