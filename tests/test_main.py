"""
Tests for the command line interface.
"""

from unittest.mock import patch

import pytest
import typer
from typer.testing import CliRunner

from rabbitmq_actors.main import app, env_list_to_dict
from rabbitmq_actors.testing import MockConnectionProvider

runner = CliRunner()


@pytest.fixture
def cli_provider():
    provider = MockConnectionProvider()
    with patch("rabbitmq_actors.main.ConnectionProvider", return_value=provider) as mock_class:
        provider.mock_class = mock_class
        yield provider


def test_env_list_to_dict():
    assert env_list_to_dict(["type=economy", "query=a=b"]) == {"type": "economy", "query": "a=b"}


def test_env_list_to_dict_invalid():
    with pytest.raises(typer.BadParameter):
        env_list_to_dict(["economy"])


def test_publish_master_workers(cli_provider):
    result = runner.invoke(
        app,
        ["publish", "master_workers", "purchases", "buy", "--message-id", "123", "--url", "amqp://cli:5672/%2F"],
    )

    assert result.exit_code == 0, result.output
    cli_provider.mock_class.assert_called_once_with("amqp://cli:5672/%2F")
    cli_provider.channel.basic.publish.assert_called_once_with(
        body="buy",
        routing_key="purchases",
        exchange="",
        properties={"message_id": "123", "delivery_mode": 2},
        mandatory=False,
    )
    cli_provider.channel.close.assert_called_once()
    cli_provider.connection.close.assert_called_once()


def test_publish_topics(cli_provider):
    result = runner.invoke(
        app,
        [
            "publish",
            "topics",
            "scores",
            "Nadal wins",
            "--message-id",
            "1",
            "--routing-key",
            "europe.tennis.clay.spain",
        ],
    )

    assert result.exit_code == 0, result.output
    kwargs = cli_provider.channel.basic.publish.call_args.kwargs
    assert kwargs["exchange"] == "scores"
    assert kwargs["routing_key"] == "europe.tennis.clay.spain"


def test_publish_routing_requires_routing_key(cli_provider):
    result = runner.invoke(app, ["publish", "routing", "logs", "disk full", "--message-id", "1"])

    assert result.exit_code == 2
    cli_provider.channel.basic.publish.assert_not_called()


def test_publish_header_rejected_outside_headers(cli_provider):
    result = runner.invoke(
        app,
        ["publish", "publish_subscribe", "scores", "goal", "--message-id", "1", "--header", "type=economy"],
    )

    assert result.exit_code == 2
    cli_provider.mock_class.assert_not_called()
    cli_provider.channel.basic.publish.assert_not_called()


def test_publish_headers(cli_provider):
    result = runner.invoke(
        app,
        [
            "publish",
            "headers",
            "reports",
            "GDP up",
            "--message-id",
            "1",
            "--header",
            "type=economy",
            "--header",
            "area=USA",
        ],
    )

    assert result.exit_code == 0, result.output
    properties = cli_provider.channel.basic.publish.call_args.kwargs["properties"]
    assert properties["headers"] == {"type": "economy", "area": "USA"}


def test_publish_with_reply_queue(cli_provider):
    result = runner.invoke(
        app,
        ["publish", "publish_subscribe", "scores", "goal", "--message-id", "1", "--reply-queue", "answers"],
    )

    assert result.exit_code == 0, result.output
    properties = cli_provider.channel.basic.publish.call_args.kwargs["properties"]
    assert properties["reply_to"] == "answers"


def test_listen_topics(cli_provider):
    cli_provider.deliver("Nadal wins", routing_key="europe.tennis.clay.spain")

    result = runner.invoke(app, ["listen", "topics", "scores", "--binding-key", "*.tennis.#"])

    assert result.exit_code == 0, result.output
    assert "Nadal wins" in result.output
    cli_provider.channel.queue.bind.assert_called_once_with(
        queue="amq.gen-1", exchange="scores", routing_key="*.tennis.#", arguments=None
    )
    cli_provider.connection.close.assert_called_once()


def test_listen_headers(cli_provider):
    result = runner.invoke(
        app, ["listen", "headers", "reports", "--header", "type=economy", "--match", "any"]
    )

    assert result.exit_code == 0, result.output
    cli_provider.channel.queue.bind.assert_called_once_with(
        queue="amq.gen-1",
        exchange="reports",
        routing_key="",
        arguments={"type": "economy", "x-match": "any"},
    )


def test_listen_master_workers_manual_ack(cli_provider):
    cli_provider.deliver("buy", delivery_tag=4)

    result = runner.invoke(app, ["listen", "master_workers", "purchases", "--manual-ack"])

    assert result.exit_code == 0, result.output
    assert "buy" in result.output
    cli_provider.channel.queue.declare.assert_called_once_with(
        queue="purchases", durable=True, exclusive=False, auto_delete=True
    )
    cli_provider.channel.basic.ack.assert_called_once_with(delivery_tag=4)


def test_listen_invalid_header(cli_provider):
    result = runner.invoke(app, ["listen", "headers", "reports", "--header", "economy"])

    assert result.exit_code == 2
    cli_provider.mock_class.assert_not_called()


@pytest.mark.parametrize(
    "options",
    [["--header", "type=economy"], ["--binding-key", "error"]],
)
def test_listen_option_rejected_for_pattern(cli_provider, options):
    result = runner.invoke(app, ["listen", "publish_subscribe", "scores", *options])

    assert result.exit_code == 2
    cli_provider.mock_class.assert_not_called()
