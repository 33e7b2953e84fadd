import logging
from unittest.mock import Mock

import pytest

from rabbitmq_actors.exceptions import InvalidConfiguration, MissingOptionError
from rabbitmq_actors.rabbitmq.config import AgentOptions, ExchangeConfig, ExchangeKind, QueueConfig


def test_agent_options_split_unknown_keys():
    options = AgentOptions.from_kwargs(queue_name="jobs", manual_ack=True, colour="blue")

    assert options.queue_name == "jobs"
    assert options.manual_ack is True
    assert options.extra == {"colour": "blue"}


def test_agent_options_defaults():
    options = AgentOptions.from_kwargs()

    assert options.queue_name is None
    assert options.exclusive is True
    assert options.auto_delete is True
    assert options.manual_ack is False
    assert options.extra == {}


def test_agent_options_extra_is_not_an_option():
    options = AgentOptions.from_kwargs(extra={"a": 1})

    assert options.extra == {"extra": {"a": 1}}


def test_agent_options_accepts_logger_like_objects():
    AgentOptions.from_kwargs(logger=logging.getLogger("tests"), on_cancellation=Mock())
    AgentOptions.from_kwargs(logger=Mock(spec=logging.Logger))


def test_agent_options_require():
    options = AgentOptions(exchange_name="scores")

    assert options.require("exchange_name") == "scores"
    with pytest.raises(MissingOptionError, match="topic_name"):
        options.require("topic_name", agent="TopicConsumer")


def test_agent_options_require_accepts_empty_string():
    assert AgentOptions(queue_name="").require("queue_name") == ""


def test_agent_options_bad_binding_headers():
    with pytest.raises(InvalidConfiguration):
        AgentOptions.from_kwargs(binding_headers="x-match=any")


def test_queue_config_name():
    queue = QueueConfig(name="")

    assert queue.build_name() == ""
    queue.actual_queue_name = "amq.gen-1"
    assert queue.build_name() == "amq.gen-1"


def test_exchange_config_default():
    assert ExchangeConfig(kind=ExchangeKind.DEFAULT).is_default
    assert not ExchangeConfig(kind=ExchangeKind.FANOUT, name="scores").is_default
    assert ExchangeConfig(kind=ExchangeKind.FANOUT, name="scores").durable
