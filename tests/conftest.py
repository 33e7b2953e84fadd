"""
Shared pytest fixtures for agent tests.

Agents are built against ``rabbitmq_actors.testing.MockConnectionProvider``,
so no RabbitMQ server is needed. The provider exposes the mock connection and
channel every agent built with it shares:

```python
def test_worker(provider, quiet_logger):
    provider.deliver("hello")
    Printer(queue_name="jobs", connection_provider=provider, logger=quiet_logger).start()

    provider.channel.queue.declare.assert_called_once()
    provider.connection.close.assert_called_once()
```
"""

import logging
from unittest.mock import Mock

import pytest

from rabbitmq_actors.actors.consumer import Consumer
from rabbitmq_actors.testing import MockConnectionProvider
from rabbitmq_actors.util import shutdown_rabbitmq


class RecordingConsumer(Consumer):
    """Consumer storing every delivery it performs."""

    def __init__(self, *args, result="performed", **opts):
        self.performed = []
        self.result = result
        super().__init__(*args, **opts)

    def perform(self, delivery_info, properties, body):
        self.performed.append((delivery_info, properties, body))
        return self.result


class FailingConsumer(Consumer):
    """Consumer failing on every delivery."""

    def perform(self, delivery_info, properties, body):
        raise ValueError(f"cannot process {body}")


@pytest.fixture
def provider():
    """Fresh mock connection provider."""
    return MockConnectionProvider()


@pytest.fixture
def quiet_logger():
    """Logger that keeps agent activity out of the test output."""
    logger = logging.getLogger("tests.agents")
    logger.setLevel(logging.CRITICAL)
    return logger


@pytest.fixture
def mock_logger():
    """Logger double to assert on agent log messages."""
    return Mock(spec=logging.Logger)


@pytest.fixture(autouse=True)
def reset_default_provider():
    """Forget the process default provider between tests."""
    yield
    shutdown_rabbitmq()
