"""
Custom exceptions for rabbitmq_actors.

This module contains all custom exception classes raised by agents.
Errors coming from the broker client (``amqpstorm.AMQPError`` and friends)
are never wrapped and reach the caller untouched.
"""

from typing import Optional


class ActorError(Exception):
    """Base class for every error raised by rabbitmq_actors."""


class InvalidConfiguration(ActorError, ValueError):
    """Raised when an agent is built with missing or inconsistent options."""


class MissingOptionError(InvalidConfiguration):
    """Raised when a required construction option was not provided."""

    def __init__(self, option: str, agent: Optional[str] = None, message: str = None):
        self.option = option
        self.agent = agent
        if message is None:
            owner = f" for {agent}" if agent else ""
            message = f"Missing required option '{option}'{owner}"
        super().__init__(message)


class ResourceAlreadySetError(InvalidConfiguration):
    """Raised when a single-set resource (queue, reply queue) is set a second time."""

    def __init__(self, resource: str, message: str = None):
        self.resource = resource
        if message is None:
            message = f"{resource.capitalize()} already set"
        super().__init__(message)


class HandlerFailure(ActorError):
    """
    Raised out of ``Consumer.start`` when processing a delivery failed.

    The connection has already been closed and the cancellation callback has
    already run by the time this reaches the caller.
    """

    def __init__(self, delivery_tag, original: BaseException, message: str = None):
        self.delivery_tag = delivery_tag
        self.original = original
        if message is None:
            message = f"Task with delivery tag {delivery_tag} failed: {original}"
        super().__init__(message)


class ConsumerCancelledError(ActorError):
    """Raised when ``start`` is called on a consumer that already left the idle state."""
