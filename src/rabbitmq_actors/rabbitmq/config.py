import logging
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Callable, Optional, Union

from rabbitmq_actors.exceptions import InvalidConfiguration, MissingOptionError


class ExchangeKind(Enum):
    # NOTE: every exchange declared by an agent is durable
    DEFAULT = ""
    DIRECT = "direct"
    FANOUT = "fanout"
    TOPIC = "topic"
    HEADERS = "headers"


class TopicWildcard(Enum):
    ALL = "#"
    ANY = "*"


class HeadersMatch(Enum):
    ANY = "any"
    ALL = "all"


X_MATCH = "x-match"


@dataclass(frozen=True)
class ExchangeConfig:
    kind: ExchangeKind
    name: str = ""
    durable: bool = True

    @property
    def is_default(self) -> bool:
        return self.kind is ExchangeKind.DEFAULT


@dataclass
class QueueConfig:
    # empty name lets the broker pick one
    name: str

    durable: bool = True
    exclusive: bool = True
    auto_delete: bool = True

    actual_queue_name: Optional[str] = field(default=None, init=False)

    def build_name(self) -> str:
        return self.actual_queue_name if self.actual_queue_name is not None else self.name


@dataclass
class AgentOptions:
    """Flat option set accepted by every agent constructor."""

    queue_name: Optional[str] = None
    exchange_name: Optional[str] = None
    topic_name: Optional[str] = None
    headers_name: Optional[str] = None
    binding_keys: Union[str, list[str], None] = None
    binding_headers: Optional[dict[str, Any]] = None
    auto_delete: bool = True
    exclusive: bool = True
    manual_ack: bool = False
    on_cancellation: Optional[Callable[[], Any]] = None
    # called with the amqpstorm AMQPMessageError of a returned message
    on_return: Optional[Callable[[Any], Any]] = None
    reply_queue_name: Optional[str] = None
    logger: Optional[logging.Logger] = None

    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_kwargs(cls, **kwargs) -> "AgentOptions":
        """
        Split keyword options into recognised fields and ``extra``.

        :raises InvalidConfiguration: If a recognised option has the wrong shape.
        """
        known = {f.name for f in fields(cls) if f.name != "extra"}
        options = cls(
            **{k: v for k, v in kwargs.items() if k in known},
            extra={k: v for k, v in kwargs.items() if k not in known},
        )
        options.check()
        return options

    def check(self) -> None:
        if self.on_cancellation is not None and not callable(self.on_cancellation):
            raise InvalidConfiguration("on_cancellation must be callable")
        if self.on_return is not None and not callable(self.on_return):
            raise InvalidConfiguration("on_return must be callable")
        if self.logger is not None and not all(
            callable(getattr(self.logger, level, None)) for level in ("debug", "info", "error")
        ):
            raise InvalidConfiguration("logger must provide debug, info and error methods")
        if self.binding_headers is not None and not isinstance(self.binding_headers, dict):
            raise InvalidConfiguration("binding_headers must be a dict")

    def require(self, name: str, agent: Optional[str] = None) -> Any:
        """Return the value of a required option, failing if it is missing."""
        value = getattr(self, name)
        if value is None:
            raise MissingOptionError(name, agent=agent)
        return value
