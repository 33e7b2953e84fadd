"""
Headers pattern.

A headers producer sends messages with a header map to a headers exchange.
A headers consumer binds its queue with a header predicate whose ``x-match``
entry says whether ``any`` or ``all`` of the other entries must match.

    HeadersConsumer(
        headers_name="reports",
        binding_headers={"type": "economy", "area": "USA", "x-match": "any"},
    )
"""

from typing import Any, Optional

from rabbitmq_actors.actors.consumer import Consumer
from rabbitmq_actors.actors.producer import Producer
from rabbitmq_actors.rabbitmq.topology import TopologyKind


class HeadersProducer(Producer):
    topology_kind = TopologyKind.HEADERS

    def __init__(self, headers_name: Optional[str] = None, **opts):
        super().__init__(headers_name=headers_name, **opts)

    @property
    def headers_name(self) -> str:
        return self._options.headers_name

    def publish(
        self, body: Any, message_id: str, headers: dict[str, Any], **options
    ) -> "HeadersProducer":
        """
        :param headers: Message headers matched against the consumers' binding headers.
        """
        return super().publish(body, message_id, headers=headers, **options)


class HeadersConsumer(Consumer):
    topology_kind = TopologyKind.HEADERS

    def __init__(
        self,
        headers_name: Optional[str] = None,
        binding_headers: Optional[dict[str, Any]] = None,
        **opts,
    ):
        """
        :param headers_name: Name of the headers exchange to listen to. Required.
        :param binding_headers: Header predicate including ``x-match``. Required.
        """
        super().__init__(headers_name=headers_name, binding_headers=binding_headers, **opts)

    @property
    def headers_name(self) -> str:
        return self._options.headers_name

    @property
    def binding_headers(self) -> dict[str, Any]:
        return self._options.binding_headers
