from .headers import HeadersConsumer, HeadersProducer
from .master_workers import MasterProducer, Worker
from .publish_subscribe import Publisher, Subscriber
from .routing import RoutingConsumer, RoutingProducer
from .topics import TopicConsumer, TopicProducer

__all__ = [
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
]
