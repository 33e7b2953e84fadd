"""
Master/workers pattern.

A master producer sends tasks to a named queue through the default exchange.
Workers share that queue, so each task reaches exactly one of them.

    master = MasterProducer(queue_name="purchases")
    master.publish({"stock": "Apple", "number": 1000}, message_id="123").close()
"""

from typing import Optional

from rabbitmq_actors.actors.consumer import Consumer
from rabbitmq_actors.actors.producer import Producer
from rabbitmq_actors.rabbitmq.topology import TopologyKind


class MasterProducer(Producer):
    """Producer of tasks for a pool of workers listening to the same queue."""

    topology_kind = TopologyKind.MASTER_WORKERS

    def __init__(self, queue_name: Optional[str] = None, **opts):
        """
        :param queue_name: The queue workers listen to. Required.
        :param opts: Agent options. ``exclusive`` is always False.
        """
        super().__init__(queue_name=queue_name, **opts)


class Worker(Consumer):
    """Consumer of tasks from a queue shared with other workers."""

    topology_kind = TopologyKind.MASTER_WORKERS

    def __init__(self, queue_name: Optional[str] = None, **opts):
        super().__init__(queue_name=queue_name, **opts)
