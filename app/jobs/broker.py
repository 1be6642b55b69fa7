"""AMQP topology and task publishing"""

import asyncio
from abc import ABC, abstractmethod
from uuid import UUID

import structlog
from kombu import Connection, Exchange, Producer, Queue

from app.config import settings

logger = structlog.get_logger()

task_exchange = Exchange(settings.amqp_exchange, type="direct", durable=True)
task_queue = Queue(
    settings.amqp_queue,
    exchange=task_exchange,
    routing_key=settings.amqp_routing_key,
    durable=True,
)


def encode_task_id(task_id: UUID) -> str:
    """Message body: the task id as a JSON string"""
    return str(task_id)


class TaskPublisher(ABC):
    """Announces tasks ready for processing"""

    @abstractmethod
    async def publish(self, task_id: UUID) -> None:
        pass


class AmqpTaskPublisher(TaskPublisher):
    """Publishes task ids to the task exchange"""

    def __init__(self, connection: Connection):
        self.connection = connection

    def _publish(self, task_id: UUID) -> None:
        with self.connection.clone() as connection:
            producer = Producer(connection)
            producer.publish(
                encode_task_id(task_id),
                exchange=task_exchange,
                routing_key=settings.amqp_routing_key,
                serializer="json",
                declare=[task_queue],
                delivery_mode="persistent",
                retry=True,
            )

    async def publish(self, task_id: UUID) -> None:
        await asyncio.to_thread(self._publish, task_id)
        logger.info("Task published", task_id=str(task_id))
