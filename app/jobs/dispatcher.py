"""Queue consumer dispatching tasks to the pipeline"""

import asyncio
import json
import queue
from concurrent.futures import Future
from typing import Tuple
from uuid import UUID

import structlog
from kombu import Connection
from kombu.message import Message
from kombu.mixins import ConsumerMixin

from app.jobs.broker import task_queue
from app.jobs.pipeline import TaskPipeline

logger = structlog.get_logger()


def decode_task_id(body) -> UUID:
    """Parse a message body holding the task id as a JSON string"""
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    task_id = json.loads(body)
    if not isinstance(task_id, str):
        raise ValueError(f"Task id must be a JSON string, got {type(task_id).__name__}")
    return UUID(task_id)


class TaskDispatcher(ConsumerMixin):
    """
    Consumes task ids and runs each task on the application event loop.

    kombu drives the consumer on its own thread. Deliveries are scheduled on
    the asyncio loop without waiting, so in-flight work is bounded by the
    prefetch count only. Outcomes come back through a queue and are settled
    on the consumer thread, which owns the channel.
    """

    def __init__(
        self,
        connection: Connection,
        pipeline: TaskPipeline,
        loop: asyncio.AbstractEventLoop,
        prefetch_count: int = 8,
    ):
        self.connection = connection
        self.pipeline = pipeline
        self.loop = loop
        self.prefetch_count = prefetch_count
        self._settled: "queue.Queue[Tuple[Message, bool]]" = queue.Queue()

    def get_consumers(self, Consumer, channel):
        return [
            Consumer(
                queues=[task_queue],
                on_message=self.on_message,
                prefetch_count=self.prefetch_count,
            )
        ]

    def on_connection_error(self, exc, interval):
        logger.warning("Broker connection lost, retrying", error=str(exc), interval=interval)

    def on_consume_ready(self, connection, channel, consumers, **kwargs):
        logger.info("Consuming tasks", queue=task_queue.name, prefetch_count=self.prefetch_count)

    def on_message(self, message: Message) -> None:
        try:
            task_id = decode_task_id(message.body)
        except (ValueError, UnicodeDecodeError) as e:
            logger.error("Rejecting malformed task message", error=str(e), body=repr(message.body)[:200])
            message.reject(requeue=False)
            return

        future = asyncio.run_coroutine_threadsafe(self.pipeline.process(task_id), self.loop)
        future.add_done_callback(lambda done: self._settle(message, task_id, done))

    def _settle(self, message: Message, task_id: UUID, future: Future) -> None:
        ok = not future.cancelled() and future.exception() is None
        self._settled.put((message, ok))
        # Pipeline errors are logged by the pipeline itself
        logger.debug("Task finished", task_id=str(task_id), ok=ok)

    def on_iteration(self) -> None:
        self.settle_pending()

    def settle_pending(self) -> int:
        """Acknowledge or reject finished deliveries; returns how many were settled"""
        # Deliveries from a channel lost on reconnect are redelivered by the broker
        errors = self.connection.connection_errors + self.connection.channel_errors
        settled = 0
        while True:
            try:
                message, ok = self._settled.get_nowait()
            except queue.Empty:
                return settled

            if ok:
                message.ack_log_error(logger, errors)
            else:
                message.reject_log_error(logger, errors, requeue=False)
            settled += 1

    def stop(self) -> None:
        self.should_stop = True
