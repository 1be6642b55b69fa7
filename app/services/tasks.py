"""Task submission and reprocessing"""

from uuid import UUID

import structlog

from app.jobs.broker import TaskPublisher
from app.models.task import Task, TaskStatus
from app.schemas.task import CallMetadataCreate
from app.store.base import MetricsStore

logger = structlog.get_logger()


class TaskAlreadyProcessing(Exception):
    def __init__(self, task_id: UUID):
        super().__init__(f"Task {task_id} is already processing")
        self.task_id = task_id


async def submit_task(
    store: MetricsStore,
    publisher: TaskPublisher,
    metadata: CallMetadataCreate,
    project_id: UUID,
) -> Task:
    """Create a processing task for an uploaded recording and announce it"""
    task = await store.create_task(metadata, project_id)
    await publisher.publish(task.id)
    return task


async def reprocess_task(store: MetricsStore, publisher: TaskPublisher, task_id: UUID) -> Task:
    """Send a finished task through the pipeline again"""
    task = await store.get_task(task_id)
    if task.status == TaskStatus.PROCESSING:
        raise TaskAlreadyProcessing(task_id)

    # Status is re-checked in the update, a concurrent reprocess loses here
    if not await store.restart_task(task_id):
        raise TaskAlreadyProcessing(task_id)

    await publisher.publish(task_id)
    logger.info("Task sent for reprocessing", task_id=str(task_id), previous_status=TaskStatus(task.status).value)

    task.status = TaskStatus.PROCESSING
    task.failed_reason = None
    return task
