"""Tests for task submission and reprocessing"""

from uuid import uuid4

import pytest
from sqlalchemy import update

from app.models.task import NIL_PROJECT_ID, Task, TaskStatus
from app.services.tasks import TaskAlreadyProcessing, reprocess_task, submit_task
from app.store.base import FileAlreadyExists, TaskNotFound
from tests.factories import make_metadata


@pytest.mark.asyncio
async def test_submit_task(store, publisher):
    """Test a submitted task is stored as processing and published"""
    project_id = uuid4()

    task = await submit_task(store, publisher, make_metadata(), project_id)

    stored = await store.get_task(task.id)
    assert stored.status == TaskStatus.PROCESSING
    assert stored.project_id == project_id
    assert publisher.published == [task.id]

    metadata = await store.get_call_metadata(stored.call_metadata_id)
    assert metadata.file_url == "s3://calls/42.wav"
    assert metadata.uploaded_at is not None


@pytest.mark.asyncio
async def test_submit_duplicate_file(store, publisher):
    await submit_task(store, publisher, make_metadata("same"), NIL_PROJECT_ID)

    with pytest.raises(FileAlreadyExists):
        await submit_task(store, publisher, make_metadata("same"), NIL_PROJECT_ID)

    assert len(publisher.published) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [TaskStatus.READY, TaskStatus.FAILED])
async def test_reprocess_finished_task(store, session_factory, publisher, test_task, status):
    """Test ready and failed tasks return to processing"""
    async with session_factory() as db:
        await db.execute(update(Task).where(Task.id == test_task.id).values(status=status, failed_reason="old"))
        await db.commit()

    task = await reprocess_task(store, publisher, test_task.id)

    stored = await store.get_task(test_task.id)
    assert task.status == TaskStatus.PROCESSING
    assert stored.status == TaskStatus.PROCESSING
    assert stored.failed_reason is None
    assert publisher.published == [test_task.id]


@pytest.mark.asyncio
async def test_reprocess_processing_task(store, publisher, test_task):
    with pytest.raises(TaskAlreadyProcessing):
        await reprocess_task(store, publisher, test_task.id)

    assert publisher.published == []


@pytest.mark.asyncio
async def test_reprocess_unknown_task(store, publisher):
    with pytest.raises(TaskNotFound):
        await reprocess_task(store, publisher, uuid4())


@pytest.mark.asyncio
async def test_restart_task_is_conditional(store, test_task):
    """Test restarting only succeeds once per finished state"""
    await store.mark_task_failed(test_task.id, "boom")

    assert await store.restart_task(test_task.id)
    assert not await store.restart_task(test_task.id)
