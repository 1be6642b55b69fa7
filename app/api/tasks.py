"""Task API endpoints"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_publisher, get_store
from app.jobs.broker import TaskPublisher
from app.schemas.task import TaskCreate, TaskResponse
from app.services.tasks import TaskAlreadyProcessing, reprocess_task, submit_task
from app.store.base import FileAlreadyExists, MetricsStore, TaskNotFound

router = APIRouter()


@router.post("", response_model=TaskResponse, status_code=201)
async def create_task(
    data: TaskCreate,
    store: MetricsStore = Depends(get_store),
    publisher: TaskPublisher = Depends(get_publisher),
):
    """Submit a call recording for processing"""
    try:
        return await submit_task(store, publisher, data.metadata, data.project_id)
    except FileAlreadyExists:
        raise HTTPException(status_code=409, detail="File already exists")


@router.put("/{task_id}", response_model=TaskResponse)
async def restart_task(
    task_id: UUID,
    store: MetricsStore = Depends(get_store),
    publisher: TaskPublisher = Depends(get_publisher),
):
    """Reprocess a finished task"""
    try:
        return await reprocess_task(store, publisher, task_id)
    except TaskNotFound:
        raise HTTPException(status_code=404, detail="Task not found")
    except TaskAlreadyProcessing:
        raise HTTPException(status_code=409, detail="Task is already processing")
