"""SQLAlchemy implementation of the metrics store"""

from datetime import datetime, timezone
from typing import List, Sequence
from uuid import UUID

import structlog
from sqlalchemy import delete, select, text, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from app.models.call import CallMetadata
from app.models.dictionary import Dictionary, Phrase
from app.models.metrics import CallMetrics
from app.models.settings import Settings, SettingsDictItem, SettingsItem
from app.models.task import Task, TaskStatus, TaskToDict
from app.schemas.task import CallMetadataCreate
from app.store.base import FileAlreadyExists, MetricsStore, TaskNotFound

logger = structlog.get_logger()


class SqlMetricsStore(MetricsStore):
    """Store over an async session factory, one session per operation"""

    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def get_task(self, task_id: UUID) -> Task:
        async with self.session_factory() as session:
            task = await session.get(Task, task_id)
        if task is None:
            raise TaskNotFound(task_id)
        return task

    async def get_call_metadata(self, call_metadata_id: UUID) -> CallMetadata:
        async with self.session_factory() as session:
            metadata = await session.get(CallMetadata, call_metadata_id)
        if metadata is None:
            raise LookupError(f"Call metadata {call_metadata_id} not found")
        return metadata

    async def _scalars(self, query) -> list:
        async with self.session_factory() as session:
            result = await session.execute(query)
            return list(result.scalars().all())

    async def list_dictionaries(self) -> List[Dictionary]:
        return await self._scalars(select(Dictionary).order_by(Dictionary.id))

    async def list_phrases(self) -> List[Phrase]:
        return await self._scalars(select(Phrase).order_by(Phrase.id))

    async def list_settings(self, project_id: UUID) -> List[Settings]:
        return await self._scalars(
            select(Settings).where(Settings.project_id == project_id)
        )

    async def list_settings_items(self, project_id: UUID) -> List[SettingsItem]:
        return await self._scalars(
            select(SettingsItem)
            .join(Settings, SettingsItem.settings_id == Settings.id)
            .where(Settings.project_id == project_id)
        )

    async def list_settings_dict_items(self, project_id: UUID) -> List[SettingsDictItem]:
        return await self._scalars(
            select(SettingsDictItem)
            .join(SettingsItem, SettingsDictItem.settings_item_id == SettingsItem.id)
            .join(Settings, SettingsItem.settings_id == Settings.id)
            .where(Settings.project_id == project_id)
        )

    async def save_task_outcome(
        self,
        task: Task,
        metrics: CallMetrics,
        task_to_dicts: Sequence[TaskToDict],
    ) -> None:
        async with self.session_factory() as session:
            async with session.begin():
                metrics.task_id = task.id
                await session.merge(metrics)

                # Reprocessing replaces the previous dictionary results
                await session.execute(delete(TaskToDict).where(TaskToDict.task_id == task.id))
                session.add_all(task_to_dicts)

                await session.execute(
                    update(Task)
                    .where(Task.id == task.id)
                    .values(status=TaskStatus.READY, failed_reason=None)
                )

        logger.info(
            "Task outcome saved",
            task_id=str(task.id),
            dictionaries=len(task_to_dicts),
            script_score=metrics.script_score,
            employee_quality_score=metrics.employee_quality_score,
        )

    async def mark_task_failed(self, task_id: UUID, reason: str) -> None:
        async with self.session_factory() as session:
            async with session.begin():
                await session.execute(
                    update(Task)
                    .where(Task.id == task_id)
                    .values(status=TaskStatus.FAILED, failed_reason=reason)
                )

    async def create_task(self, metadata: CallMetadataCreate, project_id: UUID) -> Task:
        values = metadata.model_dump()
        values["uploaded_at"] = values["uploaded_at"] or datetime.now(timezone.utc)

        try:
            async with self.session_factory() as session:
                async with session.begin():
                    call_metadata = CallMetadata(**values)
                    session.add(call_metadata)
                    await session.flush()

                    task = Task(
                        call_metadata_id=call_metadata.id,
                        status=TaskStatus.PROCESSING,
                        project_id=project_id,
                    )
                    session.add(task)
        except IntegrityError as e:
            raise FileAlreadyExists(metadata.file_hash) from e

        logger.info("Task created", task_id=str(task.id), file_hash=metadata.file_hash)
        return task

    async def restart_task(self, task_id: UUID) -> bool:
        async with self.session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    update(Task)
                    .where(Task.id == task_id, Task.status != TaskStatus.PROCESSING)
                    .values(status=TaskStatus.PROCESSING, failed_reason=None)
                )
        return result.rowcount > 0

    async def ping(self) -> None:
        async with self.session_factory() as session:
            await session.execute(text("SELECT 1"))
