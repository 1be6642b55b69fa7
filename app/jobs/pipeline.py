"""Task processing pipeline"""

from uuid import UUID

import structlog

from app.domain.audio_metrics import compute_metrics
from app.domain.keywords import match_dictionaries
from app.domain.scoring import calculate_settings_metrics
from app.search.base import SearchIndex
from app.store.base import MetricsStore
from app.transcription.base import TranscriptionService

logger = structlog.get_logger()


def failure_reason(error: BaseException) -> str:
    return str(error) or type(error).__name__


class TaskPipeline:
    """
    Processes one task end to end.

    Stages run strictly in order: transcribe, compute metrics, index,
    match dictionaries, score, persist. Any error aborts the remaining
    stages, marks the task failed and is re-raised to the caller.
    """

    def __init__(
        self,
        store: MetricsStore,
        transcription: TranscriptionService,
        index: SearchIndex,
    ):
        self.store = store
        self.transcription = transcription
        self.index = index

    async def process(self, task_id: UUID) -> None:
        log = logger.bind(task_id=str(task_id))
        log.info("Processing task")

        try:
            await self._run(task_id)
        except Exception as e:
            log.error("Task processing failed", error=failure_reason(e), exc_info=True)
            await self._mark_failed(task_id, failure_reason(e))
            raise

        log.info("Task processed")

    async def _run(self, task_id: UUID) -> None:
        task = await self.store.get_task(task_id)
        metadata = await self.store.get_call_metadata(task.call_metadata_id)

        recognition = await self.transcription.transcribe(metadata)
        metrics = compute_metrics(recognition)

        await self.index.index_recognition(task.id, recognition)

        dictionaries = await self.store.list_dictionaries()
        phrases = await self.store.list_phrases()
        task_to_dicts = await match_dictionaries(self.index, task.id, dictionaries, phrases)

        calculate_settings_metrics(
            task_to_dicts,
            metrics,
            await self.store.list_settings(task.project_id),
            await self.store.list_settings_items(task.project_id),
            await self.store.list_settings_dict_items(task.project_id),
        )

        await self.store.save_task_outcome(task, metrics, task_to_dicts)

    async def _mark_failed(self, task_id: UUID, reason: str) -> None:
        try:
            await self.store.mark_task_failed(task_id, reason)
        except Exception as e:
            logger.error("Failed to mark task as failed", task_id=str(task_id), error=failure_reason(e))
