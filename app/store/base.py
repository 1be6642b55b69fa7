"""Persistence interface of the processing pipeline"""

from abc import ABC, abstractmethod
from typing import List, Sequence
from uuid import UUID

from app.models.call import CallMetadata
from app.models.dictionary import Dictionary, Phrase
from app.models.metrics import CallMetrics
from app.models.settings import Settings, SettingsDictItem, SettingsItem
from app.models.task import Task, TaskToDict
from app.schemas.task import CallMetadataCreate


class TaskNotFound(Exception):
    def __init__(self, task_id: UUID):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class FileAlreadyExists(Exception):
    def __init__(self, file_hash: str):
        super().__init__(f"File with hash {file_hash} already exists")
        self.file_hash = file_hash


class MetricsStore(ABC):
    """Tasks, call metadata, dictionaries, rubrics and processing outcomes"""

    @abstractmethod
    async def get_task(self, task_id: UUID) -> Task:
        """Raises TaskNotFound"""
        pass

    @abstractmethod
    async def get_call_metadata(self, call_metadata_id: UUID) -> CallMetadata:
        pass

    @abstractmethod
    async def list_dictionaries(self) -> List[Dictionary]:
        pass

    @abstractmethod
    async def list_phrases(self) -> List[Phrase]:
        pass

    @abstractmethod
    async def list_settings(self, project_id: UUID) -> List[Settings]:
        pass

    @abstractmethod
    async def list_settings_items(self, project_id: UUID) -> List[SettingsItem]:
        pass

    @abstractmethod
    async def list_settings_dict_items(self, project_id: UUID) -> List[SettingsDictItem]:
        pass

    @abstractmethod
    async def save_task_outcome(
        self,
        task: Task,
        metrics: CallMetrics,
        task_to_dicts: Sequence[TaskToDict],
    ) -> None:
        """Persist metrics and dictionary results and mark the task ready, atomically"""
        pass

    @abstractmethod
    async def mark_task_failed(self, task_id: UUID, reason: str) -> None:
        pass

    @abstractmethod
    async def create_task(self, metadata: CallMetadataCreate, project_id: UUID) -> Task:
        """Raises FileAlreadyExists on a duplicate file hash"""
        pass

    @abstractmethod
    async def restart_task(self, task_id: UUID) -> bool:
        """Move a finished task back to processing; False if it is already processing"""
        pass

    async def ping(self) -> None:
        pass
