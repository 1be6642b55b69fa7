"""Transcript search index interface"""

from abc import ABC, abstractmethod
from typing import List
from uuid import UUID

import tantivy

from app.schemas.recognition import ParticipantKind, RecognitionData

# Registered on the index under this name and used again for queries
TRANSCRIPT_TOKENIZER = "transcript"
transcript_analyzer = (
    tantivy.TextAnalyzerBuilder(tantivy.Tokenizer.simple())
    .filter(tantivy.Filter.lowercase())
    .build()
)


class SearchIndexError(Exception):
    """Search index storage or schema fault"""


class TranscriptNotFound(SearchIndexError):
    """No indexed transcript for the task"""

    def __init__(self, task_id: UUID):
        super().__init__(f"Transcript of task {task_id} not found")
        self.task_id = task_id


def tokenize(text: str) -> List[str]:
    """Split on non-alphanumeric characters and lowercase with the transcript analyzer"""
    return transcript_analyzer.analyze(text)


class SearchIndex(ABC):
    """Per-task transcript index searchable by speaker channel"""

    @abstractmethod
    async def index_recognition(self, task_id: UUID, recognition: RecognitionData) -> None:
        """Index both channels and the raw payload, replacing earlier documents of the task"""
        pass

    @abstractmethod
    async def search_phrase(self, task_id: UUID, phrase: str, participant: ParticipantKind) -> bool:
        """Whether the phrase occurs on the participant's channel"""
        pass

    @abstractmethod
    async def load_payload(self, task_id: UUID) -> bytes:
        """Stored recognition payload (JSON)"""
        pass

    async def ping(self) -> None:
        """Raise SearchIndexError when the index is unusable"""
        pass

    def close(self) -> None:
        pass
