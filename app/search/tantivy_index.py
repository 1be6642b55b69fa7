"""Tantivy-backed transcript index"""

import asyncio
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Optional
from uuid import UUID

import structlog
import tantivy

from app.schemas.recognition import ParticipantKind, RecognitionData
from app.search.base import (
    TRANSCRIPT_TOKENIZER,
    SearchIndex,
    SearchIndexError,
    TranscriptNotFound,
    tokenize,
    transcript_analyzer,
)

logger = structlog.get_logger()

UUID_FIELD = "uuid"
PAYLOAD_FIELD = "payload"
TRANSCRIPT_FIELDS = {
    ParticipantKind.CLIENT: "client_transcript",
    ParticipantKind.EMPLOYEE: "employee_transcript",
}

# Lower bound tantivy accepts for a single indexing thread
MIN_WRITER_HEAP_SIZE = 15_000_000


def build_schema() -> tantivy.Schema:
    builder = tantivy.SchemaBuilder()
    for field_name in TRANSCRIPT_FIELDS.values():
        builder.add_text_field(field_name, stored=False, tokenizer_name=TRANSCRIPT_TOKENIZER, index_option="position")
    builder.add_text_field(UUID_FIELD, stored=False, tokenizer_name="raw")
    builder.add_bytes_field(PAYLOAD_FIELD, stored=True)
    return builder.build()


class TantivySearchIndex(SearchIndex):
    """
    Transcript index with a single writer.

    All writes run on one dedicated thread which owns the tantivy writer.
    Reads run on the default executor against the last reloaded snapshot.
    """

    def __init__(self, path: Optional[str] = None, heap_size: int = 150_000_000):
        self.path = path
        self.schema = build_schema()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="index-writer")
        self._writer = None

        try:
            if path is not None:
                os.makedirs(path, exist_ok=True)
            self.index = tantivy.Index(self.schema, path=path)
            self.index.register_tokenizer(TRANSCRIPT_TOKENIZER, transcript_analyzer)
            # The writer is created on the thread that uses it
            self._executor.submit(self._open_writer, max(heap_size, MIN_WRITER_HEAP_SIZE)).result()
        except (OSError, ValueError) as e:
            self._executor.shutdown(wait=False)
            raise SearchIndexError(f"Failed to open search index: {e}") from e

        logger.info("Search index opened", path=path or ":memory:")

    def _open_writer(self, heap_size: int) -> None:
        self._writer = self.index.writer(heap_size=heap_size, num_threads=1)

    def _write(self, task_id: UUID, recognition: RecognitionData) -> None:
        document = tantivy.Document()
        for participant, field_name in TRANSCRIPT_FIELDS.items():
            document.add_text(field_name, recognition.transcript(participant))
        document.add_text(UUID_FIELD, str(task_id))
        document.add_bytes(PAYLOAD_FIELD, recognition.model_dump_json().encode("utf-8"))

        self._writer.delete_documents_by_term(UUID_FIELD, str(task_id))
        self._writer.add_document(document)
        self._writer.commit()
        self.index.reload()

    async def index_recognition(self, task_id: UUID, recognition: RecognitionData) -> None:
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(self._executor, self._write, task_id, recognition)
        except (OSError, ValueError) as e:
            raise SearchIndexError(f"Failed to index task {task_id}: {e}") from e

        logger.debug("Indexed recognition", task_id=str(task_id))

    def _task_query(self, task_id: UUID) -> tantivy.Query:
        return tantivy.Query.term_query(self.schema, UUID_FIELD, str(task_id))

    def _search(self, task_id: UUID, phrase: str, participant: ParticipantKind) -> bool:
        tokens = tokenize(phrase)
        if not tokens:
            return False

        field_name = TRANSCRIPT_FIELDS[participant]
        if len(tokens) == 1:
            phrase_query = tantivy.Query.term_query(self.schema, field_name, tokens[0])
        else:
            phrase_query = tantivy.Query.phrase_query(self.schema, field_name, tokens)

        query = tantivy.Query.boolean_query([
            (tantivy.Occur.Must, self._task_query(task_id)),
            (tantivy.Occur.Must, phrase_query),
        ])
        return len(self.index.searcher().search(query, 1).hits) > 0

    async def search_phrase(self, task_id: UUID, phrase: str, participant: ParticipantKind) -> bool:
        try:
            return await asyncio.to_thread(self._search, task_id, phrase, participant)
        except (OSError, ValueError) as e:
            raise SearchIndexError(f"Failed to search task {task_id}: {e}") from e

    def _load(self, task_id: UUID) -> bytes:
        searcher = self.index.searcher()
        hits = searcher.search(self._task_query(task_id), 1).hits
        if not hits:
            raise TranscriptNotFound(task_id)

        _, address = hits[0]
        payload = searcher.doc(address).get_first(PAYLOAD_FIELD)
        if payload is None:
            raise TranscriptNotFound(task_id)
        return bytes(payload)

    async def load_payload(self, task_id: UUID) -> bytes:
        try:
            return await asyncio.to_thread(self._load, task_id)
        except (OSError, ValueError) as e:
            raise SearchIndexError(f"Failed to load transcript of task {task_id}: {e}") from e

    async def ping(self) -> None:
        try:
            await asyncio.to_thread(lambda: self.index.searcher().num_docs)
        except (OSError, ValueError) as e:
            raise SearchIndexError(f"Search index unavailable: {e}") from e

    def _drop_writer(self) -> None:
        self._writer = None

    def close(self) -> None:
        # Dropping the writer releases the directory lock
        self._executor.submit(self._drop_writer).result()
        self._executor.shutdown(wait=True)
        logger.info("Search index closed")
