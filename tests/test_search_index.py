"""Tests for the transcript search index"""

import json
from uuid import uuid4

import pytest

from app.schemas.recognition import ParticipantKind, RecognitionData
from app.search.base import TranscriptNotFound, tokenize
from app.search.tantivy_index import TantivySearchIndex
from tests.factories import make_recognition

EMPLOYEE = ParticipantKind.EMPLOYEE
CLIENT = ParticipantKind.CLIENT


def sample_recognition():
    return make_recognition(
        employee=[(0, 3), (10, 12)],
        client=[(4, 8)],
        segments=[
            (EMPLOYEE, "Добрый день, меня зовут Анна", 0, 3),
            (CLIENT, "Говорите громче, не расслышал!", 4, 8),
            (EMPLOYEE, "Всего доброго", 10, 12),
        ],
    )


def test_tokenize():
    """Test tokenization splits on punctuation and lowercases"""
    assert tokenize("Добрый день, меня-зовут Анна!") == ["добрый", "день", "меня", "зовут", "анна"]
    assert tokenize("snake_case  42") == ["snake", "case", "42"]
    assert tokenize(" ,.!? ") == []


def test_tokenize_long_words_and_final_sigma():
    """Test long words are kept and capital sigma lowercases like the index"""
    assert tokenize("ΟΔΟΣ достопримечательность") == ["οδοσ", "достопримечательность"]


@pytest.mark.asyncio
async def test_search_phrase_with_long_word(search_index):
    """Test a word longer than 40 bytes is indexed and found"""
    task_id = uuid4()
    recognition = make_recognition(segments=[(EMPLOYEE, "это достопримечательность города", 0, 3)])
    await search_index.index_recognition(task_id, recognition)

    assert await search_index.search_phrase(task_id, "достопримечательность", EMPLOYEE)
    assert await search_index.search_phrase(task_id, "Это достопримечательность", EMPLOYEE)
    assert not await search_index.search_phrase(task_id, "достопримечательность это", EMPLOYEE)


@pytest.mark.asyncio
async def test_search_phrase_greek_capitals(search_index):
    """Test an upper-case Greek word is found by the same spelling"""
    task_id = uuid4()
    await search_index.index_recognition(task_id, make_recognition(segments=[(CLIENT, "ΟΔΟΣ", 0, 1)]))

    assert await search_index.search_phrase(task_id, "ΟΔΟΣ", CLIENT)
    assert await search_index.search_phrase(task_id, "οδοσ", CLIENT)


@pytest.mark.asyncio
async def test_search_phrase_per_channel(search_index):
    """Test phrases are found only on their own channel"""
    task_id = uuid4()
    await search_index.index_recognition(task_id, sample_recognition())

    assert await search_index.search_phrase(task_id, "меня зовут", EMPLOYEE)
    assert await search_index.search_phrase(task_id, "ДОБРЫЙ ДЕНЬ", EMPLOYEE)
    assert await search_index.search_phrase(task_id, "не расслышал", CLIENT)
    assert not await search_index.search_phrase(task_id, "не расслышал", EMPLOYEE)
    assert not await search_index.search_phrase(task_id, "меня зовут", CLIENT)


@pytest.mark.asyncio
async def test_search_phrase_single_term(search_index):
    task_id = uuid4()
    await search_index.index_recognition(task_id, sample_recognition())

    assert await search_index.search_phrase(task_id, "громче", CLIENT)
    assert not await search_index.search_phrase(task_id, "громко", CLIENT)


@pytest.mark.asyncio
async def test_search_phrase_requires_exact_order(search_index):
    """Test multi-word phrases match as adjacent words in order"""
    task_id = uuid4()
    await search_index.index_recognition(task_id, sample_recognition())

    assert not await search_index.search_phrase(task_id, "зовут меня", EMPLOYEE)
    assert not await search_index.search_phrase(task_id, "добрый зовут", EMPLOYEE)


@pytest.mark.asyncio
async def test_search_phrase_without_tokens(search_index):
    """Test a phrase of punctuation only never matches"""
    task_id = uuid4()
    await search_index.index_recognition(task_id, sample_recognition())

    assert not await search_index.search_phrase(task_id, "...", EMPLOYEE)


@pytest.mark.asyncio
async def test_search_is_scoped_to_task(search_index):
    """Test a phrase of another task is not found"""
    task_id = uuid4()
    other_task_id = uuid4()
    await search_index.index_recognition(task_id, sample_recognition())
    await search_index.index_recognition(other_task_id, RecognitionData())

    assert await search_index.search_phrase(task_id, "всего доброго", EMPLOYEE)
    assert not await search_index.search_phrase(other_task_id, "всего доброго", EMPLOYEE)


@pytest.mark.asyncio
async def test_load_payload(search_index):
    """Test the stored payload round trips as recognition JSON"""
    task_id = uuid4()
    recognition = sample_recognition()
    await search_index.index_recognition(task_id, recognition)

    payload = await search_index.load_payload(task_id)

    assert RecognitionData.model_validate_json(payload) == recognition
    data = json.loads(payload)
    assert data["phrase_timestamps"]["client"] == [[4.0, 8.0]]
    assert data["speech_recognition_result"][0]["timestamps"] == [0.0, 3.0]


@pytest.mark.asyncio
async def test_load_payload_not_found(search_index):
    with pytest.raises(TranscriptNotFound):
        await search_index.load_payload(uuid4())


@pytest.mark.asyncio
async def test_reindexing_replaces_documents(search_index):
    """Test indexing the same task twice keeps only the latest transcript"""
    task_id = uuid4()
    await search_index.index_recognition(task_id, sample_recognition())
    await search_index.index_recognition(
        task_id,
        make_recognition(segments=[(EMPLOYEE, "до свидания", 0, 2)]),
    )

    assert await search_index.search_phrase(task_id, "до свидания", EMPLOYEE)
    assert not await search_index.search_phrase(task_id, "меня зовут", EMPLOYEE)

    data = json.loads(await search_index.load_payload(task_id))
    assert data["speech_recognition_result"][0]["text"] == "до свидания"


@pytest.mark.asyncio
async def test_persistent_index_reopens(tmp_path):
    """Test an on-disk index keeps documents across reopening"""
    task_id = uuid4()
    index = TantivySearchIndex(path=str(tmp_path / "index"), heap_size=15_000_000)
    await index.index_recognition(task_id, sample_recognition())
    index.close()

    reopened = TantivySearchIndex(path=str(tmp_path / "index"), heap_size=15_000_000)
    try:
        assert await reopened.search_phrase(task_id, "меня зовут", EMPLOYEE)
    finally:
        reopened.close()


@pytest.mark.asyncio
async def test_ping(search_index):
    await search_index.ping()
