"""Dictionary matching over the search index"""

from typing import List, Sequence
from uuid import UUID

import structlog

from app.domain.grouping import group_by
from app.models.dictionary import Dictionary, Phrase
from app.models.task import TaskToDict
from app.schemas.recognition import ParticipantKind
from app.search.base import SearchIndex

logger = structlog.get_logger()


async def match_dictionaries(
    index: SearchIndex,
    task_id: UUID,
    dictionaries: Sequence[Dictionary],
    phrases: Sequence[Phrase],
) -> List[TaskToDict]:
    """
    Check every dictionary against the indexed transcript of a task.

    A dictionary matches when any of its phrases is found on the channel of
    its participant. Dictionaries without phrases produce no row.
    """
    dictionaries_by_id = {dictionary.id: dictionary for dictionary in dictionaries}
    results = []

    for dictionary_id, dictionary_phrases in group_by(phrases, lambda phrase: phrase.dictionary_id).items():
        dictionary = dictionaries_by_id.get(dictionary_id)
        if dictionary is None:
            logger.warning("Phrases reference unknown dictionary", dictionary_id=dictionary_id, task_id=str(task_id))
            continue

        participant = ParticipantKind(dictionary.participant)
        contains = False
        for phrase in dictionary_phrases:
            if await index.search_phrase(task_id, phrase.text, participant):
                contains = True
                break

        results.append(TaskToDict(task_id=task_id, dictionary_id=dictionary_id, contains=contains))

    return results
