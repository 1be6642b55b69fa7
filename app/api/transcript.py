"""Transcript API endpoints"""

from uuid import UUID

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response

from app.api.deps import get_search_index
from app.search.base import SearchIndex, SearchIndexError, TranscriptNotFound

logger = structlog.get_logger()

router = APIRouter()


@router.get("/{task_id}")
async def get_transcript(
    task_id: UUID,
    index: SearchIndex = Depends(get_search_index),
):
    """Raw recognition payload of a processed task"""
    try:
        payload = await index.load_payload(task_id)
    except TranscriptNotFound:
        raise HTTPException(status_code=404, detail="Transcript not found")
    except SearchIndexError as e:
        logger.error("Failed to load transcript", task_id=str(task_id), error=str(e))
        raise HTTPException(status_code=500, detail="Search index error")

    return Response(content=payload, media_type="application/json")
