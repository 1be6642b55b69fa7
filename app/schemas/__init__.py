"""Pydantic schemas for request/response validation"""

from app.schemas.recognition import (
    ParticipantKind,
    EmotionKind,
    Interval,
    CallHolds,
    PhraseTimestamps,
    SpeechRecognition,
    RecognitionData,
)
from app.schemas.task import (
    CallMetadataCreate,
    TaskCreate,
    TaskResponse,
)

__all__ = [
    "ParticipantKind",
    "EmotionKind",
    "Interval",
    "CallHolds",
    "PhraseTimestamps",
    "SpeechRecognition",
    "RecognitionData",
    "CallMetadataCreate",
    "TaskCreate",
    "TaskResponse",
]
