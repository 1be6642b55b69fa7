"""Speech recognition payload schemas"""

import enum
from typing import List

from pydantic import BaseModel, model_serializer, model_validator


class ParticipantKind(str, enum.Enum):
    """Call participant / audio channel owner"""
    EMPLOYEE = "employee"
    CLIENT = "client"


class EmotionKind(str, enum.Enum):
    """Emotion labels produced by the recognition service"""
    NEUTRAL = "neutral"
    POSITIVE = "positive"
    ANGRY = "angry"
    SAD = "sad"
    OTHER = "other"


class Interval(BaseModel):
    """
    Time interval in seconds.
    Encoded on the wire as a two-element array: [start, end].
    """
    start: float
    end: float

    @model_validator(mode="before")
    @classmethod
    def from_pair(cls, value):
        if isinstance(value, (list, tuple)):
            if len(value) != 2:
                raise ValueError(f"interval must have exactly two bounds, got {len(value)}")
            return {"start": value[0], "end": value[1]}
        return value

    @model_serializer
    def to_pair(self) -> List[float]:
        return [self.start, self.end]

    @property
    def duration(self) -> float:
        return self.end - self.start


class CallHolds(BaseModel):
    """Hold intervals: music on hold and dead air"""
    music: List[Interval] = []
    silent: List[Interval] = []


class PhraseTimestamps(BaseModel):
    """Speech intervals per participant"""
    client: List[Interval] = []
    employee: List[Interval] = []


class SpeechRecognition(BaseModel):
    """Recognized speech segment"""
    text: str
    timestamps: Interval
    speaker: ParticipantKind


class RecognitionData(BaseModel):
    """Full response of the recognition service"""
    call_holds: CallHolds = CallHolds()
    emotion_recognition_result: List[EmotionKind] = []
    phrase_timestamps: PhraseTimestamps = PhraseTimestamps()
    speech_recognition_result: List[SpeechRecognition] = []

    def transcript(self, speaker: ParticipantKind) -> str:
        """Space-joined text of one participant, in recognition order"""
        return " ".join(
            segment.text
            for segment in self.speech_recognition_result
            if segment.speaker == speaker
        )
