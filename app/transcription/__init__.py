"""Speech recognition client"""

from app.transcription.base import (
    TranscriptionDecodeError,
    TranscriptionError,
    TranscriptionService,
    TranscriptionStatusError,
    TranscriptionTransportError,
)
from app.transcription.http import HttpTranscriptionService

__all__ = [
    "TranscriptionError",
    "TranscriptionTransportError",
    "TranscriptionStatusError",
    "TranscriptionDecodeError",
    "TranscriptionService",
    "HttpTranscriptionService",
]
