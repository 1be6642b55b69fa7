"""Speech recognition service interface"""

from abc import ABC, abstractmethod

from app.models.call import CallMetadata
from app.schemas.recognition import RecognitionData


class TranscriptionError(Exception):
    """Speech recognition call failed"""


class TranscriptionTransportError(TranscriptionError):
    """Connection, timeout or protocol failure"""


class TranscriptionStatusError(TranscriptionError):
    """Non-2xx response"""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"Speech recognition returned {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class TranscriptionDecodeError(TranscriptionError):
    """Response is not valid recognition data"""


class TranscriptionService(ABC):
    """Abstract speech recognition client"""

    @abstractmethod
    async def transcribe(self, metadata: CallMetadata) -> RecognitionData:
        """Recognize speech, emotions and holds of a call recording"""
        pass

    async def aclose(self) -> None:
        pass
