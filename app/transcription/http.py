"""HTTP client of the speech recognition service"""

from typing import Optional

import httpx
import structlog
from pydantic import ValidationError

from app.models.call import CallMetadata
from app.schemas.recognition import RecognitionData
from app.transcription.base import (
    TranscriptionDecodeError,
    TranscriptionService,
    TranscriptionStatusError,
    TranscriptionTransportError,
)

logger = structlog.get_logger()

EXTRACT_INFO_PATH = "/extract_info_s3/"
RECOGNITION_TASKS = ["speech_recognition", "emotion_recognition"]

# Error bodies are cut to this many characters in failure reasons
MAX_ERROR_BODY = 500


class HttpTranscriptionService(TranscriptionService):
    """Speech recognition over HTTP, one shared connection pool"""

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = 600.0,
        connect_timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout, connect=connect_timeout),
            transport=transport,
        )

    async def transcribe(self, metadata: CallMetadata) -> RecognitionData:
        payload = {
            "file_url": metadata.file_url,
            "operator_channel": metadata.operator_channel,
            "tasks": RECOGNITION_TASKS,
        }

        logger.debug(
            "Speech recognition request",
            base_url=self.base_url,
            file_url=metadata.file_url,
            operator_channel=metadata.operator_channel,
        )

        try:
            response = await self.client.post(EXTRACT_INFO_PATH, json=payload)
        except httpx.HTTPError as e:
            raise TranscriptionTransportError(f"Speech recognition request failed: {e!r}") from e

        if not response.is_success:
            raise TranscriptionStatusError(response.status_code, response.text[:MAX_ERROR_BODY])

        try:
            recognition = RecognitionData.model_validate_json(response.content)
        except ValidationError as e:
            raise TranscriptionDecodeError(f"Malformed speech recognition response: {e}") from e

        logger.info(
            "Speech recognition completed",
            file_url=metadata.file_url,
            segments=len(recognition.speech_recognition_result),
        )
        return recognition

    async def aclose(self) -> None:
        await self.client.aclose()
