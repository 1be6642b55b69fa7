"""Task schemas"""

from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from app.models.task import NIL_PROJECT_ID, TaskStatus
from app.schemas.recognition import ParticipantKind


class CallMetadataCreate(BaseModel):
    """Uploaded call recording facts"""
    call_id: int
    performed_at: datetime
    uploaded_at: Optional[datetime] = None  # defaults to submission time
    file_hash: str = Field(..., min_length=1)
    file_url: str = Field(..., min_length=1)
    file_name: str
    duration: float = Field(..., ge=0)
    left_channel: ParticipantKind
    right_channel: ParticipantKind
    client_name: str
    employee_name: str
    inbound: bool


class TaskCreate(BaseModel):
    """Submit a call recording for processing"""
    metadata: CallMetadataCreate
    project_id: UUID = NIL_PROJECT_ID


class TaskResponse(BaseModel):
    """Task state"""
    id: UUID
    call_metadata_id: UUID
    status: TaskStatus
    failed_reason: Optional[str]
    project_id: UUID

    class Config:
        from_attributes = True
