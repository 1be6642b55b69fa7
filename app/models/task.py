"""Task models"""

import uuid
from sqlalchemy import Column, Text, Boolean, Integer, ForeignKey, Enum, Uuid
import enum

from app.database import Base, enum_values

NIL_PROJECT_ID = uuid.UUID(int=0)

class TaskStatus(str, enum.Enum):
    """Processing state of a task"""
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"

class Task(Base):
    """One call recording's unit of processing"""
    __tablename__ = "task"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    call_metadata_id = Column(Uuid, ForeignKey("call_metadata.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        Enum(TaskStatus, name="task_result_status", values_callable=enum_values),
        nullable=False,
        default=TaskStatus.PROCESSING,
    )
    failed_reason = Column(Text)
    project_id = Column(Uuid, nullable=False, default=NIL_PROJECT_ID, index=True)

class TaskToDict(Base):
    """Whether a dictionary matched the transcript of a task"""
    __tablename__ = "task_to_dict"

    task_id = Column(Uuid, ForeignKey("task.id", ondelete="CASCADE"), primary_key=True)
    dictionary_id = Column(Integer, ForeignKey("dictionary.id", ondelete="CASCADE"), primary_key=True)
    contains = Column(Boolean, nullable=False)

    def __repr__(self):
        return f"<TaskToDict task_id={self.task_id} dictionary_id={self.dictionary_id} contains={self.contains}>"
