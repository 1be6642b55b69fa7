"""Per-task call metrics model"""

from sqlalchemy import Column, Float, Integer, ForeignKey, Enum, Uuid

from app.database import Base, enum_values
from app.schemas.recognition import EmotionKind

emotion_type = Enum(EmotionKind, name="call_metrics_emotion_type", values_callable=enum_values)

class CallMetrics(Base):
    """Behavioral metrics and rubric scores of a processed call"""
    __tablename__ = "task_call_metrics"

    task_id = Column(Uuid, ForeignKey("task.id", ondelete="CASCADE"), primary_key=True)
    call_duration = Column(Float, nullable=False)
    time_to_answer = Column(Float, nullable=False)

    total_employee_speech = Column(Float, nullable=False)
    total_client_speech = Column(Float, nullable=False)

    # Percentages
    employee_client_speech_ratio = Column(Float, nullable=False)
    employee_speech_ratio = Column(Float, nullable=False)
    client_speech_ratio = Column(Float, nullable=False)

    call_holds_count = Column(Integer, nullable=False)

    silence_pause_count = Column(Integer, nullable=False)
    total_employee_silence = Column(Float, nullable=False)

    client_interruptions_count = Column(Integer, nullable=False)
    total_client_interruptions_duration = Column(Float, nullable=False)

    avg_employee_words_per_min = Column(Float, nullable=False)
    avg_client_words_per_min = Column(Float, nullable=False)

    # Rubric totals, written once per row
    script_score = Column(Integer, nullable=False, default=0, index=True)
    employee_quality_score = Column(Integer, nullable=False, default=0, index=True)

    emotion_mode = Column(emotion_type)
    emotion_start_mode = Column(emotion_type)
    emotion_end_mode = Column(emotion_type)
