"""Call metadata model"""

import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Float, BigInteger, Enum, Uuid

from app.database import Base, enum_values
from app.schemas.recognition import ParticipantKind

participant_type = Enum(
    ParticipantKind,
    name="participant_type",
    values_callable=enum_values,
)


class CallMetadata(Base):
    """Facts about an uploaded call recording"""
    __tablename__ = "call_metadata"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    call_id = Column(BigInteger, nullable=False, index=True)

    performed_at = Column(DateTime(timezone=True), nullable=False)
    uploaded_at = Column(DateTime(timezone=True), nullable=False)

    # Recording file
    file_hash = Column(String, unique=True, nullable=False)
    file_url = Column(String, nullable=False)
    file_name = Column(String, nullable=False)
    duration = Column(Float, nullable=False)

    # Which physical channel carries which participant
    left_channel = Column(participant_type, nullable=False)
    right_channel = Column(participant_type, nullable=False)

    client_name = Column(String, nullable=False)
    employee_name = Column(String, nullable=False)
    inbound = Column(Boolean, nullable=False)

    @property
    def operator_channel(self) -> str:
        """Physical channel of the employee: "L" or "R" """
        return "L" if self.left_channel == ParticipantKind.EMPLOYEE else "R"
