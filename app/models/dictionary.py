"""Keyword dictionary models"""

from sqlalchemy import Column, String, Integer, BigInteger, ForeignKey

from app.database import Base
from app.models.call import participant_type


class Dictionary(Base):
    """Named phrase list bound to one participant channel"""
    __tablename__ = "dictionary"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    participant = Column(participant_type, nullable=False)


class Phrase(Base):
    """Phrase of a dictionary, matched case-insensitively"""
    __tablename__ = "phrase"

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    dictionary_id = Column(Integer, ForeignKey("dictionary.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(String, nullable=False)
