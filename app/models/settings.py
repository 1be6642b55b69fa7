"""Scoring rubric models"""

import uuid
from sqlalchemy import Column, String, Boolean, Integer, ForeignKey, Enum, Uuid
import enum

from app.database import Base, enum_values

class SettingsKind(str, enum.Enum):
    """Scoring category"""
    QUALITY = "quality"
    SCRIPT = "script"

class SettingsItemKind(str, enum.Enum):
    """Rule kind of a scoring item"""
    # Metric thresholds
    SPEECH_RATE_RATIO = "speech_rate_ratio"
    CALL_HOLDS = "call_holds"
    SILENCE_PAUSES = "silence_pauses"
    INTERRUPTIONS = "interruptions"

    # Dictionary-bound
    LACKING_INFO_DICT = "lacking_info_dict"
    FILLER_WORDS_DICT = "filler_words_dict"
    SLURRED_SPEECH_DICT = "slurred_speech_dict"
    PROFANITY_SPEECH_DICT = "profanity_speech_dict"
    DICTIONARY = "dictionary"

class Settings(Base):
    """Scoring category of a project"""
    __tablename__ = "settings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    project_id = Column(Uuid, nullable=False, index=True)
    type = Column(Enum(SettingsKind, name="settings_type", values_callable=enum_values), nullable=False)

class SettingsItem(Base):
    """Weighted rule of a scoring category"""
    __tablename__ = "settings_item"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    settings_id = Column(Uuid, ForeignKey("settings.id", ondelete="CASCADE"), nullable=False, index=True)
    settings_immutable = Column(Boolean, nullable=False, default=False)
    type = Column(Enum(SettingsItemKind, name="settings_item_type", values_callable=enum_values), nullable=False)
    name = Column(String, nullable=False)
    score_weight = Column(Integer, nullable=False)

class SettingsDictItem(Base):
    """Binds a rule to a dictionary with presence (contains) or absence polarity"""
    __tablename__ = "settings_dict_item"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    settings_item_id = Column(Uuid, ForeignKey("settings_item.id", ondelete="CASCADE"), nullable=False, index=True)
    dictionary_id = Column(Integer, ForeignKey("dictionary.id", ondelete="CASCADE"), nullable=False, index=True)
    contains = Column(Boolean, nullable=False, default=True)
