"""Database models"""

from app.models.call import CallMetadata
from app.models.task import Task, TaskStatus, TaskToDict, NIL_PROJECT_ID
from app.models.dictionary import Dictionary, Phrase
from app.models.settings import Settings, SettingsItem, SettingsDictItem, SettingsKind, SettingsItemKind
from app.models.metrics import CallMetrics

__all__ = [
    "CallMetadata",
    "Task",
    "TaskStatus",
    "TaskToDict",
    "NIL_PROJECT_ID",
    "Dictionary",
    "Phrase",
    "Settings",
    "SettingsItem",
    "SettingsDictItem",
    "SettingsKind",
    "SettingsItemKind",
    "CallMetrics",
]
