"""Persistence of tasks and processing outcomes"""

from app.store.base import FileAlreadyExists, MetricsStore, TaskNotFound
from app.store.sql import SqlMetricsStore

__all__ = ["FileAlreadyExists", "MetricsStore", "TaskNotFound", "SqlMetricsStore"]
