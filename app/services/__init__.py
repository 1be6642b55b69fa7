"""Application services"""

from app.services.tasks import TaskAlreadyProcessing, reprocess_task, submit_task

__all__ = ["TaskAlreadyProcessing", "reprocess_task", "submit_task"]
