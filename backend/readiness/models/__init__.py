from .assessment import AssessmentSession, Task, TaskScoreRecord

__all__ = ["AssessmentSession", "Task", "TaskScoreRecord"]
