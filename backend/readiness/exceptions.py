"""Domain errors raised by the service layer.

Routes translate these into HTTP responses; services never raise
``HTTPException`` themselves.
"""


class ReadinessError(Exception):
    """Base class for service-layer errors."""


class SessionNotFoundError(ReadinessError):
    def __init__(self, session_id):
        super().__init__(f"Session {session_id} not found")
        self.session_id = session_id


class TaskNotFoundError(ReadinessError):
    def __init__(self, session_id, task_id):
        super().__init__(f"Task {task_id} not found in session {session_id}")
        self.session_id = session_id
        self.task_id = task_id


class DuplicateTaskError(ReadinessError):
    def __init__(self, session_id, task_id):
        super().__init__(f"Task {task_id} already exists in session {session_id}")
        self.session_id = session_id
        self.task_id = task_id
