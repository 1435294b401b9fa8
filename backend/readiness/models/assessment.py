import uuid
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    ForeignKeyConstraint,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator, CHAR

from ..database import Base


class GUID(TypeDecorator):
    """Platform-independent UUID type.

    Uses CHAR(36) to store UUIDs as strings, compatible with all backends
    including SQLite.
    """

    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is not None:
            return str(value)
        return value

    def process_result_value(self, value, dialect):
        if value is not None:
            return uuid.UUID(value)
        return value


class AssessmentSession(Base):
    __tablename__ = "assessment_sessions"

    id = Column(GUID(), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    token = Column(String(36), nullable=False, default=lambda: str(uuid.uuid4()))

    # Scoring settings. NULL weights means "use DEFAULT_WEIGHTS".
    weights_json = Column(Text, nullable=True, default=None)
    hourly_rate = Column(Float, nullable=True, default=None)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    tasks = relationship(
        "Task",
        back_populates="session",
        cascade="all, delete-orphan",
        order_by="Task.position",
    )


class Task(Base):
    __tablename__ = "tasks"

    # Task ids are client-supplied, so they are only unique per session
    session_id = Column(
        GUID(),
        ForeignKey("assessment_sessions.id", ondelete="CASCADE"),
        primary_key=True,
    )
    id = Column(String(64), primary_key=True)
    position = Column(Integer, nullable=False, default=0)

    name = Column(String(255), nullable=False)
    department = Column(String(255), nullable=False, default="Other")
    description = Column(Text, nullable=False, default="")
    frequency = Column(String(32), nullable=False)
    time_per_task = Column(Integer, nullable=False)
    inputs_json = Column(Text, nullable=False, default="[]")
    outputs_json = Column(Text, nullable=False, default="[]")

    created_at = Column(DateTime, default=datetime.utcnow)

    session = relationship("AssessmentSession", back_populates="tasks")
    score = relationship(
        "TaskScoreRecord",
        back_populates="task",
        uselist=False,
        cascade="all, delete-orphan",
    )


class TaskScoreRecord(Base):
    __tablename__ = "task_scores"
    __table_args__ = (
        ForeignKeyConstraint(
            ["session_id", "task_id"],
            ["tasks.session_id", "tasks.id"],
            ondelete="CASCADE",
        ),
    )

    session_id = Column(GUID(), primary_key=True)
    task_id = Column(String(64), primary_key=True)

    criteria_json = Column(Text, nullable=False)  # JSON string (compatible with SQLite & PG)
    final_score = Column(Integer, nullable=False)
    category = Column(String(32), nullable=False)
    reasoning = Column(Text, nullable=False, default="")
    automation_advice = Column(Text, nullable=False, default="")
    suggested_tools_json = Column(Text, nullable=False, default="[]")

    # Set when the enrichment fields were last overwritten (AI or manual)
    enhanced_at = Column(DateTime, nullable=True, default=None)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    task = relationship("Task", back_populates="score")
