from __future__ import annotations

from sqlalchemy import JSON, Column, Integer, String, Text

from .db import Base


class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(Text, primary_key=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    is_completed = Column("isCompleted", Integer, nullable=False, default=0)
    due_date = Column("dueDate", Text, nullable=True)
    priority = Column(Integer, nullable=True)


class PreferenceModel(Base):
    __tablename__ = "preferences"

    key = Column(String(64), primary_key=True)
    value = Column(JSON, nullable=False)
