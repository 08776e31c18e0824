"""
Request records: one per tool call, built from validated arguments, passed
once to a script template and then discarded.
"""

from dataclasses import dataclass, field
from typing import List, Optional


class _Unset:
    """Marks an update field that was not sent (as opposed to sent as null)."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "UNSET"

    def __bool__(self):
        return False


UNSET = _Unset()

PROJECT_TYPES = ("parallel", "sequential")


@dataclass(frozen=True)
class TaskQuery:
    project: Optional[str] = None
    tag: Optional[str] = None
    flagged_only: bool = False


@dataclass(frozen=True)
class CompletedTaskQuery:
    since: str  # UTC ISO string
    project: Optional[str] = None
    tag: Optional[str] = None


@dataclass(frozen=True)
class CompleteTaskRequest:
    """Either task_id, or task_name together with project."""
    task_id: Optional[str] = None
    task_name: Optional[str] = None
    project: Optional[str] = None

    @property
    def by_id(self) -> bool:
        return bool(self.task_id)


@dataclass(frozen=True)
class AddTaskRequest:
    name: str
    project: Optional[str] = None
    note: Optional[str] = None
    due_date: Optional[str] = None  # UTC ISO string
    tags: List[str] = field(default_factory=list)
    flagged: Optional[bool] = None


@dataclass(frozen=True)
class UpdateTaskRequest:
    """
    Partial update. UNSET leaves a field untouched; None clears due_date,
    defer_date or note. tags, when set, replaces the whole tag set.
    """
    task_id: str
    name: object = UNSET
    due_date: object = UNSET
    defer_date: object = UNSET
    flagged: object = UNSET
    note: object = UNSET
    tags: object = UNSET

    UPDATABLE = ("name", "due_date", "defer_date", "flagged", "note", "tags")

    def has_changes(self) -> bool:
        return any(getattr(self, f) is not UNSET for f in self.UPDATABLE)


@dataclass(frozen=True)
class CreateProjectRequest:
    name: str
    type: str = "parallel"
    folder: Optional[str] = None

    @property
    def sequential(self) -> bool:
        return self.type == "sequential"
