"""Projects and the tasks that make them up."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .core import BaseModel


@dataclass(kw_only=True)
class Project(BaseModel):
    """A piece of work carried out for a customer."""

    project_name: str = ""
    project_description: str = ""
    project_status: str = ""
    project_start_date: datetime | None = None
    project_end_date: datetime | None = None
    project_budget: float = 0.0
    project_progress: float = 0.0
    project_notes: str = ""
    project_tasks: list[ProjectTask] = field(default_factory=list)


@dataclass(kw_only=True)
class ProjectTask(BaseModel):
    """One task within a project."""

    project: Project = field(default_factory=Project)
    task_name: str = ""
    task_description: str = ""
    task_status: str = ""
    task_start_date: datetime | None = None
    task_end_date: datetime | None = None
    assignee: str = ""
    task_type: str = ""
    task_priority: str = ""