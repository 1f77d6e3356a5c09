"""Activities such as calls, meetings and tasks."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from .core import BaseModel


class ActivityType(str, Enum):
    """Kinds of activity."""

    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    TASK = "task"
    NOTE = "note"
    OTHER = "other"


class ActivityStatus(str, Enum):
    """States an activity can be in."""

    PENDING = "pending"
    POSTPONED = "postponed"
    RESCHEDULED = "rescheduled"
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    DEFERRED = "deferred"
    CANCELLED = "cancelled"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"
    AWAITING_APPROVAL = "awaiting_approval"
    AWAITING_PAYMENT = "awaiting_payment"


@dataclass(kw_only=True)
class Activity(BaseModel):
    """Something that was done, or is to be done, for a customer."""

    activity_type: str = ""
    activity_description: str = ""
    activity_date: datetime | None = None
    activity_status: str = ""
    activity_priority: str = ""
    activity_category: str = ""
    activity_tags: list[str] = field(default_factory=list)
    activity_metadata: dict[str, Any] = field(default_factory=dict)