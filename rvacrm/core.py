"""Fields and records shared by every part of the CRM."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(kw_only=True)
class BaseModel:
    """Identity and timestamps carried by every stored record."""

    id: uuid.UUID = uuid.UUID(int=0)
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(kw_only=True)
class Note(BaseModel):
    """A free-form note attached to any record."""

    note: str = ""
    note_type: str = ""
    note_author: str = ""
    note_date: datetime | None = None
    note_status: str = ""
    note_priority: str = ""
    note_category: str = ""
    note_tags: list[str] = field(default_factory=list)
    note_metadata: dict[str, Any] = field(default_factory=dict)