"""People at customer organisations."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .core import BaseModel


class Role(str, Enum):
    """The part a contact plays."""

    ADMIN = "executive"
    MANAGER = "manager"
    SALES = "sales"
    MISC = "misc"


@dataclass(kw_only=True)
class Contact(BaseModel):
    """A person to get in touch with."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    job_title: str = ""


@dataclass(kw_only=True)
class Address:
    """A contact's postal address."""

    street: str = ""
    street2: str = ""
    city: str = ""
    state: str = ""
    zip: str = ""
    country: str = ""