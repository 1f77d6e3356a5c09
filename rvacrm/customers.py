"""Customers, their addresses, opportunities, segments and leads."""

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, TypeVar

from .core import BaseModel

_NIL_UUID = uuid.UUID(int=0)
_TIME_RE = re.compile(
    r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d{1,9}))?(Z|[+-]\d{2}:\d{2})"
)

_E = TypeVar("_E", bound=Enum)


class CustomerStatus(str, Enum):
    """Whether a customer may do business."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"


class CustomerType(str, Enum):
    """Where a customer stands in the sales cycle."""

    PROSPECT = "prospect"
    LEAD = "lead"
    ACTIVE = "active"
    CHURNED = "churned"


class AddressType(str, Enum):
    """What an address is used for."""

    BILLING = "billing"
    SHIPPING = "shipping"


class OpportunityStage(str, Enum):
    """Stages of a deal."""

    PROSPECTING = "prospecting"
    QUALIFIED = "qualified"
    PROPOSAL = "proposal"
    NEGOTIATION = "negotiation"
    CLOSED = "closed"
    LOST = "lost"


class OpportunityProduct(str, Enum):
    """Products an opportunity may involve."""

    SERVICE = "service - recurring"
    ONE_TIME = "service - one-time"
    TAX_STRATEGY = "tax strategy"
    DUE_DILIGENCE = "due diligence"
    ENTITY_FORMATION = "entity formation"
    OTHER = "other"


class LeadStatus(str, Enum):
    """Progress of a lead."""

    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    LOST = "lost"
    WON = "won"


def _keys(data: Any) -> dict[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")
    return {str(key).lower(): value for key, value in data.items()}


def _string(value: Any, name: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {name!r} must be a string, got {value!r}")
    return value


def _number(value: Any, name: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"field {name!r} must be a number, got {value!r}")
    return float(value)


def _boolean(value: Any, name: str) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"field {name!r} must be a boolean, got {value!r}")
    return value


def _uuid(value: Any, name: str) -> uuid.UUID:
    if value is None:
        return _NIL_UUID
    if not isinstance(value, str):
        raise ValueError(f"field {name!r} must be a UUID string, got {value!r}")
    try:
        return uuid.UUID(value)
    except ValueError as exc:
        raise ValueError(f"field {name!r} is not a valid UUID: {value!r}") from exc


def _enum(cls: type[_E], value: Any, name: str) -> _E | str:
    text = _string(value, name)
    try:
        return cls(text)
    except ValueError:
        return text


def _strings(value: Any, name: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"field {name!r} must be a list, got {value!r}")
    return [_string(item, name) for item in value]


def _object(value: Any, name: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ValueError(f"field {name!r} must be an object, got {value!r}")
    return dict(value)


def _parse_time(value: Any, name: str) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"field {name!r} must be a timestamp string, got {value!r}")
    match = _TIME_RE.fullmatch(value)
    if match is None:
        raise ValueError(f"field {name!r} is not an RFC 3339 timestamp: {value!r}")
    year, month, day, hour, minute, second = (int(part) for part in match.groups()[:6])
    fraction, zone = match.group(7), match.group(8)
    microsecond = int((fraction or "")[:6].ljust(6, "0"))
    try:
        if zone == "Z":
            tz = timezone.utc
        else:
            sign = -1 if zone[0] == "-" else 1
            tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
        return datetime(year, month, day, hour, minute, second, microsecond, tzinfo=tz)
    except ValueError as exc:
        raise ValueError(f"field {name!r} is not a valid timestamp: {value!r}") from exc


def _format_time(moment: datetime | None) -> str | None:
    if moment is None:
        return None
    text = (
        f"{moment.year:04d}-{moment.month:02d}-{moment.day:02d}"
        f"T{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"
    )
    if moment.microsecond:
        text += "." + f"{moment.microsecond:06d}".rstrip("0")
    offset = moment.utcoffset()
    if not offset:
        return text + "Z"
    total = int(offset.total_seconds())
    sign = "+" if total >= 0 else "-"
    hours, rest = divmod(abs(total), 3600)
    return f"{text}{sign}{hours:02d}:{rest // 60:02d}"


def _text(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _base_to_dict(model: BaseModel) -> dict[str, Any]:
    return {
        "ID": str(model.id),
        "CreatedAt": _format_time(model.created_at),
        "UpdatedAt": _format_time(model.updated_at),
    }


def _base_from_fields(fields: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": _uuid(fields.get("id"), "ID"),
        "created_at": _parse_time(fields.get("createdat"), "CreatedAt"),
        "updated_at": _parse_time(fields.get("updatedat"), "UpdatedAt"),
    }


@dataclass(kw_only=True)
class Address(BaseModel):
    """A postal address belonging to a customer."""

    customer_id: uuid.UUID = _NIL_UUID
    type: AddressType | str = ""
    street1: str = ""
    street2: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""
    country: str = ""
    is_default: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form of this address."""
        return {
            **_base_to_dict(self),
            "customer_id": str(self.customer_id),
            "type": _text(self.type),
            "street1": self.street1,
            "street2": self.street2,
            "city": self.city,
            "state": self.state,
            "postal_code": self.postal_code,
            "country": self.country,
            "is_default": self.is_default,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Address:
        """Build an address from its JSON object form; keys match case-insensitively."""
        fields = _keys(data)
        return cls(
            **_base_from_fields(fields),
            customer_id=_uuid(fields.get("customer_id"), "customer_id"),
            type=_enum(AddressType, fields.get("type"), "type"),
            street1=_string(fields.get("street1"), "street1"),
            street2=_string(fields.get("street2"), "street2"),
            city=_string(fields.get("city"), "city"),
            state=_string(fields.get("state"), "state"),
            postal_code=_string(fields.get("postal_code"), "postal_code"),
            country=_string(fields.get("country"), "country"),
            is_default=_boolean(fields.get("is_default"), "is_default"),
        )


@dataclass(kw_only=True)
class Customer(BaseModel):
    """A person or company the business works with."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    company_name: str = ""
    job_title: str = ""
    status: CustomerStatus | str = ""
    customer_type: CustomerType | str = ""
    source: str = ""  # how they found us
    addresses: list[Address] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    custom_fields: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form of this customer."""
        return {
            **_base_to_dict(self),
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "phone": self.phone,
            "company_name": self.company_name,
            "job_title": self.job_title,
            "status": _text(self.status),
            "customer_type": _text(self.customer_type),
            "source": self.source,
            "addresses": [address.to_dict() for address in self.addresses],
            "tags": list(self.tags),
            "custom_fields": dict(self.custom_fields),
        }

    @classmethod
    def from_dict(cls, data: Any) -> Customer:
        """Build a customer from its JSON object form; keys match case-insensitively."""
        fields = _keys(data)
        addresses = fields.get("addresses")
        if addresses is not None and not isinstance(addresses, list):
            raise ValueError(f"field 'addresses' must be a list, got {addresses!r}")
        return cls(
            **_base_from_fields(fields),
            first_name=_string(fields.get("first_name"), "first_name"),
            last_name=_string(fields.get("last_name"), "last_name"),
            email=_string(fields.get("email"), "email"),
            phone=_string(fields.get("phone"), "phone"),
            company_name=_string(fields.get("company_name"), "company_name"),
            job_title=_string(fields.get("job_title"), "job_title"),
            status=_enum(CustomerStatus, fields.get("status"), "status"),
            customer_type=_enum(CustomerType, fields.get("customer_type"), "customer_type"),
            source=_string(fields.get("source"), "source"),
            addresses=[Address.from_dict(item) for item in addresses or []],
            tags=_strings(fields.get("tags"), "tags"),
            custom_fields=_object(fields.get("custom_fields"), "custom_fields"),
        )


@dataclass(kw_only=True)
class CustomerSegment(BaseModel):
    """A named group of customers chosen by criteria."""

    name: str = ""
    description: str = ""
    criteria: dict[str, Any] = field(default_factory=dict)


@dataclass(kw_only=True)
class Opportunity(BaseModel):
    """A potential deal, engagement or project with a customer."""

    customer_id: uuid.UUID = _NIL_UUID
    name: str = ""
    description: str = ""
    value: float = 0.0
    stage: OpportunityStage | str = ""
    probability: float = 0.0
    expected_close_date: datetime | None = None
    actual_close_date: datetime | None = None
    source: str = ""
    products: list[OpportunityProduct | str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON object form of this opportunity."""
        return {
            **_base_to_dict(self),
            "customer_id": str(self.customer_id),
            "name": self.name,
            "description": self.description,
            "value": self.value,
            "stage": _text(self.stage),
            "probability": self.probability,
            "expected_close_date": _format_time(self.expected_close_date),
            "actual_close_date": _format_time(self.actual_close_date),
            "source": self.source,
            "products": [_text(product) for product in self.products],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Opportunity:
        """Build an opportunity from its JSON object form; keys match case-insensitively."""
        fields = _keys(data)
        return cls(
            **_base_from_fields(fields),
            customer_id=_uuid(fields.get("customer_id"), "customer_id"),
            name=_string(fields.get("name"), "name"),
            description=_string(fields.get("description"), "description"),
            value=_number(fields.get("value"), "value"),
            stage=_enum(OpportunityStage, fields.get("stage"), "stage"),
            probability=_number(fields.get("probability"), "probability"),
            expected_close_date=_parse_time(
                fields.get("expected_close_date"), "expected_close_date"
            ),
            actual_close_date=_parse_time(fields.get("actual_close_date"), "actual_close_date"),
            source=_string(fields.get("source"), "source"),
            products=[
                _enum(OpportunityProduct, item, "products")
                for item in _strings(fields.get("products"), "products")
            ],
        )


@dataclass(kw_only=True)
class Lead(BaseModel):
    """A prospective customer who has not yet been qualified."""

    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    company: str = ""
    source: str = ""
    status: LeadStatus | str = ""
    score: int = 0
    assigned_to: uuid.UUID = _NIL_UUID
    customer_id: uuid.UUID = _NIL_UUID