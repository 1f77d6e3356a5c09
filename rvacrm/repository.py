"""Repositories that keep customers, addresses and opportunities in SQL tables."""

from __future__ import annotations

import re
import uuid
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, TypeVar

from .customers import (
    Address,
    AddressType,
    Customer,
    CustomerStatus,
    CustomerType,
    Opportunity,
    OpportunityStage,
)

_NIL_UUID = uuid.UUID(int=0)
_PLACEHOLDER = re.compile(r"\$(\d+)")
_STYLES = {
    "qmark": lambda number: "?",
    "format": lambda number: "%s",
    "pyformat": lambda number: "%s",
    "numeric": lambda number: f":{number}",
}

_E = TypeVar("_E", bound=Enum)
_T = TypeVar("_T")

_CUSTOMER_COLUMNS = (
    "id, first_name, last_name, email, phone, company_name, job_title, "
    "status, customer_type, source, created_at, updated_at"
)
_ADDRESS_COLUMNS = (
    "id, customer_id, type, street1, street2, city, state, postal_code, "
    "country, is_default, created_at, updated_at"
)
_OPPORTUNITY_COLUMNS = (
    "id, customer_id, name, description, value, stage, probability, "
    "expected_close_date, actual_close_date, source, created_at, updated_at"
)


def _param(value: Any) -> Any:
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _read_uuid(value: Any, column: str) -> uuid.UUID:
    if value is None:
        return _NIL_UUID
    if isinstance(value, uuid.UUID):
        return value
    try:
        if isinstance(value, (bytes, bytearray)):
            if len(value) == 16:
                return uuid.UUID(bytes=bytes(value))
            value = bytes(value).decode()
        if isinstance(value, str):
            return uuid.UUID(value)
    except ValueError as exc:
        raise ValueError(f"column {column!r} holds an invalid UUID: {value!r}") from exc
    raise ValueError(f"column {column!r} holds {value!r}, not a UUID")


def _read_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode()
    return value if isinstance(value, str) else str(value)


def _read_enum(cls: type[_E], value: Any) -> _E | str:
    text = _read_text(value)
    try:
        return cls(text)
    except ValueError:
        return text


def _read_float(value: Any, column: str) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise ValueError(f"column {column!r} holds {value!r}, not a number")
    return float(value)


def _read_bool(value: Any, column: str) -> bool:
    if value is None:
        return False
    if isinstance(value, (bool, int)):
        return bool(value)
    raise ValueError(f"column {column!r} holds {value!r}, not a boolean")


def _read_time(value: Any, column: str) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        text = value[:-1] + "+00:00" if value.endswith("Z") else value
        try:
            return datetime.fromisoformat(text)
        except ValueError as exc:
            raise ValueError(f"column {column!r} holds an invalid timestamp: {value!r}") from exc
    raise ValueError(f"column {column!r} holds {value!r}, not a timestamp")


def _customer_from_row(row: Sequence[Any]) -> Customer:
    return Customer(
        id=_read_uuid(row[0], "id"),
        first_name=_read_text(row[1]),
        last_name=_read_text(row[2]),
        email=_read_text(row[3]),
        phone=_read_text(row[4]),
        company_name=_read_text(row[5]),
        job_title=_read_text(row[6]),
        status=_read_enum(CustomerStatus, row[7]),
        customer_type=_read_enum(CustomerType, row[8]),
        source=_read_text(row[9]),
        created_at=_read_time(row[10], "created_at"),
        updated_at=_read_time(row[11], "updated_at"),
    )


def _address_from_row(row: Sequence[Any]) -> Address:
    return Address(
        id=_read_uuid(row[0], "id"),
        customer_id=_read_uuid(row[1], "customer_id"),
        type=_read_enum(AddressType, row[2]),
        street1=_read_text(row[3]),
        street2=_read_text(row[4]),
        city=_read_text(row[5]),
        state=_read_text(row[6]),
        postal_code=_read_text(row[7]),
        country=_read_text(row[8]),
        is_default=_read_bool(row[9], "is_default"),
        created_at=_read_time(row[10], "created_at"),
        updated_at=_read_time(row[11], "updated_at"),
    )


def _opportunity_from_row(row: Sequence[Any]) -> Opportunity:
    return Opportunity(
        id=_read_uuid(row[0], "id"),
        customer_id=_read_uuid(row[1], "customer_id"),
        name=_read_text(row[2]),
        description=_read_text(row[3]),
        value=_read_float(row[4], "value"),
        stage=_read_enum(OpportunityStage, row[5]),
        probability=_read_float(row[6], "probability"),
        expected_close_date=_read_time(row[7], "expected_close_date"),
        actual_close_date=_read_time(row[8], "actual_close_date"),
        source=_read_text(row[9]),
        created_at=_read_time(row[10], "created_at"),
        updated_at=_read_time(row[11], "updated_at"),
    )


class _SqlRepository:
    """Runs statements on a DB-API connection, committing after each write."""

    def __init__(self, connection: Any, paramstyle: str = "qmark") -> None:
        if paramstyle not in _STYLES:
            raise ValueError(
                f"unsupported paramstyle {paramstyle!r}; expected one of {sorted(_STYLES)}"
            )
        self.connection = connection
        self.paramstyle = paramstyle

    def _sql(self, template: str) -> str:
        render = _STYLES[self.paramstyle]
        return _PLACEHOLDER.sub(lambda match: render(int(match.group(1))), template)

    def _run(self, template: str, params: Iterable[Any], *, fetch: bool, write: bool) -> list:
        cursor = self.connection.cursor()
        try:
            cursor.execute(self._sql(template), tuple(_param(value) for value in params))
            rows = list(cursor.fetchall()) if fetch else []
        except Exception:
            if write:
                self.connection.rollback()
            raise
        finally:
            cursor.close()
        if write:
            self.connection.commit()
        return rows

    def _query(self, template: str, *params: Any, write: bool = False) -> list:
        return self._run(template, params, fetch=True, write=write)

    def _execute(self, template: str, *params: Any) -> None:
        self._run(template, params, fetch=False, write=True)

    @staticmethod
    def _first(rows: list, convert: Callable[[Sequence[Any]], _T], empty: Callable[[], _T]) -> _T:
        return convert(rows[0]) if rows else empty()


class SqlCustomerRepository(_SqlRepository):
    """Customers kept in the ``customers`` table."""

    def get_customer_by_id(self, customer_id: uuid.UUID) -> Customer:
        """Return the customer, or an empty one when no row matches."""
        rows = self._query(f"SELECT {_CUSTOMER_COLUMNS} FROM customers WHERE id = $1", customer_id)
        return self._first(rows, _customer_from_row, Customer)

    def list_customers(self) -> list[Customer]:
        """Return every customer in table order."""
        rows = self._query(f"SELECT {_CUSTOMER_COLUMNS} FROM customers")
        return [_customer_from_row(row) for row in rows]

    def create_customer(self, customer: Customer) -> Customer:
        """Insert a customer and return the stored row."""
        rows = self._query(
            "INSERT INTO customers (id, first_name, last_name, email, phone, company_name, "
            "job_title, status, customer_type, source) "
            "VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10) "
            f"RETURNING {_CUSTOMER_COLUMNS}",
            customer.id,
            customer.first_name,
            customer.last_name,
            customer.email,
            customer.phone,
            customer.company_name,
            customer.job_title,
            customer.status,
            customer.customer_type,
            customer.source,
            write=True,
        )
        return self._first(rows, _customer_from_row, Customer)

    def update_customer(self, customer: Customer) -> Customer:
        """Update the customer with the same id; empty result when none matched."""
        rows = self._query(
            "UPDATE customers SET first_name = $1, last_name = $2, email = $3, phone = $4, "
            "company_name = $5, job_title = $6, status = $7, customer_type = $8, source = $9 "
            f"WHERE id = $10 RETURNING {_CUSTOMER_COLUMNS}",
            customer.first_name,
            customer.last_name,
            customer.email,
            customer.phone,
            customer.company_name,
            customer.job_title,
            customer.status,
            customer.customer_type,
            customer.source,
            customer.id,
            write=True,
        )
        return self._first(rows, _customer_from_row, Customer)

    def delete_customer(self, customer_id: uuid.UUID) -> None:
        """Delete the customer; deleting a missing one is not an error."""
        self._execute("DELETE FROM customers WHERE id = $1", customer_id)


class SqlAddressRepository(_SqlRepository):
    """Addresses kept in the ``addresses`` table."""

    def get_address_by_id(self, address_id: uuid.UUID) -> Address:
        """Return the address, or an empty one when no row matches."""
        rows = self._query(f"SELECT {_ADDRESS_COLUMNS} FROM addresses WHERE id = $1", address_id)
        return self._first(rows, _address_from_row, Address)

    def get_addresses_by_customer_id(self, customer_id: uuid.UUID) -> list[Address]:
        """Return the addresses that belong to one customer."""
        rows = self._query(
            f"SELECT {_ADDRESS_COLUMNS} FROM addresses WHERE customer_id = $1", customer_id
        )
        return [_address_from_row(row) for row in rows]

    def create_address(self, address: Address) -> Address:
        """Insert an address and return the stored row."""
        rows = self._query(
            "INSERT INTO addresses (id, customer_id, type, street1, street2, city, state, "
            "postal_code, country, is_default) "
            "VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10) "
            f"RETURNING {_ADDRESS_COLUMNS}",
            address.id,
            address.customer_id,
            address.type,
            address.street1,
            address.street2,
            address.city,
            address.state,
            address.postal_code,
            address.country,
            address.is_default,
            write=True,
        )
        return self._first(rows, _address_from_row, Address)

    def update_address(self, address: Address) -> Address:
        """Update the address with the same id; empty result when none matched."""
        rows = self._query(
            "UPDATE addresses SET customer_id = $1, type = $2, street1 = $3, street2 = $4, "
            "city = $5, state = $6, postal_code = $7, country = $8, is_default = $9 "
            f"WHERE id = $10 RETURNING {_ADDRESS_COLUMNS}",
            address.customer_id,
            address.type,
            address.street1,
            address.street2,
            address.city,
            address.state,
            address.postal_code,
            address.country,
            address.is_default,
            address.id,
            write=True,
        )
        return self._first(rows, _address_from_row, Address)

    def delete_address(self, address_id: uuid.UUID) -> None:
        """Delete the address; deleting a missing one is not an error."""
        self._execute("DELETE FROM addresses WHERE id = $1", address_id)


class SqlOpportunityRepository(_SqlRepository):
    """Opportunities kept in the ``opportunities`` table."""

    def get_opportunity_by_id(self, opportunity_id: uuid.UUID) -> Opportunity:
        """Return the opportunity, or an empty one when no row matches."""
        rows = self._query(
            f"SELECT {_OPPORTUNITY_COLUMNS} FROM opportunities WHERE id = $1", opportunity_id
        )
        return self._first(rows, _opportunity_from_row, Opportunity)

    def get_opportunities_by_customer_id(self, customer_id: uuid.UUID) -> list[Opportunity]:
        """Return the opportunities that belong to one customer."""
        rows = self._query(
            f"SELECT {_OPPORTUNITY_COLUMNS} FROM opportunities WHERE customer_id = $1",
            customer_id,
        )
        return [_opportunity_from_row(row) for row in rows]

    def create_opportunity(self, opportunity: Opportunity) -> Opportunity:
        """Insert an opportunity and return the stored row."""
        rows = self._query(
            "INSERT INTO opportunities (id, customer_id, name, description, value, stage, "
            "probability, expected_close_date, actual_close_date, source) "
            "VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10) "
            f"RETURNING {_OPPORTUNITY_COLUMNS}",
            opportunity.id,
            opportunity.customer_id,
            opportunity.name,
            opportunity.description,
            opportunity.value,
            opportunity.stage,
            opportunity.probability,
            opportunity.expected_close_date,
            opportunity.actual_close_date,
            opportunity.source,
            write=True,
        )
        return self._first(rows, _opportunity_from_row, Opportunity)

    def update_opportunity(self, opportunity: Opportunity) -> Opportunity:
        """Update the opportunity with the same id; empty result when none matched."""
        rows = self._query(
            "UPDATE opportunities SET customer_id = $1, name = $2, description = $3, "
            "value = $4, stage = $5, probability = $6, expected_close_date = $7, "
            "actual_close_date = $8, source = $9 "
            f"WHERE id = $10 RETURNING {_OPPORTUNITY_COLUMNS}",
            opportunity.customer_id,
            opportunity.name,
            opportunity.description,
            opportunity.value,
            opportunity.stage,
            opportunity.probability,
            opportunity.expected_close_date,
            opportunity.actual_close_date,
            opportunity.source,
            opportunity.id,
            write=True,
        )
        return self._first(rows, _opportunity_from_row, Opportunity)

    def delete_opportunity(self, opportunity_id: uuid.UUID) -> None:
        """Delete the opportunity; deleting a missing one is not an error."""
        self._execute("DELETE FROM opportunities WHERE id = $1", opportunity_id)