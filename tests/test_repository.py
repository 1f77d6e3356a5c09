import sqlite3
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from rvacrm.customers import (
    Address,
    AddressType,
    Customer,
    CustomerStatus,
    CustomerType,
    Opportunity,
    OpportunityStage,
)
from rvacrm.repository import (
    SqlAddressRepository,
    SqlCustomerRepository,
    SqlOpportunityRepository,
)

SCHEMA = """
CREATE TABLE customers (
    id TEXT PRIMARY KEY, first_name TEXT, last_name TEXT, email TEXT, phone TEXT,
    company_name TEXT, job_title TEXT, status TEXT, customer_type TEXT, source TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP, updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE addresses (
    id TEXT PRIMARY KEY, customer_id TEXT, type TEXT, street1 TEXT, street2 TEXT,
    city TEXT, state TEXT, postal_code TEXT, country TEXT, is_default INTEGER,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP, updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
CREATE TABLE opportunities (
    id TEXT PRIMARY KEY, customer_id TEXT, name TEXT, description TEXT, value REAL,
    stage TEXT, probability REAL, expected_close_date TEXT, actual_close_date TEXT,
    source TEXT,
    created_at TEXT DEFAULT CURRENT_TIMESTAMP, updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""


@pytest.fixture
def connection():
    conn = sqlite3.connect(":memory:")
    conn.executescript(SCHEMA)
    yield conn
    conn.close()


def _customer(**overrides):
    values = dict(
        id=uuid.uuid4(),
        first_name="Luke",
        last_name="Skywalker",
        email="luke@example.com",
        phone="555-0100",
        company_name="Rebel Alliance",
        job_title="Pilot",
        status=CustomerStatus.ACTIVE,
        customer_type=CustomerType.LEAD,
        source="referral",
    )
    values.update(overrides)
    return Customer(**values)


def _address(customer_id, **overrides):
    values = dict(
        id=uuid.uuid4(),
        customer_id=customer_id,
        type=AddressType.BILLING,
        street1="1 Main St",
        street2="Suite 2",
        city="Richmond",
        state="VA",
        postal_code="23219",
        country="US",
        is_default=True,
    )
    values.update(overrides)
    return Address(**values)


def _opportunity(customer_id, **overrides):
    values = dict(
        id=uuid.uuid4(),
        customer_id=customer_id,
        name="Tax plan",
        description="Annual tax strategy",
        value=12500.5,
        stage=OpportunityStage.PROPOSAL,
        probability=0.6,
        expected_close_date=datetime(2025, 3, 1, 9, 30, tzinfo=timezone.utc),
        actual_close_date=datetime(2025, 3, 2, 10, 0, tzinfo=timezone(timedelta(hours=-5))),
        source="web",
    )
    values.update(overrides)
    return Opportunity(**values)


def test_create_customer_returns_stored_row(connection):
    repo = SqlCustomerRepository(connection)
    customer = _customer()
    created = repo.create_customer(customer)
    assert created.id == customer.id
    assert created.first_name == "Luke"
    assert created.email == "luke@example.com"
    assert created.status is CustomerStatus.ACTIVE
    assert created.customer_type is CustomerType.LEAD
    assert isinstance(created.created_at, datetime)


def test_get_customer_round_trip(connection):
    repo = SqlCustomerRepository(connection)
    customer = _customer()
    created = repo.create_customer(customer)
    fetched = repo.get_customer_by_id(customer.id)
    assert fetched == created


def test_get_missing_customer_returns_empty(connection):
    repo = SqlCustomerRepository(connection)
    assert repo.get_customer_by_id(uuid.uuid4()) == Customer()


def test_list_customers(connection):
    repo = SqlCustomerRepository(connection)
    assert repo.list_customers() == []
    first, second = _customer(), _customer(first_name="Leia")
    repo.create_customer(first)
    repo.create_customer(second)
    listed = repo.list_customers()
    assert {c.id for c in listed} == {first.id, second.id}
    assert {c.first_name for c in listed} == {"Luke", "Leia"}


def test_unknown_status_stays_text(connection):
    repo = SqlCustomerRepository(connection)
    created = repo.create_customer(_customer(status="vip"))
    assert created.status == "vip"
    assert not isinstance(created.status, CustomerStatus)


def test_update_customer(connection):
    repo = SqlCustomerRepository(connection)
    customer = _customer()
    repo.create_customer(customer)
    customer.last_name = "Organa"
    customer.status = CustomerStatus.BLOCKED
    updated = repo.update_customer(customer)
    assert updated.last_name == "Organa"
    assert updated.status is CustomerStatus.BLOCKED
    assert repo.get_customer_by_id(customer.id).last_name == "Organa"


def test_update_missing_customer_returns_empty(connection):
    repo = SqlCustomerRepository(connection)
    assert repo.update_customer(_customer()) == Customer()
    assert repo.list_customers() == []


def test_delete_customer(connection):
    repo = SqlCustomerRepository(connection)
    keep, drop = _customer(), _customer()
    repo.create_customer(keep)
    repo.create_customer(drop)
    repo.delete_customer(drop.id)
    repo.delete_customer(uuid.uuid4())
    assert [c.id for c in repo.list_customers()] == [keep.id]


def test_duplicate_id_raises_database_error(connection):
    repo = SqlCustomerRepository(connection)
    customer = _customer()
    repo.create_customer(customer)
    with pytest.raises(sqlite3.IntegrityError):
        repo.create_customer(customer)
    assert len(repo.list_customers()) == 1


def test_missing_table_raises(connection):
    connection.execute("DROP TABLE customers")
    repo = SqlCustomerRepository(connection)
    with pytest.raises(sqlite3.OperationalError):
        repo.list_customers()


def test_invalid_uuid_in_row_raises(connection):
    connection.execute("INSERT INTO customers (id, first_name) VALUES ('not-a-uuid', 'X')")
    repo = SqlCustomerRepository(connection)
    with pytest.raises(ValueError):
        repo.list_customers()


def test_unsupported_paramstyle_rejected(connection):
    with pytest.raises(ValueError):
        SqlCustomerRepository(connection, paramstyle="named")


class _RecordingCursor:
    def __init__(self, log):
        self.log = log

    def execute(self, sql, params):
        self.log.append((sql, params))

    def fetchall(self):
        return []

    def close(self):
        pass


class _RecordingConnection:
    def __init__(self):
        self.log = []
        self.commits = 0

    def cursor(self):
        return _RecordingCursor(self.log)

    def commit(self):
        self.commits += 1

    def rollback(self):
        pass


def test_format_paramstyle_renders_placeholders():
    conn = _RecordingConnection()
    repo = SqlCustomerRepository(conn, paramstyle="format")
    customer_id = uuid.uuid4()
    assert repo.get_customer_by_id(customer_id) == Customer()
    sql, params = conn.log[0]
    assert sql.endswith("WHERE id = %s")
    assert params == (str(customer_id),)
    assert conn.commits == 0


def test_numeric_paramstyle_and_commit_on_delete():
    conn = _RecordingConnection()
    repo = SqlAddressRepository(conn, paramstyle="numeric")
    address_id = uuid.uuid4()
    repo.delete_address(address_id)
    sql, params = conn.log[0]
    assert sql == "DELETE FROM addresses WHERE id = :1"
    assert params == (str(address_id),)
    assert conn.commits == 1


def test_address_round_trip(connection):
    repo = SqlAddressRepository(connection)
    address = _address(uuid.uuid4())
    created = repo.create_address(address)
    assert created.id == address.id
    assert created.customer_id == address.customer_id
    assert created.type is AddressType.BILLING
    assert created.is_default is True
    assert created.postal_code == "23219"
    assert repo.get_address_by_id(address.id) == created


def test_get_missing_address_returns_empty(connection):
    repo = SqlAddressRepository(connection)
    assert repo.get_address_by_id(uuid.uuid4()) == Address()


def test_addresses_by_customer(connection):
    repo = SqlAddressRepository(connection)
    owner, other = uuid.uuid4(), uuid.uuid4()
    a = repo.create_address(_address(owner))
    b = repo.create_address(_address(owner, type=AddressType.SHIPPING, is_default=False))
    repo.create_address(_address(other))
    found = repo.get_addresses_by_customer_id(owner)
    assert {x.id for x in found} == {a.id, b.id}
    assert all(x.customer_id == owner for x in found)
    assert repo.get_addresses_by_customer_id(uuid.uuid4()) == []


def test_update_address(connection):
    repo = SqlAddressRepository(connection)
    address = _address(uuid.uuid4())
    repo.create_address(address)
    address.city = "Norfolk"
    address.is_default = False
    updated = repo.update_address(address)
    assert updated.city == "Norfolk"
    assert updated.is_default is False
    assert repo.get_address_by_id(address.id).city == "Norfolk"


def test_delete_address(connection):
    repo = SqlAddressRepository(connection)
    owner = uuid.uuid4()
    address = repo.create_address(_address(owner))
    repo.delete_address(address.id)
    assert repo.get_addresses_by_customer_id(owner) == []


def test_opportunity_round_trip(connection):
    repo = SqlOpportunityRepository(connection)
    opportunity = _opportunity(uuid.uuid4())
    created = repo.create_opportunity(opportunity)
    assert created.id == opportunity.id
    assert created.value == opportunity.value
    assert created.probability == opportunity.probability
    assert created.stage is OpportunityStage.PROPOSAL
    assert created.expected_close_date == opportunity.expected_close_date
    assert created.actual_close_date == opportunity.actual_close_date
    assert repo.get_opportunity_by_id(opportunity.id) == created


def test_opportunity_without_dates(connection):
    repo = SqlOpportunityRepository(connection)
    created = repo.create_opportunity(
        _opportunity(uuid.uuid4(), expected_close_date=None, actual_close_date=None)
    )
    assert created.expected_close_date is None
    assert created.actual_close_date is None


def test_get_missing_opportunity_returns_empty(connection):
    repo = SqlOpportunityRepository(connection)
    assert repo.get_opportunity_by_id(uuid.uuid4()) == Opportunity()


def test_opportunities_by_customer(connection):
    repo = SqlOpportunityRepository(connection)
    owner = uuid.uuid4()
    first = repo.create_opportunity(_opportunity(owner))
    second = repo.create_opportunity(_opportunity(owner, name="Due diligence"))
    repo.create_opportunity(_opportunity(uuid.uuid4()))
    found = repo.get_opportunities_by_customer_id(owner)
    assert {x.id for x in found} == {first.id, second.id}


def test_update_and_delete_opportunity(connection):
    repo = SqlOpportunityRepository(connection)
    opportunity = _opportunity(uuid.uuid4())
    repo.create_opportunity(opportunity)
    opportunity.stage = OpportunityStage.CLOSED
    opportunity.value = 20000.0
    updated = repo.update_opportunity(opportunity)
    assert updated.stage is OpportunityStage.CLOSED
    assert updated.value == 20000.0
    repo.delete_opportunity(opportunity.id)
    assert repo.get_opportunity_by_id(opportunity.id) == Opportunity()