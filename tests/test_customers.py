import json
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from rvacrm.customers import (
    Address,
    AddressType,
    Customer,
    CustomerStatus,
    CustomerType,
    Lead,
    Opportunity,
    OpportunityProduct,
    OpportunityStage,
)


def _sample_address(customer_id):
    return Address(
        id=uuid.uuid4(),
        created_at=datetime(2024, 5, 6, 7, 8, 9, tzinfo=timezone.utc),
        customer_id=customer_id,
        type=AddressType.BILLING,
        street1="1 Main St",
        street2="Suite 2",
        city="Richmond",
        state="VA",
        postal_code="23220",
        country="US",
        is_default=True,
    )


def _sample_customer():
    customer_id = uuid.uuid4()
    return Customer(
        id=customer_id,
        created_at=datetime(2024, 1, 2, 3, 4, 5, 250000, tzinfo=timezone.utc),
        updated_at=datetime(2024, 2, 3, 4, 5, 6, tzinfo=timezone(timedelta(hours=-5))),
        first_name="Luke",
        last_name="Skywalker",
        email="luke@example.com",
        company_name="Rebel Alliance",
        job_title="Pilot",
        status=CustomerStatus.ACTIVE,
        customer_type=CustomerType.PROSPECT,
        source="referral",
        addresses=[_sample_address(customer_id)],
        tags=["vip", "east"],
        custom_fields={"tier": 2},
    )


def test_customer_round_trip():
    customer = _sample_customer()
    assert Customer.from_dict(customer.to_dict()) == customer


def test_customer_round_trip_through_json_text():
    customer = _sample_customer()
    text = json.dumps(customer.to_dict())
    assert Customer.from_dict(json.loads(text)) == customer


def test_customer_dict_uses_json_field_names():
    data = Customer().to_dict()
    assert set(data) == {
        "ID",
        "CreatedAt",
        "UpdatedAt",
        "first_name",
        "last_name",
        "email",
        "phone",
        "company_name",
        "job_title",
        "status",
        "customer_type",
        "source",
        "addresses",
        "tags",
        "custom_fields",
    }


def test_customer_enum_values_are_plain_strings():
    data = Customer(status=CustomerStatus.BLOCKED, customer_type=CustomerType.CHURNED).to_dict()
    assert data["status"] == "blocked"
    assert data["customer_type"] == "churned"


def test_customer_from_dict_converts_known_status():
    customer = Customer.from_dict({"status": "inactive", "customer_type": "lead"})
    assert customer.status is CustomerStatus.INACTIVE
    assert customer.customer_type is CustomerType.LEAD


def test_customer_from_dict_keeps_unknown_status_text():
    customer = Customer.from_dict({"status": "vip"})
    assert customer.status == "vip"


def test_customer_from_dict_matches_keys_case_insensitively():
    customer_id = uuid.uuid4()
    customer = Customer.from_dict({"id": str(customer_id), "FIRST_NAME": "Luke"})
    assert customer.id == customer_id
    assert customer.first_name == "Luke"


def test_customer_from_dict_null_and_missing_fields_take_defaults():
    customer = Customer.from_dict({"first_name": None, "tags": None})
    assert customer == Customer()
    assert customer.id == uuid.UUID(int=0)


def test_customer_from_dict_rejects_bad_uuid():
    with pytest.raises(ValueError):
        Customer.from_dict({"ID": "not-a-uuid"})


def test_customer_from_dict_rejects_non_object():
    with pytest.raises(ValueError):
        Customer.from_dict(["Luke"])


def test_customer_from_dict_rejects_wrong_field_type():
    with pytest.raises(ValueError):
        Customer.from_dict({"first_name": 5})


def test_customer_from_dict_rejects_bad_timestamp():
    with pytest.raises(ValueError):
        Customer.from_dict({"CreatedAt": "yesterday"})


def test_timestamp_is_written_in_rfc3339():
    moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert Customer(created_at=moment).to_dict()["CreatedAt"] == "2024-01-02T03:04:05Z"


def test_timestamp_keeps_its_offset():
    moment = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone(timedelta(hours=2)))
    text = Customer(created_at=moment).to_dict()["CreatedAt"]
    assert text.endswith("+02:00")
    assert Customer.from_dict({"CreatedAt": text}).created_at == moment


def test_nanosecond_timestamp_is_truncated_to_microseconds():
    customer = Customer.from_dict({"CreatedAt": "2024-01-02T03:04:05.123456789Z"})
    assert customer.created_at == datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=timezone.utc)


def test_address_round_trip():
    address = _sample_address(uuid.uuid4())
    assert Address.from_dict(address.to_dict()) == address


def test_address_type_is_written_as_text():
    assert Address(type=AddressType.SHIPPING).to_dict()["type"] == "shipping"


def test_address_rejects_non_boolean_default_flag():
    with pytest.raises(ValueError):
        Address.from_dict({"is_default": "yes"})


def test_opportunity_round_trip():
    opportunity = Opportunity(
        id=uuid.uuid4(),
        customer_id=uuid.uuid4(),
        name="Tax plan",
        description="Annual planning",
        value=1500.5,
        stage=OpportunityStage.PROPOSAL,
        probability=0.4,
        expected_close_date=datetime(2025, 3, 1, tzinfo=timezone.utc),
        source="web",
        products=[OpportunityProduct.TAX_STRATEGY, OpportunityProduct.SERVICE],
    )
    assert Opportunity.from_dict(opportunity.to_dict()) == opportunity


def test_opportunity_products_use_their_names():
    data = Opportunity(products=[OpportunityProduct.ONE_TIME, OpportunityProduct.DUE_DILIGENCE])
    assert data.to_dict()["products"] == ["service - one-time", "due diligence"]


def test_opportunity_accepts_integer_value():
    opportunity = Opportunity.from_dict({"value": 100, "stage": "negotiation"})
    assert opportunity.value == 100.0
    assert isinstance(opportunity.value, float)
    assert opportunity.stage is OpportunityStage.NEGOTIATION


def test_opportunity_rejects_string_value():
    with pytest.raises(ValueError):
        Opportunity.from_dict({"value": "100"})


def test_lead_defaults_to_nil_identifiers():
    lead = Lead(first_name="Leia")
    assert lead.assigned_to == uuid.UUID(int=0)
    assert lead.customer_id == lead.id
    assert lead.score == 0