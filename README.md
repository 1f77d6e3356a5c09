# rvacrm

A small customer relationship management library with no dependencies
outside the standard library. It provides:

- **Domain models** as dataclasses and string enums:
  - `rvacrm.core`: `BaseModel` (id, `created_at`, `updated_at`) and `Note`.
  - `rvacrm.customers`: `Customer`, `Address`, `Opportunity`,
    `CustomerSegment`, `Lead`, and the enums `CustomerStatus`,
    `CustomerType`, `AddressType`, `OpportunityStage`, `OpportunityProduct`
    and `LeadStatus`.
  - `rvacrm.contacts`: `Contact`, `Address` and `Role`.
  - `rvacrm.activity`: `Activity`, `ActivityType` and `ActivityStatus`.
  - `rvacrm.billing`: `Order`, `Product`, `OrderItem` and `Payment`.
  - `rvacrm.projects`: `Project` and `ProjectTask`.
- **Services** (`rvacrm.service`): `CustomerService`, `AddressService` and
  `OpportunityService`. Each one passes every call to the repository it was
  given and lets that repository's exceptions through unchanged. The
  repository interfaces are the protocols `CustomerRepository`,
  `AddressRepository` and `OpportunityRepository`.
- **SQL repositories** (`rvacrm.repository`): `SqlCustomerRepository`,
  `SqlAddressRepository` and `SqlOpportunityRepository`, working on any
  DB-API connection.
- **WSGI handlers** (`rvacrm.handlers`): `CustomerHandler`, `AddressHandler`
  and `OpportunityHandler`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## JSON form

`Customer`, `Address` and `Opportunity` have `to_dict()` and the class method
`from_dict(data)`:

```python
from rvacrm.customers import Customer

customer = Customer(first_name="Luke", last_name="Skywalker",
                    email="luke@example.com")
data = customer.to_dict()
assert Customer.from_dict(data) == customer
```

- The base fields appear under the keys `ID`, `CreatedAt` and `UpdatedAt`.
  The other fields use snake_case keys such as `first_name` and
  `customer_type`.
- Timestamps are written as RFC 3339 strings, and an unset one as `null`.
- `from_dict` matches keys without regard to case. A missing key or `null`
  gives the field's empty value: `""`, `0.0`, `False`, the nil UUID, an empty
  list or dict, or `None` for a timestamp.
- An enum field takes the enum member when the text matches one. Any other
  text is kept as a plain string.
- A value of the wrong type, a bad UUID or a bad timestamp raises
  `ValueError`.

## SQL repositories

Each repository takes a DB-API connection and the connection's
`paramstyle`. The supported styles are `"qmark"` (the default), `"format"`,
`"pyformat"` and `"numeric"`. Any other style raises `ValueError`.

```python
import sqlite3
from rvacrm.repository import SqlCustomerRepository
from rvacrm.service import CustomerService

connection = sqlite3.connect("crm.db")
service = CustomerService(SqlCustomerRepository(connection))
created = service.create_customer(customer)
same = service.get_customer_by_id(created.id)
```

How the repositories behave:

- They read and write the tables `customers`, `addresses` and
  `opportunities`, using the columns the models name.
- Inserts and updates use `RETURNING`, so the database must support it
  (for example PostgreSQL, or SQLite 3.35 and later).
- Every write is committed. When a write fails it is rolled back and the
  error is raised.
- A lookup that finds no row returns an empty record, not an exception.
  So does an update that matches no row.
- Deleting a record that does not exist is not an error.

## WSGI handlers

Each handler is a WSGI application over one service:

```python
from wsgiref.simple_server import make_server
from rvacrm.handlers import CustomerHandler

make_server("localhost", 8000, CustomerHandler(service)).serve_forever()
```

Requests are answered as follows:

- **GET `?id=<uuid>`** returns the record as JSON.
- **DELETE `?id=<uuid>`** removes the record and returns
  `{"message": "Customer deleted successfully"}`. The address and
  opportunity handlers use their own name in the message.
- **POST** and **PUT** read a JSON body and then create or update the record.
  They return the stored record as JSON.
- A body that is not valid JSON, or does not fit the model, gets
  `400 Bad Request`.
- An exception raised by the service gets `500 Internal Server Error`, with
  the exception's message as the text.
- Any other method gets `405 Method not allowed`.
- An `id` that is not a UUID raises `ValueError` from the handler itself.

## What this package does not do

- It does not create database tables. The schema must already exist.
- It has no command-line program.
- Each handler serves one kind of record. There is no router that puts
  them together under one server.
- Leads, segments, contacts, activities, billing records, projects and notes
  exist only as models. They have no services, repositories or handlers.