"""Services for customers, addresses and opportunities over a repository."""

from __future__ import annotations

import uuid
from typing import Protocol

from .customers import Address, Customer, Opportunity


class CustomerRepository(Protocol):
    """Storage for customers."""

    def get_customer_by_id(self, customer_id: uuid.UUID) -> Customer:
        """Return the customer with the given id."""

    def list_customers(self) -> list[Customer]:
        """Return every customer."""

    def create_customer(self, customer: Customer) -> Customer:
        """Store a new customer and return it as stored."""

    def update_customer(self, customer: Customer) -> Customer:
        """Update a customer and return it as stored."""

    def delete_customer(self, customer_id: uuid.UUID) -> None:
        """Remove the customer with the given id."""


class AddressRepository(Protocol):
    """Storage for addresses."""

    def get_address_by_id(self, address_id: uuid.UUID) -> Address:
        """Return the address with the given id."""

    def get_addresses_by_customer_id(self, customer_id: uuid.UUID) -> list[Address]:
        """Return the addresses of one customer."""

    def create_address(self, address: Address) -> Address:
        """Store a new address and return it as stored."""

    def update_address(self, address: Address) -> Address:
        """Update an address and return it as stored."""

    def delete_address(self, address_id: uuid.UUID) -> None:
        """Remove the address with the given id."""


class OpportunityRepository(Protocol):
    """Storage for opportunities."""

    def get_opportunity_by_id(self, opportunity_id: uuid.UUID) -> Opportunity:
        """Return the opportunity with the given id."""

    def get_opportunities_by_customer_id(self, customer_id: uuid.UUID) -> list[Opportunity]:
        """Return the opportunities of one customer."""

    def create_opportunity(self, opportunity: Opportunity) -> Opportunity:
        """Store a new opportunity and return it as stored."""

    def update_opportunity(self, opportunity: Opportunity) -> Opportunity:
        """Update an opportunity and return it as stored."""

    def delete_opportunity(self, opportunity_id: uuid.UUID) -> None:
        """Remove the opportunity with the given id."""


class CustomerService:
    """Customer operations; errors from the repository propagate unchanged."""

    def __init__(self, repository: CustomerRepository) -> None:
        self.repository = repository

    def get_customer_by_id(self, customer_id: uuid.UUID) -> Customer:
        return self.repository.get_customer_by_id(customer_id)

    def list_customers(self) -> list[Customer]:
        return self.repository.list_customers()

    def create_customer(self, customer: Customer) -> Customer:
        return self.repository.create_customer(customer)

    def update_customer(self, customer: Customer) -> Customer:
        return self.repository.update_customer(customer)

    def delete_customer(self, customer_id: uuid.UUID) -> None:
        self.repository.delete_customer(customer_id)


class AddressService:
    """Address operations; errors from the repository propagate unchanged."""

    def __init__(self, repository: AddressRepository) -> None:
        self.repository = repository

    def get_address_by_id(self, address_id: uuid.UUID) -> Address:
        return self.repository.get_address_by_id(address_id)

    def get_addresses_by_customer_id(self, customer_id: uuid.UUID) -> list[Address]:
        return self.repository.get_addresses_by_customer_id(customer_id)

    def create_address(self, address: Address) -> Address:
        return self.repository.create_address(address)

    def update_address(self, address: Address) -> Address:
        return self.repository.update_address(address)

    def delete_address(self, address_id: uuid.UUID) -> None:
        self.repository.delete_address(address_id)


class OpportunityService:
    """Opportunity operations; errors from the repository propagate unchanged."""

    def __init__(self, repository: OpportunityRepository) -> None:
        self.repository = repository

    def get_opportunity_by_id(self, opportunity_id: uuid.UUID) -> Opportunity:
        return self.repository.get_opportunity_by_id(opportunity_id)

    def get_opportunities_by_customer_id(self, customer_id: uuid.UUID) -> list[Opportunity]:
        return self.repository.get_opportunities_by_customer_id(customer_id)

    def create_opportunity(self, opportunity: Opportunity) -> Opportunity:
        return self.repository.create_opportunity(opportunity)

    def update_opportunity(self, opportunity: Opportunity) -> Opportunity:
        return self.repository.update_opportunity(opportunity)

    def delete_opportunity(self, opportunity_id: uuid.UUID) -> None:
        self.repository.delete_opportunity(opportunity_id)