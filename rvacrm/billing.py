"""Orders, products, order lines and payments."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .core import BaseModel
from .customers import Address, Customer


@dataclass(kw_only=True)
class Order(BaseModel):
    """A customer's order with its totals, dates and addresses."""

    order_number: str = ""
    customer: Customer = field(default_factory=Customer)
    status: str = ""

    sub_total: float = 0.0
    tax_amount: float = 0.0
    discount: float = 0.0
    total: float = 0.0

    order_date: datetime | None = None
    shipped_date: datetime | None = None
    delivered_date: datetime | None = None

    billing_address_id: uuid.UUID | None = None
    shipping_address_id: uuid.UUID | None = None

    order_customer: Customer = field(default_factory=Customer)
    order_items: list[OrderItem] = field(default_factory=list)
    payments: list[Payment] = field(default_factory=list)
    billing_address: Address | None = None
    shipping_address: Address | None = None

    notes: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass(kw_only=True)
class Product(BaseModel):
    """Something that can be sold."""

    name: str = ""
    price: float = 0.0


@dataclass(kw_only=True)
class OrderItem(BaseModel):
    """One line of an order."""

    order: Order = field(default_factory=Order)
    product: Product = field(default_factory=Product)
    quantity: int = 0
    total: float = 0.0


@dataclass(kw_only=True)
class Payment(BaseModel):
    """A payment made against an order."""

    order: Order = field(default_factory=Order)
    amount: float = 0.0
    status: str = ""