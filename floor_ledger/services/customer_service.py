"""Customer credit ledger: credit balance and visit stats per customer."""

from __future__ import annotations

import logging
from decimal import Decimal
from uuid import uuid4

from floor_ledger.schemas.customer import Customer
from floor_ledger.schemas.state import LedgerState
from floor_ledger.utils.time import Clock, utc_now

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str:
    return (value or "").strip()


class CustomerCreditLedger:
    """Resolves customers and posts credit and visits against them."""

    def __init__(self, state: LedgerState, clock: Clock = utc_now) -> None:
        self.state = state
        self.clock = clock

    def get(self, customer_id: str) -> Customer | None:
        return self.state.customers_by_id.get(customer_id)

    def all_customers(self) -> list[Customer]:
        return sorted(self.state.customers_by_id.values(), key=lambda customer: customer.name.lower())

    def find_by_phone(self, phone: str | None) -> Customer | None:
        phone_value = _clean(phone)
        if not phone_value:
            return None
        for customer in self.state.customers_by_id.values():
            if customer.phone == phone_value:
                return customer
        return None

    def add_customer(self, name: str, phone: str | None = None) -> Customer:
        customer = Customer(
            id=f"cust-{uuid4().hex[:12]}",
            name=name,
            phone=_clean(phone) or None,
            created_at=self.clock(),
        )
        self.state.customers_by_id[customer.id] = customer
        logger.info("[CUSTOMERS] Created %s (%s)", customer.id, customer.name)
        return customer

    def resolve(self, name: str | None, phone: str | None) -> Customer | None:
        """Match by phone, else create from whatever identity was typed.

        A typed name that differs from the matched record renames it. Returns
        None when neither a name nor a phone is available.
        """
        name_value = _clean(name)
        phone_value = _clean(phone)
        if not name_value and not phone_value:
            return None

        existing = self.find_by_phone(phone_value)
        if existing is not None:
            if name_value and existing.name != name_value:
                existing.name = name_value
            return existing
        return self.add_customer(name_value or phone_value, phone_value or None)

    def post_credit(self, customer_id: str, amount: Decimal) -> Customer | None:
        """Increase (or, with a negative amount, decrease) the credit balance."""
        customer = self.get(customer_id)
        if customer is None:
            return None
        customer.credit_amount = customer.credit_amount + amount
        logger.info("[CUSTOMERS] Credit %s on %s, balance %s", amount, customer_id, customer.credit_amount)
        return customer

    def record_visit(self, customer_id: str) -> Customer | None:
        customer = self.get(customer_id)
        if customer is None:
            return None
        customer.visit_count += 1
        customer.last_visit = self.clock()
        return customer
