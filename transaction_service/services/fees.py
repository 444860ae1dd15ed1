"""Transaction pricing: a flat fee once the free monthly allowance is used up."""
from decimal import Decimal
from typing import Protocol

ZERO = Decimal("0")


class PricingProjection(Protocol):
    """Satisfied by both AccountSnapshot and TransactionStatusView."""

    @property
    def current_monthly_transactions(self) -> int | None: ...

    @property
    def free_transaction_limit(self) -> int | None: ...

    @property
    def transaction_fee_amount(self) -> Decimal | None: ...


def calculate_fee(pricing: PricingProjection) -> Decimal:
    """
    Fee for the next transaction. Missing pricing data means no fee: an
    unconfigured account must never be blocked from transacting.
    """
    current = pricing.current_monthly_transactions
    limit = pricing.free_transaction_limit
    fee_amount = pricing.transaction_fee_amount

    if current is None or limit is None or fee_amount is None:
        return ZERO
    if current >= limit:
        return fee_amount
    return ZERO
