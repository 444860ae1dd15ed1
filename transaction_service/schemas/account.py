"""
Account-of-record shapes as served by the account service.

Snapshots are immutable: a mutation is a derived copy, so the pre-mutation
snapshot stays available for compensation and audit.
"""
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from transaction_service.enums import AccountStatus, CreditType, ProductType


class AccountSnapshot(BaseModel):
    """
    Point-in-time copy of an account. `balance` is available funds for PASSIVE
    products and the credit limit for ACTIVE ones; `amount_used` is the drawn
    credit. Fields the service sends that are not modelled here are kept and
    sent back on update, since update-balance replaces the whole object.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="allow",
    )

    id: str
    customer_id: str
    account_number: str
    product_type: ProductType
    account_type: str | None = None
    credit_type: CreditType | None = None
    status: AccountStatus
    opening_date: datetime | None = None

    balance: Decimal = Decimal("0")
    amount_used: Decimal | None = None

    maintenance_fee_amount: Decimal | None = None
    required_daily_average: Decimal | None = None
    free_transaction_limit: int | None = None
    transaction_fee_amount: Decimal | None = None
    current_monthly_transactions: int | None = None
    monthly_movements: int | None = None
    specific_deposit_date: datetime | None = None

    holders: list[str] = Field(default_factory=list)
    signatories: list[str] = Field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.status == AccountStatus.ACTIVE

    @property
    def used(self) -> Decimal:
        return self.amount_used if self.amount_used is not None else Decimal("0")

    @property
    def available_credit(self) -> Decimal:
        return self.balance - self.used

    @property
    def product_name(self) -> str | None:
        """Reporting classification: credit type for ACTIVE products, account type otherwise."""
        if self.product_type == ProductType.ACTIVE and self.credit_type is not None:
            return self.credit_type.value
        return self.account_type

    def with_balance(self, balance: Decimal) -> "AccountSnapshot":
        return self.model_copy(update={"balance": balance})

    def with_amount_used(self, amount_used: Decimal) -> "AccountSnapshot":
        return self.model_copy(update={"amount_used": amount_used})

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class TransactionStatusView(BaseModel):
    """Lightweight pricing projection from GET /accounts/{id}/transaction-status."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    free_transaction_limit: int | None = None
    current_monthly_transactions: int | None = None
    transaction_fee_amount: Decimal | None = None
