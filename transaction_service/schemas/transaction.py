from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from transaction_service.enums import ProductType, TransactionType
from transaction_service.schemas.account import AccountSnapshot

# camelCase on the wire; snake_case names are accepted on input too.
WIRE_NAMES = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TransactionRequest(BaseModel):
    model_config = WIRE_NAMES

    account_id: str = Field(..., min_length=1, description="Account identifier in the account service")
    customer_id: str = Field(..., min_length=1, description="Owner of the account")
    amount: Decimal = Field(..., gt=0, description="Amount to credit or debit")
    description: str | None = Field(None, description="Free-text description")


class TransferRequest(BaseModel):
    model_config = WIRE_NAMES

    source_account_number: str = Field(..., min_length=1, description="Account number to debit")
    target_account_number: str = Field(..., min_length=1, description="Account number to credit")
    amount: Decimal = Field(..., ge=Decimal("0.01"), description="Amount to transfer")
    description: str | None = Field(None, description="Free-text description")

    @model_validator(mode="after")
    def distinct_accounts(self) -> "TransferRequest":
        if self.source_account_number == self.target_account_number:
            raise ValueError("Source and target account must be different")
        return self


class TransactionRecord(BaseModel):
    """Journal record; also the external view returned to callers."""

    model_config = ConfigDict(from_attributes=True, **WIRE_NAMES)

    id: str | None = None
    account_id: str
    customer_id: str
    type: TransactionType
    amount: Decimal
    fee: Decimal = Decimal("0")
    product_type: ProductType | None = None
    product_name: str | None = None
    transaction_date: datetime
    description: str | None = None
    external_reference: str | None = None


class CoreTransactionResult(BaseModel):
    """Outcome of the commit step against the account-of-record."""

    model_config = ConfigDict(frozen=True)

    core_transaction_id: str
    success: bool
    final_amount: Decimal
    account: AccountSnapshot


class CommissionReport(BaseModel):
    model_config = ConfigDict(from_attributes=True, **WIRE_NAMES)

    account_id: str
    product_type: ProductType | None = None
    product_name: str | None = None
    fee: Decimal
    transaction_date: datetime


class FeeQuote(BaseModel):
    model_config = WIRE_NAMES

    account_id: str
    fee: Decimal
    current_monthly_transactions: int | None = None
    free_transaction_limit: int | None = None
