from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import DateTime, Enum, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from transaction_service.database import Base
from transaction_service.enums import ProductType, TransactionType


def _new_id() -> str:
    return uuid.uuid4().hex


class Transaction(Base):
    """Journal row. Written once at the end of a flow, never updated."""

    __tablename__ = "transactions"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=_new_id)
    account_id: Mapped[str] = mapped_column(String(64), nullable=False)
    customer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    type: Mapped[TransactionType] = mapped_column(
        Enum(TransactionType, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(20, 4), nullable=False)
    fee: Mapped[Decimal] = mapped_column(Numeric(20, 4), nullable=False, default=Decimal("0"))
    product_type: Mapped[ProductType | None] = mapped_column(
        Enum(ProductType, values_callable=lambda x: [e.value for e in x]),
        nullable=True,
    )
    product_name: Mapped[str | None] = mapped_column(String(64), nullable=True)
    transaction_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    description: Mapped[str | None] = mapped_column(String(512), nullable=True)
    external_reference: Mapped[str | None] = mapped_column(String(64), nullable=True)

    __table_args__ = (
        Index("ix_transactions_account_date", "account_id", "transaction_date"),
        Index("ix_transactions_date", "transaction_date"),
    )

    def __repr__(self) -> str:
        return (
            f"Transaction(id={self.id!r}, account_id={self.account_id!r}, "
            f"type={self.type.value}, amount={self.amount})"
        )
