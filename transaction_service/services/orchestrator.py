"""
Single-account orchestration: fetch -> validate -> price -> derive -> commit
-> notify -> record.

`prepare` is pure; nothing is observable until `commit` writes the derived
snapshot to the account-of-record. The transfer saga drives the same steps
individually so it can tell a failed commit from a failed journal write.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from transaction_service.clients import AccountGateway
from transaction_service.enums import TransactionType
from transaction_service.errors import TransactionError
from transaction_service.repositories import TransactionJournal
from transaction_service.schemas import (
    AccountSnapshot,
    CoreTransactionResult,
    TransactionRecord,
    TransactionRequest,
)
from transaction_service.services.fees import ZERO, calculate_fee
from transaction_service.services.notifier import CounterNotifier
from transaction_service.services.validation import (
    validate_consumption,
    validate_deposit,
    validate_payment,
    validate_withdrawal,
)

logger = logging.getLogger(__name__)

BALANCE = "balance"
AMOUNT_USED = "amount_used"


@dataclass(frozen=True)
class PreparedLeg:
    """A validated, priced mutation of one account, not yet committed."""

    type: TransactionType
    request: TransactionRequest
    before: AccountSnapshot
    after: AccountSnapshot
    field: str
    delta: Decimal
    fee: Decimal
    record_amount: Decimal

    @property
    def expected_value(self) -> Decimal:
        return _field_value(self.after, self.field)


def _field_value(account: AccountSnapshot, field: str) -> Decimal:
    return account.balance if field == BALANCE else account.used


def _describe(leg: PreparedLeg) -> str:
    description = leg.request.description or ""
    if leg.fee > 0:
        return f"{description} (Fee: {leg.fee})".strip()
    return description


class TransactionOrchestrator:
    def __init__(self, gateway: AccountGateway, journal: TransactionJournal, notifier: CounterNotifier):
        self._gateway = gateway
        self._journal = journal
        self._notifier = notifier

    async def process_deposit(self, request: TransactionRequest) -> TransactionRecord:
        return await self._process(TransactionType.DEPOSIT, request)

    async def process_withdrawal(self, request: TransactionRequest) -> TransactionRecord:
        return await self._process(TransactionType.WITHDRAWAL, request)

    async def process_payment(self, request: TransactionRequest) -> TransactionRecord:
        return await self._process(TransactionType.PAYMENT, request)

    async def process_consumption(self, request: TransactionRequest) -> TransactionRecord:
        return await self._process(TransactionType.CONSUMPTION, request)

    async def _process(self, transaction_type: TransactionType, request: TransactionRequest) -> TransactionRecord:
        logger.info("Processing %s for account %s", transaction_type.value, request.account_id)
        account = await self._gateway.get_by_id(request.account_id)
        leg = self.prepare(transaction_type, request, account)
        result = await self.commit(leg)
        return await self.complete(leg, result)

    def prepare(
        self,
        transaction_type: TransactionType,
        request: TransactionRequest,
        account: AccountSnapshot,
        *,
        charge_fee: bool = True,
    ) -> PreparedLeg:
        """Validate and price against `account`, then derive the new snapshot. No side effects."""
        amount = request.amount
        try:
            if transaction_type == TransactionType.DEPOSIT:
                fee = calculate_fee(account) if charge_fee else ZERO
                validate_deposit(account, amount, fee)
                net = amount - fee
                return PreparedLeg(
                    transaction_type, request, account, account.with_balance(account.balance + net),
                    BALANCE, net, fee, net,
                )
            if transaction_type == TransactionType.WITHDRAWAL:
                fee = calculate_fee(account) if charge_fee else ZERO
                validate_withdrawal(account, amount, fee)
                total = amount + fee
                return PreparedLeg(
                    transaction_type, request, account, account.with_balance(account.balance - total),
                    BALANCE, -total, fee, -amount,
                )
            if transaction_type == TransactionType.PAYMENT:
                validate_payment(account, amount)
                return PreparedLeg(
                    transaction_type, request, account, account.with_amount_used(account.used - amount),
                    AMOUNT_USED, -amount, ZERO, -amount,
                )
            if transaction_type == TransactionType.CONSUMPTION:
                validate_consumption(account, amount)
                return PreparedLeg(
                    transaction_type, request, account, account.with_amount_used(account.used + amount),
                    AMOUNT_USED, amount, ZERO, amount,
                )
        except TransactionError as e:
            logger.warning("%s rejected for account %s: %s", transaction_type.value, account.id, e.message)
            raise
        raise ValueError(f"{transaction_type.value} is not a single-account operation")

    async def commit(self, leg: PreparedLeg) -> CoreTransactionResult:
        """
        Write the derived snapshot. A successful update-balance call is the point
        where money has moved: whatever the service echoes back is the final
        amount, and a value other than the derived one is only reported.
        """
        logger.info(
            "Committing %s for account %s: %s %s (fee %s)",
            leg.type.value,
            leg.before.id,
            leg.field,
            leg.delta,
            leg.fee,
        )
        updated = await self._gateway.update_balance(leg.before.id, leg.after)
        final_amount = _field_value(updated, leg.field)
        if final_amount != leg.expected_value:
            logger.warning(
                "Account service stored %s=%s on account %s after %s; expected %s",
                leg.field,
                final_amount,
                leg.before.id,
                leg.type.value,
                leg.expected_value,
            )
        return CoreTransactionResult(
            core_transaction_id=uuid.uuid4().hex,
            success=True,
            final_amount=final_amount,
            account=updated,
        )

    async def complete(self, leg: PreparedLeg, result: CoreTransactionResult) -> TransactionRecord:
        """Post-commit steps: detached counter increment, then the journal record."""
        self._notifier.notify(leg.before.id)
        return await self.record(leg, result)

    async def record(self, leg: PreparedLeg, result: CoreTransactionResult) -> TransactionRecord:
        record = TransactionRecord(
            account_id=leg.before.id,
            customer_id=leg.request.customer_id,
            type=leg.type,
            amount=leg.record_amount,
            fee=leg.fee,
            product_type=leg.before.product_type,
            product_name=leg.before.product_name,
            transaction_date=datetime.now(timezone.utc),
            description=_describe(leg),
            external_reference=result.core_transaction_id,
        )
        return await self._journal.append(record)
