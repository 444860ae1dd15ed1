"""
Transaction service: the operation surface exposed to callers.
Simple operations go through the orchestrator, transfers through the saga.
"""
import logging
from collections.abc import AsyncIterator
from datetime import date, datetime, time, timedelta, timezone

from transaction_service.clients import AccountGateway
from transaction_service.errors import validation_error
from transaction_service.repositories import TransactionJournal
from transaction_service.schemas import (
    CommissionReport,
    FeeQuote,
    TransactionRecord,
    TransactionRequest,
    TransferRequest,
)
from transaction_service.services.fees import calculate_fee
from transaction_service.services.notifier import CounterNotifier
from transaction_service.services.orchestrator import TransactionOrchestrator
from transaction_service.services.transfer import TransferSaga, settle

logger = logging.getLogger(__name__)


class AccountHistory:
    """Lazy view over one account's journal. Every iteration re-queries."""

    def __init__(self, journal: TransactionJournal, account_id: str):
        self._journal = journal
        self.account_id = account_id

    def __aiter__(self) -> AsyncIterator[TransactionRecord]:
        return self._journal.iter_by_account_id(self.account_id).__aiter__()

    async def to_list(self) -> list[TransactionRecord]:
        return [record async for record in self]


class TransactionService:
    def __init__(
        self,
        gateway: AccountGateway,
        journal: TransactionJournal,
        notifier: CounterNotifier | None = None,
    ):
        self.gateway = gateway
        self.journal = journal
        self.notifier = notifier or CounterNotifier(gateway)
        self.orchestrator = TransactionOrchestrator(gateway, journal, self.notifier)
        self.saga = TransferSaga(self.orchestrator, gateway)

    async def process_deposit(self, request: TransactionRequest) -> TransactionRecord:
        return await self.orchestrator.process_deposit(request)

    async def process_withdrawal(self, request: TransactionRequest) -> TransactionRecord:
        return await self.orchestrator.process_withdrawal(request)

    async def process_payment(self, request: TransactionRequest) -> TransactionRecord:
        return await self.orchestrator.process_payment(request)

    async def process_consumption(self, request: TransactionRequest) -> TransactionRecord:
        return await self.orchestrator.process_consumption(request)

    async def process_transfer(self, request: TransferRequest) -> TransactionRecord:
        outcome = await self.saga.execute(request)
        return settle(outcome)

    def find_by_account_id(self, account_id: str) -> AccountHistory:
        logger.info("Searching transactions for account %s", account_id)
        return AccountHistory(self.journal, account_id)

    async def find_commissions(self, start_date: date, end_date: date) -> list[CommissionReport]:
        """Charged fees between two dates, both inclusive."""
        if end_date < start_date:
            raise validation_error("end_date must not be before start_date.")
        start = datetime.combine(start_date, time.min, tzinfo=timezone.utc)
        end = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=timezone.utc)
        records = await self.journal.find_commissions(start, end)
        return [CommissionReport.model_validate(record, from_attributes=True) for record in records]

    async def quote_fee(self, account_id: str) -> FeeQuote:
        """Fee the next transaction would carry, from the lightweight status view."""
        status = await self.gateway.get_transaction_status(account_id)
        return FeeQuote(
            account_id=account_id,
            fee=calculate_fee(status),
            current_monthly_transactions=status.current_monthly_transactions,
            free_transaction_limit=status.free_transaction_limit,
        )
