"""Pytest configuration, in-memory collaborators and fixtures."""

import asyncio
import uuid
from collections.abc import AsyncIterator, Callable
from datetime import datetime
from decimal import Decimal

import pytest

from transaction_service.clients import AccountGateway
from transaction_service.enums import AccountStatus, CreditType, ProductType
from transaction_service.errors import ErrorKind, TransactionError, account_not_found
from transaction_service.repositories import TransactionJournal
from transaction_service.schemas import AccountSnapshot, TransactionRecord, TransactionStatusView
from transaction_service.services import TransactionService


class FakeAccountGateway(AccountGateway):
    """
    In-memory account service. Every call yields to the event loop once, after
    reading, so concurrent flows interleave the way they would over a network.
    """

    def __init__(self, *accounts: AccountSnapshot):
        self.accounts: dict[str, AccountSnapshot] = {a.id: a for a in accounts}
        self.calls: list[tuple[str, str]] = []
        self.updates: list[tuple[str, AccountSnapshot]] = []
        self.increments: list[str] = []
        self.fail_increments = False
        self.echo_skew: dict[str, Decimal] = {}
        self.update_gates: dict[str, asyncio.Event] = {}
        self._update_script: dict[str, list[Exception | None]] = {}

    def add(self, account: AccountSnapshot) -> None:
        self.accounts[account.id] = account

    def script_updates(self, account_id: str, *outcomes: Exception | None) -> None:
        """Queue per-call outcomes for update_balance: None succeeds, an exception is raised."""
        self._update_script[account_id] = list(outcomes)

    async def get_by_id(self, account_id: str) -> AccountSnapshot:
        self.calls.append(("get_by_id", account_id))
        account = self.accounts.get(account_id)
        await asyncio.sleep(0)
        if account is None:
            raise account_not_found(f"Account {account_id} not found")
        return account

    async def get_by_number(self, account_number: str) -> AccountSnapshot:
        self.calls.append(("get_by_number", account_number))
        account = next((a for a in self.accounts.values() if a.account_number == account_number), None)
        await asyncio.sleep(0)
        if account is None:
            raise account_not_found(f"Account number {account_number} not found")
        return account

    async def update_balance(self, account_id: str, snapshot: AccountSnapshot) -> AccountSnapshot:
        self.calls.append(("update_balance", account_id))
        await asyncio.sleep(0)
        script = self._update_script.get(account_id)
        if script:
            outcome = script.pop(0)
            if outcome is not None:
                raise outcome
        gate = self.update_gates.get(account_id)
        if gate is not None:
            await gate.wait()
        self.accounts[account_id] = snapshot
        self.updates.append((account_id, snapshot))
        skew = self.echo_skew.get(account_id)
        if skew is not None:
            # Stored as sent, echoed back as if the service had rounded it.
            return snapshot.with_balance(snapshot.balance + skew)
        return snapshot

    async def get_transaction_status(self, account_id: str) -> TransactionStatusView:
        self.calls.append(("get_transaction_status", account_id))
        account = self.accounts.get(account_id)
        if account is None:
            raise account_not_found(f"Account {account_id} not found")
        return TransactionStatusView(
            free_transaction_limit=account.free_transaction_limit,
            current_monthly_transactions=account.current_monthly_transactions,
            transaction_fee_amount=account.transaction_fee_amount,
        )

    async def increment_transaction_counter(self, account_id: str) -> None:
        await asyncio.sleep(0)
        if self.fail_increments:
            raise TransactionError(ErrorKind.SERVICE_UNAVAILABLE, "Account service unavailable")
        self.increments.append(account_id)


class InMemoryJournal(TransactionJournal):
    def __init__(self):
        self.records: list[TransactionRecord] = []
        self.fail_when: Callable[[TransactionRecord], bool] | None = None

    async def append(self, record: TransactionRecord) -> TransactionRecord:
        if self.fail_when is not None and self.fail_when(record):
            raise TransactionError(ErrorKind.INTERNAL, "Failed to persist transaction record")
        stored = record.model_copy(update={"id": uuid.uuid4().hex})
        self.records.append(stored)
        return stored

    async def iter_by_account_id(self, account_id: str) -> AsyncIterator[TransactionRecord]:
        for record in sorted(self.records, key=lambda r: r.transaction_date):
            if record.account_id == account_id:
                yield record

    async def find_commissions(self, start: datetime, end: datetime) -> list[TransactionRecord]:
        return [r for r in self.records if r.fee > 0 and start <= r.transaction_date < end]


def _account(**overrides) -> AccountSnapshot:
    data = dict(
        id="acct-001",
        customer_id="cust-001",
        account_number="191-0001",
        product_type=ProductType.PASSIVE,
        account_type="SAVINGS",
        status=AccountStatus.ACTIVE,
        balance=Decimal("500.00"),
        free_transaction_limit=5,
        transaction_fee_amount=Decimal("2.50"),
        current_monthly_transactions=0,
        holders=["cust-001"],
    )
    data.update(overrides)
    return AccountSnapshot(**data)


def _credit_card(**overrides) -> AccountSnapshot:
    data = dict(
        id="card-001",
        customer_id="cust-001",
        account_number="455-0001",
        product_type=ProductType.ACTIVE,
        account_type=None,
        credit_type=CreditType.CREDIT_CARD,
        status=AccountStatus.ACTIVE,
        balance=Decimal("1000.00"),
        amount_used=Decimal("300.00"),
    )
    data.update(overrides)
    return _account(**data)


@pytest.fixture
def make_account() -> Callable[..., AccountSnapshot]:
    """Factory for passive (deposit) account snapshots."""
    return _account


@pytest.fixture
def make_credit_card() -> Callable[..., AccountSnapshot]:
    """Factory for credit card snapshots."""
    return _credit_card


@pytest.fixture
def gateway() -> FakeAccountGateway:
    return FakeAccountGateway()


@pytest.fixture
def journal() -> InMemoryJournal:
    return InMemoryJournal()


@pytest.fixture
def service(gateway: FakeAccountGateway, journal: InMemoryJournal) -> TransactionService:
    return TransactionService(gateway, journal)
