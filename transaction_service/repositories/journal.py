"""
Transaction journal: append-only record of completed operations.

Each append commits in its own session so a record survives even when the
surrounding flow fails afterwards (e.g. a transfer whose credit leg fails).
"""
import abc
import logging
from collections.abc import AsyncIterator
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from transaction_service.errors import ErrorKind, TransactionError
from transaction_service.models import Transaction
from transaction_service.schemas import TransactionRecord

logger = logging.getLogger(__name__)


class TransactionJournal(abc.ABC):
    @abc.abstractmethod
    async def append(self, record: TransactionRecord) -> TransactionRecord:
        """Persist `record` and return it with its assigned id."""

    @abc.abstractmethod
    def iter_by_account_id(self, account_id: str) -> AsyncIterator[TransactionRecord]:
        """Records for one account, oldest first. Each call runs a fresh query."""

    @abc.abstractmethod
    async def find_commissions(self, start: datetime, end: datetime) -> list[TransactionRecord]:
        """Records with a charged fee and `start <= transaction_date < end`."""


class SqlTransactionJournal(TransactionJournal):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def append(self, record: TransactionRecord) -> TransactionRecord:
        row = Transaction(**record.model_dump(exclude={"id"}))
        try:
            async with self._session_factory() as session:
                session.add(row)
                await session.commit()
        except SQLAlchemyError as e:
            logger.error("Journal append failed for account %s: %s", record.account_id, e)
            raise TransactionError(ErrorKind.INTERNAL, "Failed to persist transaction record") from e
        return TransactionRecord.model_validate(row)

    async def iter_by_account_id(self, account_id: str) -> AsyncIterator[TransactionRecord]:
        try:
            async with self._session_factory() as session:
                result = await session.scalars(
                    select(Transaction)
                    .where(Transaction.account_id == account_id)
                    .order_by(Transaction.transaction_date, Transaction.id)
                )
                rows = result.all()
        except SQLAlchemyError as e:
            raise TransactionError(ErrorKind.INTERNAL, "Failed to read transaction records") from e
        for row in rows:
            yield TransactionRecord.model_validate(row)

    async def find_commissions(self, start: datetime, end: datetime) -> list[TransactionRecord]:
        try:
            async with self._session_factory() as session:
                result = await session.scalars(
                    select(Transaction)
                    .where(
                        Transaction.fee > Decimal("0"),
                        Transaction.transaction_date >= start,
                        Transaction.transaction_date < end,
                    )
                    .order_by(Transaction.transaction_date)
                )
                rows = result.all()
        except SQLAlchemyError as e:
            raise TransactionError(ErrorKind.INTERNAL, "Failed to read commission records") from e
        return [TransactionRecord.model_validate(row) for row in rows]
