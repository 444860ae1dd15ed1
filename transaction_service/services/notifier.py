"""
Best-effort transaction counter notifications.

The counter only drives future fee tiers, so a failed increment is logged and
dropped. Callers get nothing to await.
"""
import asyncio
import logging

from transaction_service.clients import AccountGateway

logger = logging.getLogger(__name__)


class CounterNotifier:
    def __init__(self, gateway: AccountGateway):
        self._gateway = gateway
        # Strong references so detached tasks are not garbage collected mid-flight
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def notify(self, account_id: str) -> None:
        task = asyncio.create_task(self._increment(account_id), name=f"increment-transactions-{account_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait for in-flight notifications (shutdown, tests)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _increment(self, account_id: str) -> None:
        try:
            await self._gateway.increment_transaction_counter(account_id)
        except Exception as e:
            logger.warning("Failed to increment transaction counter for account %s: %s", account_id, e)
            return
        logger.info("Transaction counter incremented for account %s", account_id)
