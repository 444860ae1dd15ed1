"""
Account gateway: read/write access to the account-of-record service.

Timeouts belong to the HTTP client; nothing here retries. Failures are
translated into TransactionError kinds at this boundary.
"""
import abc
import logging
from typing import Any

import httpx

from transaction_service.errors import ErrorKind, TransactionError, account_not_found
from transaction_service.schemas import AccountSnapshot, TransactionStatusView

logger = logging.getLogger(__name__)


class AccountGateway(abc.ABC):
    @abc.abstractmethod
    async def get_by_id(self, account_id: str) -> AccountSnapshot:
        ...

    @abc.abstractmethod
    async def get_by_number(self, account_number: str) -> AccountSnapshot:
        ...

    @abc.abstractmethod
    async def update_balance(self, account_id: str, snapshot: AccountSnapshot) -> AccountSnapshot:
        """Whole-object replace: `snapshot` must carry every field."""

    @abc.abstractmethod
    async def get_transaction_status(self, account_id: str) -> TransactionStatusView:
        ...

    @abc.abstractmethod
    async def increment_transaction_counter(self, account_id: str) -> None:
        ...


class HttpAccountGateway(AccountGateway):
    def __init__(self, client: httpx.AsyncClient):
        self._client = client

    @classmethod
    def create(cls, base_url: str, timeout: float = 10.0) -> "HttpAccountGateway":
        return cls(httpx.AsyncClient(base_url=base_url, timeout=timeout))

    async def aclose(self) -> None:
        await self._client.aclose()

    async def get_by_id(self, account_id: str) -> AccountSnapshot:
        response = await self._request("GET", f"/accounts/{account_id}", subject=f"Account {account_id}")
        return self._parse_snapshot(response, subject=f"Account {account_id}")

    async def get_by_number(self, account_number: str) -> AccountSnapshot:
        subject = f"Account number {account_number}"
        response = await self._request("GET", f"/accounts/by-number/{account_number}", subject=subject)
        return self._parse_snapshot(response, subject=subject)

    async def update_balance(self, account_id: str, snapshot: AccountSnapshot) -> AccountSnapshot:
        subject = f"Account {account_id}"
        response = await self._request(
            "PUT",
            f"/accounts/{account_id}/update-balance",
            subject=subject,
            json=snapshot.to_wire(),
        )
        return self._parse_snapshot(response, subject=subject)

    async def get_transaction_status(self, account_id: str) -> TransactionStatusView:
        response = await self._request(
            "GET", f"/accounts/{account_id}/transaction-status", subject=f"Account {account_id}"
        )
        try:
            return TransactionStatusView.model_validate(response.json())
        except ValueError as e:
            raise TransactionError(
                ErrorKind.INTERNAL, f"Malformed transaction status for account {account_id}: {e}"
            ) from e

    async def increment_transaction_counter(self, account_id: str) -> None:
        await self._request(
            "PATCH", f"/accounts/{account_id}/increment-transactions", subject=f"Account {account_id}"
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        subject: str,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(method, path, json=json)
        except httpx.TimeoutException as e:
            logger.error("Account service timed out on %s %s", method, path)
            raise TransactionError(ErrorKind.SERVICE_UNAVAILABLE, "Account service timed out") from e
        except httpx.TransportError as e:
            logger.error("Account service unreachable on %s %s: %s", method, path, e)
            raise TransactionError(ErrorKind.SERVICE_UNAVAILABLE, "Account service unavailable") from e

        if response.status_code == 404:
            raise account_not_found(f"{subject} not found")
        if response.status_code >= 500:
            logger.error("Account service returned %d on %s %s", response.status_code, method, path)
            raise TransactionError(
                ErrorKind.SERVICE_UNAVAILABLE,
                f"Account service failed with status {response.status_code}",
            )
        if response.status_code >= 400:
            raise TransactionError(
                ErrorKind.VALIDATION,
                f"Validation failed in account service: {response.text or response.reason_phrase}",
            )
        return response

    @staticmethod
    def _parse_snapshot(response: httpx.Response, *, subject: str) -> AccountSnapshot:
        if not response.content:
            raise account_not_found(f"{subject} not found")
        try:
            data = response.json()
            if data is None:
                raise account_not_found(f"{subject} not found")
            return AccountSnapshot.model_validate(data)
        except ValueError as e:
            raise TransactionError(ErrorKind.INTERNAL, f"Malformed account payload for {subject}: {e}") from e
