"""
Error taxonomy for transaction processing.

A single exception type carries a closed ErrorKind; transport status is
looked up from STATUS_BY_KIND rather than from an exception hierarchy.
"""
import enum


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    ACCOUNT_NOT_FOUND = "account_not_found"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    SERVICE_UNAVAILABLE = "service_unavailable"
    TRANSFER_INCOMPLETE = "transfer_incomplete"
    TRANSFER_ESCALATED = "transfer_escalated"
    INTERNAL = "internal"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.ACCOUNT_NOT_FOUND: 400,
    ErrorKind.INSUFFICIENT_FUNDS: 400,
    ErrorKind.SERVICE_UNAVAILABLE: 503,
    ErrorKind.TRANSFER_INCOMPLETE: 500,
    ErrorKind.TRANSFER_ESCALATED: 503,
    ErrorKind.INTERNAL: 500,
}

TITLE_BY_KIND: dict[ErrorKind, str] = {
    ErrorKind.VALIDATION: "Bad Request",
    ErrorKind.ACCOUNT_NOT_FOUND: "Bad Request",
    ErrorKind.INSUFFICIENT_FUNDS: "Insufficient Funds",
    ErrorKind.SERVICE_UNAVAILABLE: "Service Unavailable",
    ErrorKind.TRANSFER_INCOMPLETE: "Transfer Incomplete",
    ErrorKind.TRANSFER_ESCALATED: "Transfer Requires Reconciliation",
    ErrorKind.INTERNAL: "Internal Server Error",
}


class TransactionError(Exception):
    """Raised by every layer of the service; `kind` decides how callers react."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    @property
    def title(self) -> str:
        return TITLE_BY_KIND[self.kind]

    def __repr__(self) -> str:
        return f"TransactionError(kind={self.kind.value}, message={self.message!r})"


def validation_error(message: str) -> TransactionError:
    return TransactionError(ErrorKind.VALIDATION, message)


def insufficient_funds(message: str) -> TransactionError:
    return TransactionError(ErrorKind.INSUFFICIENT_FUNDS, message)


def account_not_found(message: str) -> TransactionError:
    return TransactionError(ErrorKind.ACCOUNT_NOT_FOUND, message)
