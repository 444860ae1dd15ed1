from transaction_service.schemas.account import AccountSnapshot, TransactionStatusView
from transaction_service.schemas.transaction import (
    CommissionReport,
    CoreTransactionResult,
    FeeQuote,
    TransactionRecord,
    TransactionRequest,
    TransferRequest,
)

__all__ = [
    "AccountSnapshot",
    "CommissionReport",
    "CoreTransactionResult",
    "FeeQuote",
    "TransactionRecord",
    "TransactionRequest",
    "TransactionStatusView",
    "TransferRequest",
]
