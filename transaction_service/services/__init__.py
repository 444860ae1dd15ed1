from transaction_service.services.transactions import AccountHistory, TransactionService

__all__ = [
    "AccountHistory",
    "TransactionService",
]
