from transaction_service.models.transaction import Transaction

__all__ = [
    "Transaction",
]
