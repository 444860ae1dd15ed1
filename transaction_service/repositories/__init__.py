from transaction_service.repositories.journal import SqlTransactionJournal, TransactionJournal

__all__ = [
    "SqlTransactionJournal",
    "TransactionJournal",
]
