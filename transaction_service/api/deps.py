from fastapi import Request

from transaction_service.services import TransactionService


def get_transaction_service(request: Request) -> TransactionService:
    """The service wired in the app lifespan."""
    return request.app.state.transaction_service
