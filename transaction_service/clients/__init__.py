from transaction_service.clients.account_gateway import AccountGateway, HttpAccountGateway

__all__ = [
    "AccountGateway",
    "HttpAccountGateway",
]
