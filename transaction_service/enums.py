import enum


class ProductType(str, enum.Enum):
    PASSIVE = "PASSIVE"
    ACTIVE = "ACTIVE"


class CreditType(str, enum.Enum):
    PERSONAL = "PERSONAL"
    BUSINESS = "BUSINESS"
    CREDIT_CARD = "CREDIT_CARD"


class AccountStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    BLOCKED = "BLOCKED"
    CLOSED = "CLOSED"


class TransactionType(str, enum.Enum):
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    PAYMENT = "PAYMENT"
    CONSUMPTION = "CONSUMPTION"
    TRANSFER = "TRANSFER"
