"""Precondition checks per operation type, run against a single account snapshot."""
from decimal import Decimal

from transaction_service.enums import CreditType, ProductType
from transaction_service.errors import insufficient_funds, validation_error
from transaction_service.schemas import AccountSnapshot


def ensure_active(account: AccountSnapshot) -> None:
    if not account.is_active:
        raise validation_error(f"Account {account.account_number} is not active.")


def ensure_passive(account: AccountSnapshot) -> None:
    if account.product_type != ProductType.PASSIVE:
        raise validation_error("This operation only applies to passive (deposit) accounts.")


def ensure_credit(account: AccountSnapshot) -> None:
    if account.product_type != ProductType.ACTIVE:
        raise validation_error("This operation only applies to active (credit) products.")


def validate_deposit(account: AccountSnapshot, amount: Decimal, fee: Decimal) -> None:
    ensure_passive(account)
    ensure_active(account)
    if amount <= fee:
        raise validation_error(f"Deposit of {amount} does not cover the transaction fee of {fee}.")


def validate_withdrawal(account: AccountSnapshot, amount: Decimal, fee: Decimal) -> None:
    ensure_passive(account)
    ensure_active(account)
    total = amount + fee
    if account.balance < total:
        raise insufficient_funds(
            f"Insufficient funds. Cannot withdraw {total}; available balance is {account.balance}."
        )


def validate_payment(account: AccountSnapshot, amount: Decimal) -> None:
    ensure_credit(account)
    ensure_active(account)
    if account.used == 0:
        raise validation_error("There is no outstanding debt to pay.")
    if account.used < amount:
        raise validation_error(f"Payment of {amount} exceeds the outstanding debt of {account.used}.")


def validate_consumption(account: AccountSnapshot, amount: Decimal) -> None:
    ensure_credit(account)
    if account.credit_type != CreditType.CREDIT_CARD:
        raise validation_error("Consumption is only allowed for credit card products.")
    ensure_active(account)
    available = account.available_credit
    if amount > available:
        raise insufficient_funds(f"Consumption of {amount} exceeds the available credit of {available}.")
