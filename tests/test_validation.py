"""Tests for per-operation account preconditions."""

from decimal import Decimal

import pytest

from transaction_service.enums import AccountStatus, CreditType, ProductType
from transaction_service.errors import ErrorKind, TransactionError
from transaction_service.services.validation import (
    validate_consumption,
    validate_deposit,
    validate_payment,
    validate_withdrawal,
)


class TestDepositWithdrawal:
    def test_deposit_requires_passive(self, make_credit_card) -> None:
        with pytest.raises(TransactionError) as exc:
            validate_deposit(make_credit_card(), Decimal("10"), Decimal("0"))
        assert exc.value.kind is ErrorKind.VALIDATION

    def test_deposit_requires_active_status(self, make_account) -> None:
        with pytest.raises(TransactionError) as exc:
            validate_deposit(make_account(status=AccountStatus.INACTIVE), Decimal("10"), Decimal("0"))
        assert exc.value.kind is ErrorKind.VALIDATION
        assert "not active" in exc.value.message

    @pytest.mark.parametrize("amount", [Decimal("2.50"), Decimal("1.00"), Decimal("0.01")])
    def test_deposit_must_exceed_fee(self, make_account, amount) -> None:
        with pytest.raises(TransactionError) as exc:
            validate_deposit(make_account(), amount, Decimal("2.50"))
        assert exc.value.kind is ErrorKind.VALIDATION

    def test_deposit_just_above_fee(self, make_account) -> None:
        validate_deposit(make_account(), Decimal("2.51"), Decimal("2.50"))

    def test_withdrawal_of_exact_balance_including_fee(self, make_account) -> None:
        validate_withdrawal(make_account(balance=Decimal("102.50")), Decimal("100"), Decimal("2.50"))

    def test_withdrawal_rejected_when_fee_tips_over(self, make_account) -> None:
        with pytest.raises(TransactionError) as exc:
            validate_withdrawal(make_account(balance=Decimal("102.49")), Decimal("100"), Decimal("2.50"))
        assert exc.value.kind is ErrorKind.INSUFFICIENT_FUNDS

    def test_withdrawal_requires_passive(self, make_credit_card) -> None:
        with pytest.raises(TransactionError) as exc:
            validate_withdrawal(make_credit_card(), Decimal("10"), Decimal("0"))
        assert exc.value.kind is ErrorKind.VALIDATION


class TestPayment:
    def test_accepts_partial_payment(self, make_credit_card) -> None:
        validate_payment(make_credit_card(amount_used=Decimal("300")), Decimal("100"))

    def test_accepts_full_payment(self, make_credit_card) -> None:
        validate_payment(make_credit_card(amount_used=Decimal("300")), Decimal("300"))

    @pytest.mark.parametrize("used", [Decimal("0"), None])
    def test_rejects_without_debt(self, make_credit_card, used) -> None:
        with pytest.raises(TransactionError) as exc:
            validate_payment(make_credit_card(amount_used=used), Decimal("10"))
        assert exc.value.kind is ErrorKind.VALIDATION

    def test_rejects_overpayment(self, make_credit_card) -> None:
        with pytest.raises(TransactionError) as exc:
            validate_payment(make_credit_card(amount_used=Decimal("50")), Decimal("50.01"))
        assert exc.value.kind is ErrorKind.VALIDATION

    def test_rejects_passive_account(self, make_account) -> None:
        with pytest.raises(TransactionError):
            validate_payment(make_account(), Decimal("10"))

    def test_personal_loan_payment_allowed(self, make_credit_card) -> None:
        validate_payment(make_credit_card(credit_type=CreditType.PERSONAL), Decimal("10"))


class TestConsumption:
    def test_accepts_up_to_available_credit(self, make_credit_card) -> None:
        validate_consumption(make_credit_card(), Decimal("700"))

    def test_rejects_beyond_available_credit(self, make_credit_card) -> None:
        with pytest.raises(TransactionError) as exc:
            validate_consumption(make_credit_card(), Decimal("700.01"))
        assert exc.value.kind is ErrorKind.INSUFFICIENT_FUNDS

    def test_rejects_non_card_credit(self, make_credit_card) -> None:
        with pytest.raises(TransactionError) as exc:
            validate_consumption(make_credit_card(credit_type=CreditType.BUSINESS), Decimal("10"))
        assert exc.value.kind is ErrorKind.VALIDATION

    def test_rejects_passive_account(self, make_account) -> None:
        with pytest.raises(TransactionError) as exc:
            validate_consumption(make_account(product_type=ProductType.PASSIVE), Decimal("10"))
        assert exc.value.kind is ErrorKind.VALIDATION

    def test_rejects_blocked_card(self, make_credit_card) -> None:
        with pytest.raises(TransactionError):
            validate_consumption(make_credit_card(status=AccountStatus.BLOCKED), Decimal("10"))
