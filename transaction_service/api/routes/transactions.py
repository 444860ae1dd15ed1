from datetime import date

from fastapi import APIRouter, Depends, Path, Query

from transaction_service.api.deps import get_transaction_service
from transaction_service.schemas import (
    CommissionReport,
    FeeQuote,
    TransactionRecord,
    TransactionRequest,
    TransferRequest,
)
from transaction_service.services import TransactionService

router = APIRouter()


@router.post(
    "/deposit",
    response_model=TransactionRecord,
    summary="Deposit",
    description="Deposit into a passive account. A fee applies once the free monthly allowance is used.",
)
async def deposit(
    body: TransactionRequest,
    service: TransactionService = Depends(get_transaction_service),
):
    return await service.process_deposit(body)


@router.post(
    "/withdrawal",
    response_model=TransactionRecord,
    summary="Withdrawal",
    description="Withdraw from a passive account. Fails if the balance does not cover amount plus fee.",
)
async def withdrawal(
    body: TransactionRequest,
    service: TransactionService = Depends(get_transaction_service),
):
    return await service.process_withdrawal(body)


@router.post(
    "/payment",
    response_model=TransactionRecord,
    summary="Credit payment",
    description="Pay down the drawn amount of a credit product.",
)
async def payment(
    body: TransactionRequest,
    service: TransactionService = Depends(get_transaction_service),
):
    return await service.process_payment(body)


@router.post(
    "/consumption",
    response_model=TransactionRecord,
    summary="Credit card consumption",
    description="Charge a credit card. Fails if the amount exceeds the available credit.",
)
async def consumption(
    body: TransactionRequest,
    service: TransactionService = Depends(get_transaction_service),
):
    return await service.process_consumption(body)


@router.post(
    "/transfers",
    response_model=TransactionRecord,
    summary="Transfer between accounts",
    description=(
        "Debit the source account and credit the target account. If the credit fails the debit is "
        "reverted and the call fails with 500; if the reversal also fails the call fails with 503."
    ),
)
async def transfer(
    body: TransferRequest,
    service: TransactionService = Depends(get_transaction_service),
):
    return await service.process_transfer(body)


@router.get(
    "",
    response_model=list[TransactionRecord],
    summary="Account transactions",
    description="All journaled transactions for an account, oldest first. Empty list when none exist.",
)
async def list_transactions(
    account_id: str = Query(..., min_length=1, description="Account identifier"),
    service: TransactionService = Depends(get_transaction_service),
):
    return await service.find_by_account_id(account_id).to_list()


@router.get(
    "/commissions",
    response_model=list[CommissionReport],
    summary="Commission report",
    description="Transactions that charged a fee between two dates (both inclusive).",
)
async def commissions(
    start_date: date = Query(..., description="First day of the period"),
    end_date: date = Query(..., description="Last day of the period"),
    service: TransactionService = Depends(get_transaction_service),
):
    return await service.find_commissions(start_date, end_date)


@router.get(
    "/fees/{account_id}",
    response_model=FeeQuote,
    summary="Fee quote",
    description="Fee the next transaction on this account would carry.",
)
async def fee_quote(
    account_id: str = Path(..., description="Account identifier"),
    service: TransactionService = Depends(get_transaction_service),
):
    return await service.quote_fee(account_id)
