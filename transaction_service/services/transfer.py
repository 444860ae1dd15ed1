"""
Transfer saga: debit the source, credit the target, and compensate the debit
with a single reversal when the credit cannot be committed.

States:
    RESOLVING -> VALIDATING -> DEBITING -> CREDITING -> COMPLETED
    CREDITING -> COMPENSATING -> COMPENSATED | ESCALATED
    any state after the debit commit -> ESCALATED when the task is cancelled

Failures before the debit commit raise ordinary TransactionErrors with no side
effects. Once the debit is committed the saga always ends in one of the
tagged outcomes below, or, if cancelled, re-raises after logging the debit
for manual reconciliation.
"""
import asyncio
import enum
import logging
import uuid
from dataclasses import dataclass, field
from decimal import Decimal

from transaction_service.clients import AccountGateway
from transaction_service.enums import TransactionType
from transaction_service.errors import ErrorKind, TransactionError, account_not_found, validation_error
from transaction_service.schemas import (
    AccountSnapshot,
    CoreTransactionResult,
    TransactionRecord,
    TransactionRequest,
    TransferRequest,
)
from transaction_service.services.orchestrator import PreparedLeg, TransactionOrchestrator
from transaction_service.services.validation import ensure_active

logger = logging.getLogger(__name__)


class SagaState(str, enum.Enum):
    RESOLVING = "RESOLVING"
    VALIDATING = "VALIDATING"
    DEBITING = "DEBITING"
    CREDITING = "CREDITING"
    COMPLETED = "COMPLETED"
    COMPENSATING = "COMPENSATING"
    COMPENSATED = "COMPENSATED"
    ESCALATED = "ESCALATED"


@dataclass(frozen=True)
class Completed:
    request: TransferRequest
    source: AccountSnapshot
    target: AccountSnapshot
    debit: TransactionRecord
    credit: TransactionRecord
    history: tuple[SagaState, ...]

    def to_record(self) -> TransactionRecord:
        """Single TRANSFER view over both legs. Not journaled; the legs are."""
        description = f"Transfer to {self.target.account_number}"
        if self.request.description:
            description = f"{description}: {self.request.description}"
        return TransactionRecord(
            id=uuid.uuid4().hex,
            account_id=self.source.id,
            customer_id=self.source.customer_id,
            type=TransactionType.TRANSFER,
            amount=self.request.amount,
            fee=self.debit.fee + self.credit.fee,
            product_type=self.source.product_type,
            product_name=self.source.product_name,
            transaction_date=self.credit.transaction_date,
            description=description,
            external_reference=self.credit.external_reference,
        )


@dataclass(frozen=True)
class Compensated:
    """The debit was reversed: no economic effect remains."""

    request: TransferRequest
    source: AccountSnapshot
    target: AccountSnapshot
    reason: str
    restored_amount: Decimal
    debit: TransactionRecord | None
    reversal: TransactionRecord | None
    history: tuple[SagaState, ...]


@dataclass(frozen=True)
class Escalated:
    """Source debited, target never credited, reversal failed. Needs manual reconciliation."""

    request: TransferRequest
    source: AccountSnapshot
    target: AccountSnapshot
    reason: str
    reversal_error: str
    amount_at_risk: Decimal
    debit_reference: str
    history: tuple[SagaState, ...]


TransferOutcome = Completed | Compensated | Escalated


@dataclass
class _Run:
    request: TransferRequest
    history: list[SagaState] = field(default_factory=list)

    def enter(self, state: SagaState) -> None:
        self.history.append(state)
        logger.debug(
            "Transfer %s -> %s: %s",
            self.request.source_account_number,
            self.request.target_account_number,
            state.value,
        )

    def trail(self) -> tuple[SagaState, ...]:
        return tuple(self.history)


class TransferSaga:
    def __init__(self, orchestrator: TransactionOrchestrator, gateway: AccountGateway):
        self._orchestrator = orchestrator
        self._gateway = gateway

    async def execute(self, request: TransferRequest) -> TransferOutcome:
        logger.info(
            "Transfer started: %s -> %s for %s",
            request.source_account_number,
            request.target_account_number,
            request.amount,
        )
        run = _Run(request)

        run.enter(SagaState.RESOLVING)
        source, target = await self._resolve(request)

        run.enter(SagaState.VALIDATING)
        credit_leg = self._validate(request, source, target)

        run.enter(SagaState.DEBITING)
        debit_leg = self._orchestrator.prepare(
            TransactionType.WITHDRAWAL,
            TransactionRequest(
                account_id=source.id,
                customer_id=source.customer_id,
                amount=request.amount,
                description=_with_note(f"Transfer sent to {target.account_number}", request.description),
            ),
            source,
        )
        debit_result = await self._orchestrator.commit(debit_leg)

        # From here on the source is debited: any failure before the credit
        # commit must be compensated.
        debit_record = None
        try:
            debit_record = await self._orchestrator.complete(debit_leg, debit_result)
            run.enter(SagaState.CREDITING)
            credit_result = await self._orchestrator.commit(credit_leg)
        except asyncio.CancelledError:
            # Whether the credit landed is unknown, so no reversal is attempted.
            run.enter(SagaState.ESCALATED)
            logger.critical(
                "Transfer %s -> %s cancelled after debit of %s from account %s; "
                "manual reconciliation required (debit reference %s)",
                request.source_account_number,
                request.target_account_number,
                -debit_leg.delta,
                source.id,
                debit_result.core_transaction_id,
            )
            raise
        except Exception as e:
            logger.error(
                "Transfer %s -> %s failed after debit of account %s: %s. Reverting.",
                request.source_account_number,
                request.target_account_number,
                source.id,
                e,
            )
            return await self._compensate(run, source, target, debit_leg, debit_result, debit_record, reason=str(e))

        credit_record = await self._orchestrator.complete(credit_leg, credit_result)
        run.enter(SagaState.COMPLETED)
        logger.info(
            "Transfer completed: %s -> %s for %s",
            request.source_account_number,
            request.target_account_number,
            request.amount,
        )
        return Completed(request, source, target, debit_record, credit_record, run.trail())

    async def _resolve(self, request: TransferRequest) -> tuple[AccountSnapshot, AccountSnapshot]:
        try:
            source, target = await asyncio.gather(
                self._gateway.get_by_number(request.source_account_number),
                self._gateway.get_by_number(request.target_account_number),
            )
        except TransactionError as e:
            if e.kind == ErrorKind.ACCOUNT_NOT_FOUND:
                logger.error("Transfer rejected: %s", e.message)
                raise account_not_found("Source or target account not found. Check account numbers.") from e
            raise
        return source, target

    def _validate(self, request: TransferRequest, source: AccountSnapshot, target: AccountSnapshot) -> PreparedLeg:
        """Both accounts active; the credit leg is priced and checked up front."""
        if source.id == target.id:
            raise validation_error("Source and target account must be different.")
        try:
            ensure_active(source)
            ensure_active(target)
        except TransactionError:
            logger.error(
                "Transfer rejected: accounts not active. Source: %s, target: %s",
                source.status.value,
                target.status.value,
            )
            raise
        return self._orchestrator.prepare(
            TransactionType.DEPOSIT,
            TransactionRequest(
                account_id=target.id,
                customer_id=target.customer_id,
                amount=request.amount,
                description=_with_note(f"Transfer received from {source.account_number}", request.description),
            ),
            target,
        )

    async def _compensate(
        self,
        run: _Run,
        source: AccountSnapshot,
        target: AccountSnapshot,
        debit_leg: PreparedLeg,
        debit_result: CoreTransactionResult,
        debit_record: TransactionRecord | None,
        *,
        reason: str,
    ) -> Compensated | Escalated:
        run.enter(SagaState.COMPENSATING)
        refund = -debit_leg.delta
        reversal_request = TransactionRequest(
            account_id=source.id,
            customer_id=source.customer_id,
            amount=refund,
            description=f"REVERSAL: failed transfer to {target.account_number}",
        )
        # Exactly one attempt, against the snapshot the debit commit returned.
        try:
            reversal_leg = self._orchestrator.prepare(
                TransactionType.DEPOSIT, reversal_request, debit_result.account, charge_fee=False
            )
            reversal_result = await self._orchestrator.commit(reversal_leg)
        except asyncio.CancelledError:
            run.enter(SagaState.ESCALATED)
            logger.critical(
                "Reversal of %s to source account %s cancelled; manual reconciliation required "
                "(debit reference %s)",
                refund,
                source.id,
                debit_result.core_transaction_id,
            )
            raise
        except Exception as e:
            run.enter(SagaState.ESCALATED)
            logger.critical(
                "Reversal of %s to source account %s failed after transfer to %s could not be credited; "
                "manual reconciliation required (debit reference %s): %s",
                refund,
                source.id,
                target.account_number,
                debit_result.core_transaction_id,
                e,
            )
            return Escalated(
                run.request,
                source,
                target,
                reason,
                str(e),
                refund,
                debit_result.core_transaction_id,
                run.trail(),
            )

        run.enter(SagaState.COMPENSATED)
        logger.info("Reversal succeeded: %s restored to source account %s", refund, source.id)
        reversal_record = None
        try:
            reversal_record = await self._orchestrator.record(reversal_leg, reversal_result)
        except TransactionError as e:
            logger.error(
                "Reversal of %s on account %s committed but not journaled (reference %s): %s",
                refund,
                source.id,
                reversal_result.core_transaction_id,
                e.message,
            )
        return Compensated(
            run.request,
            source,
            target,
            reason,
            refund,
            debit_record,
            reversal_record,
            run.trail(),
        )


def settle(outcome: TransferOutcome) -> TransactionRecord:
    """Map a terminal outcome onto the caller-facing result."""
    if isinstance(outcome, Completed):
        return outcome.to_record()
    if isinstance(outcome, Compensated):
        if outcome.debit is None:
            failed_step = "recording the withdrawal"
        else:
            failed_step = f"deposit to target account {outcome.target.account_number}"
        raise TransactionError(
            ErrorKind.TRANSFER_INCOMPLETE,
            f"Transfer failed: {failed_step} failed ({outcome.reason}), "
            f"but the withdrawal was successfully reverted.",
        )
    raise TransactionError(
        ErrorKind.TRANSFER_ESCALATED,
        f"Transfer failed and the withdrawal of {outcome.amount_at_risk} from account "
        f"{outcome.source.account_number} could not be reverted. Manual reconciliation required.",
    )


def _with_note(text: str, note: str | None) -> str:
    return f"{text}: {note}" if note else text
