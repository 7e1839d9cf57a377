# jewelerp/transaction_domain/domain/transaction_steps.py
"""Sequential execution of transaction steps with compensation on failure."""

import logging
from enum import Enum
from typing import Callable, NoReturn, Optional, TypeVar

from jewelerp.common.exceptions.custom_exceptions import ApplicationError, PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionStep(str, Enum):
    LOAD = "load"
    UPDATE_STOCK_ITEM = "update_stock_item"
    CREATE_STOCK_ITEM = "create_stock_item"
    UPDATE_RAW_MATERIAL = "update_raw_material"
    CREATE_RAW_MATERIAL = "create_raw_material"
    MARK_PO_RECEIVED = "mark_po_received"
    APPEND_LEDGER = "append_ledger"


class TransactionStepRunner:
    """
    Runs store writes one after another, each acknowledged before the next.

    Every successful write may register a compensating action. When a later
    step fails, the compensations run newest-first, the optional reload hook
    re-reads authoritative state, and a PersistenceError describing the failed
    step is raised. If any compensation itself fails the error reports the
    transaction as partially applied. A write that fails with an unexpected
    exception, or with an error whose outcome is unknown, is reported as
    possibly applied.
    """

    def __init__(self, transaction_name: str, reload: Optional[Callable[[], None]] = None) -> None:
        self.transaction_name = transaction_name
        self.completed_steps: list[TransactionStep] = []
        self._compensations: list[tuple[TransactionStep, Callable[[], None]]] = []
        self._reload = reload

    def load(self, action: Callable[[], T]) -> T:
        """Runs a read issued before any write; a failure means nothing happened."""
        return self.run(TransactionStep.LOAD, action, record=False)

    def run(
        self,
        step: TransactionStep,
        action: Callable[[], T],
        compensate: Optional[Callable[[T], None]] = None,
        record: bool = True,
    ) -> T:
        try:
            result = action()
        except Exception as e:
            self._fail(step, e, is_write=record)

        if record:
            self.completed_steps.append(step)
            logger.debug(f"{self.transaction_name}: step '{step.value}' done")
        if compensate is not None:
            self._compensations.append((step, lambda: compensate(result)))
        return result

    def _fail(self, step: TransactionStep, error: Exception, is_write: bool) -> NoReturn:
        if isinstance(error, ApplicationError):
            logger.error(f"{self.transaction_name}: step '{step.value}' failed: {error}")
            outcome_unknown = is_write and error.outcome_unknown
        else:
            logger.exception(f"{self.transaction_name}: step '{step.value}' failed unexpectedly: {error}")
            outcome_unknown = is_write

        compensation_errors = self._compensate()
        # A completed write without a registered compensation stays applied
        fully_compensated = not compensation_errors and len(self._compensations) == len(self.completed_steps)

        if self._reload is not None and (self.completed_steps or outcome_unknown):
            try:
                self._reload()
            except Exception as reload_error:
                logger.error(f"{self.transaction_name}: reloading state after failure failed: {reload_error}")

        raise PersistenceError(
            transaction=self.transaction_name,
            step=step,
            completed_steps=self.completed_steps,
            compensated=fully_compensated,
            compensation_errors=compensation_errors,
            original_exception=error,
            outcome_unknown=outcome_unknown,
        ) from error

    def _compensate(self) -> list[Exception]:
        errors: list[Exception] = []
        for step, compensation in reversed(self._compensations):
            try:
                compensation()
                logger.warning(f"{self.transaction_name}: compensated step '{step.value}'")
            except Exception as e:
                logger.error(f"{self.transaction_name}: compensation for step '{step.value}' failed: {e}")
                errors.append(e)
        return errors
