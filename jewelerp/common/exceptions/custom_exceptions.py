"""Custom application-wide exceptions."""

from typing import Any, Optional, Sequence

NO_CHANGES_SUFFIX = "No changes were made."


def _step_name(step: Any) -> str:
    return str(getattr(step, "value", step))


class ApplicationError(Exception):
    """Base class for application-specific errors."""

    # True when a write failed in a way that leaves open whether the store applied it
    outcome_unknown = False

    def __init__(
        self, message: str = "An application error occurred", original_exception: Exception | None = None
    ) -> None:
        super().__init__(message)
        self.original_exception = original_exception
        self.message = message

    def __str__(self) -> str:
        if self.original_exception:
            return f"{self.message} (Original error: {self.original_exception})"
        return self.message


class APIError(ApplicationError):
    """Exception raised for errors during remote datastore API calls."""

    def __init__(
        self,
        message: str = "API call failed",
        original_exception: Exception | None = None,
        status_code: int | None = None,
        outcome_unknown: bool = False,
    ) -> None:
        super().__init__(message, original_exception)
        self.status_code = status_code
        self.outcome_unknown = outcome_unknown
        self.message = f"API Error: {message}"
        if status_code:
            self.message += f" (Status Code: {status_code})"


class DatabaseError(ApplicationError):
    """Exception raised for errors during database operations."""

    def __init__(
        self,
        message: str = "Database operation failed",
        original_exception: Exception | None = None,
        outcome_unknown: bool = False,
    ) -> None:
        super().__init__(message, original_exception)
        self.outcome_unknown = outcome_unknown
        self.message = f"Database Error: {message}"


class NotFoundError(ApplicationError):
    """A referenced stock item, raw material or purchase order does not exist."""

    def __init__(self, entity: str, entity_id: Any) -> None:
        super().__init__(f"{entity} {entity_id} not found. {NO_CHANGES_SUFFIX}")
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(ApplicationError):
    """Input rejected before any mutation was issued."""

    def __init__(self, message: str = "Invalid transaction request") -> None:
        super().__init__(f"{message}. {NO_CHANGES_SUFFIX}")
        self.reason = message


class InsufficientStockError(ValidationError):
    """Requested quantity exceeds what is on hand."""

    def __init__(self, item_name: str, requested: Any, available: Any) -> None:
        super().__init__(f"Cannot take {requested} of '{item_name}': only {available} available")
        self.item_name = item_name
        self.requested = requested
        self.available = available


class PurchaseOrderAlreadyReceivedError(ValidationError):
    """A purchase order can only be received while it is still Pending."""

    def __init__(self, purchase_order_id: Any, status: str) -> None:
        super().__init__(f"Purchase order {purchase_order_id} is already {status}")
        self.purchase_order_id = purchase_order_id
        self.status = status


class LedgerImbalanceError(ApplicationError):
    """A journal entry set whose debits do not equal its credits."""

    def __init__(self, total_debit: Any, total_credit: Any) -> None:
        super().__init__(f"Ledger entries do not balance: debits {total_debit} != credits {total_credit}")
        self.total_debit = total_debit
        self.total_credit = total_credit


class PersistenceError(ApplicationError):
    """
    A store read or write failed while a transaction was running.

    `step` names the stage that failed and `completed_steps` the writes that had
    already been acknowledged. When those writes were successfully compensated
    the store is back to its pre-transaction state; otherwise the caller has to
    reconcile inventory and ledger by hand. `outcome_unknown` means the failed
    write itself may have landed (a timeout or a lost COMMIT), so even a clean
    compensation cannot promise that nothing was applied.
    """

    def __init__(
        self,
        transaction: str,
        step: str,
        completed_steps: Sequence[str] = (),
        compensated: bool = True,
        compensation_errors: Sequence[Exception] = (),
        original_exception: Optional[Exception] = None,
        outcome_unknown: bool = False,
    ) -> None:
        self.transaction = transaction
        self.step = _step_name(step)
        self.completed_steps = [_step_name(s) for s in completed_steps]
        self.compensated = compensated
        self.compensation_errors = list(compensation_errors)
        self.outcome_unknown = outcome_unknown
        super().__init__(self._build_message(), original_exception)

    @property
    def partially_applied(self) -> bool:
        if self.outcome_unknown:
            return True
        return bool(self.completed_steps) and not self.compensated

    def _build_message(self) -> str:
        head = f"{self.transaction} failed at step '{self.step}'."
        done = ", ".join(self.completed_steps)
        if self.outcome_unknown:
            message = f"{head} Outcome unknown: '{self.step}' may have been applied"
            if self.completed_steps and self.compensated:
                message += f"; completed steps ({done}) were rolled back"
            elif self.completed_steps:
                message += f"; completed steps ({done}) could not all be rolled back"
            return f"{message}; possibly partially applied, please check inventory/ledger."
        if not self.completed_steps:
            return f"{head} Nothing was applied."
        if self.compensated:
            return f"{head} Completed steps ({done}) were rolled back; nothing was applied."
        return f"{head} Partially applied ({done}); please check inventory/ledger."
