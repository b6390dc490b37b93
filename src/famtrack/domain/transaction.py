"""Transaction domain service."""

from dataclasses import replace
from datetime import date
from typing import Optional

import structlog

from famtrack.database.base import Database
from famtrack.domain.category_mapping import map_category_id
from famtrack.domain.entities import (
    MODE_INSTALLMENT,
    TRANSACTION_MODES,
    TRANSACTION_TYPES,
    NewTransaction,
    Transaction,
)
from famtrack.domain.errors import NotFoundError, ValidationError, category_not_found
from famtrack.domain.transaction_generator import process_transaction

logger = structlog.get_logger(__name__)


class TransactionService:
    """Service for manually entered transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(self, user_id: str, base: NewTransaction) -> list[str]:
        """Create a transaction, expanded into installments or monthly copies.

        Args:
            user_id: Owner of the transaction
            base: Transaction as entered; legacy numeric category IDs are accepted

        Returns:
            IDs of every stored record, in date order

        Raises:
            ValidationError: If the fields are inconsistent or the category ID malformed
            NotFoundError: If the category doesn't exist
        """
        base = replace(base, category_id=map_category_id(base.category_id))
        self._validate(base)

        category = self.db.get_category(base.category_id)
        if category is None:
            raise NotFoundError(category_not_found(base.category_id))

        records = process_transaction(base)
        ids = self.db.batch_create_transactions(records, user_id)
        logger.info("transactions_created", count=len(ids), mode=base.mode)
        return ids

    def list_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List the user's transactions ordered by date.

        Raises:
            ValidationError: If start_date is after end_date
        """
        if start_date and end_date and start_date > end_date:
            raise ValidationError("Start date must be before or equal to end date")
        return self.db.list_transactions(user_id, start_date=start_date, end_date=end_date)

    @staticmethod
    def _validate(base: NewTransaction) -> None:
        if base.amount <= 0:
            raise ValidationError("Amount must be positive; use the type for direction")
        if base.type not in TRANSACTION_TYPES:
            raise ValidationError(
                f"Invalid type '{base.type}'. Must be one of: {', '.join(TRANSACTION_TYPES)}"
            )
        if base.mode not in TRANSACTION_MODES:
            raise ValidationError(
                f"Invalid mode '{base.mode}'. Must be one of: {', '.join(TRANSACTION_MODES)}"
            )
        if not base.description.strip():
            raise ValidationError("Description cannot be empty")

        if base.mode == MODE_INSTALLMENT:
            total = base.installments_total
            number = base.installment_number or 1
            if not total or total < 1:
                raise ValidationError("Installment transactions need a total of at least 1")
            if not 1 <= number <= total:
                raise ValidationError(
                    f"Installment number must be between 1 and {total}, got {number}"
                )
            if base.is_recurring:
                raise ValidationError("A transaction cannot be both installments and recurring")

        if base.is_recurring and (not base.recurring_months or base.recurring_months < 1):
            raise ValidationError("Recurring transactions need a positive number of months")
