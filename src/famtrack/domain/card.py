"""Credit card domain service."""

import re
from typing import Optional

from famtrack.database.base import Database
from famtrack.domain.entities import CreditCard
from famtrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_card_digits,
    family_member_not_found,
)


def _validate_day(label: str, day: Optional[int]) -> None:
    if day is not None and not 1 <= day <= 31:
        raise ValidationError(f"{label} must be between 1 and 31, got {day}")


class CardService:
    """Service for managing credit cards."""

    def __init__(self, db: Database):
        """Initialize card service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_card(
        self,
        user_id: str,
        name: str,
        last_four_digits: str,
        closing_day: Optional[int] = None,
        due_day: Optional[int] = None,
        holder_name: Optional[str] = None,
    ) -> str:
        """Register a credit card.

        Args:
            user_id: Owner of the card
            name: Display name
            last_four_digits: Final four digits, the key statements are matched on
            closing_day: Day of month the billing cycle closes
            due_day: Day of month the invoice is due
            holder_name: Name of an existing family member holding the card

        Returns:
            Card ID

        Raises:
            ValidationError: If digits or days are malformed
            ConflictError: If a card with the same digits exists
            NotFoundError: If the holder is not a family member
        """
        last_four_digits = last_four_digits.strip()
        if not re.fullmatch(r"\d{4}", last_four_digits):
            raise ValidationError(
                f"Last four digits must be exactly 4 digits, got '{last_four_digits}'"
            )
        _validate_day("Closing day", closing_day)
        _validate_day("Due day", due_day)

        if any(card.last_four_digits == last_four_digits for card in self.list_cards(user_id)):
            raise ConflictError(duplicate_card_digits(last_four_digits))

        holder_id = None
        if holder_name:
            holder = self.db.find_family_member_by_name(user_id, holder_name)
            if holder is None:
                raise NotFoundError(family_member_not_found(holder_name))
            holder_id = holder.id

        return self.db.create_credit_card(
            user_id=user_id,
            name=name,
            last_four_digits=last_four_digits,
            closing_day=closing_day,
            due_day=due_day,
            holder_family_member_id=holder_id,
        )

    def list_cards(self, user_id: str) -> list[CreditCard]:
        """List the user's credit cards."""
        return self.db.get_all_credit_cards(user_id)
