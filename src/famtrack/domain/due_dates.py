"""Due dates for imported transactions."""

import calendar
from datetime import date
from typing import Optional

from famtrack.domain.entities import CHECKING, CreditCard

DEFAULT_CLOSING_DAY = 1
DEFAULT_DUE_DAY = 10


def calculate_due_date(
    transaction_date: date,
    statement_type: str,
    card: Optional[CreditCard] = None,
) -> date:
    """Return when a transaction has to be paid.

    Checking transactions are already settled, so they are due on their own
    date. A card purchase made before the card's closing day is due on the
    due day of the same month; from the closing day on it rolls into the
    next month's invoice.

    Args:
        transaction_date: Date of the purchase
        statement_type: ``checking`` or ``credit_card``
        card: Matched card; closing day 1 and due day 10 are used without one

    Returns:
        The due date. A due day past the end of the month falls on the
        month's last day.
    """
    if statement_type == CHECKING:
        return transaction_date

    closing_day = (card.closing_day if card else None) or DEFAULT_CLOSING_DAY
    due_day = (card.due_day if card else None) or DEFAULT_DUE_DAY

    year, month = transaction_date.year, transaction_date.month
    if transaction_date.day >= closing_day:
        month += 1
        if month > 12:
            month = 1
            year += 1

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(due_day, last_day))
