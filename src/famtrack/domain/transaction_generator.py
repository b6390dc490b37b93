"""Expansion of a manually entered transaction into a monthly series."""

from dataclasses import replace
from typing import Optional

from famtrack.domain.entities import MODE_INSTALLMENT, NewTransaction
from famtrack.utils.date_parser import add_months


def _shift(base: NewTransaction, months: int, **changes) -> NewTransaction:
    due_date = add_months(base.due_date, months) if base.due_date else None
    return replace(base, date=add_months(base.date, months), due_date=due_date, **changes)


def generate_installment_transactions(base: NewTransaction) -> list[NewTransaction]:
    """One record per remaining installment, a month apart.

    Runs from ``installment_number`` (default 1) through
    ``installments_total``. Only the starting installment keeps ``is_paid``.
    """
    if base.mode != MODE_INSTALLMENT or not base.installments_total or base.installments_total <= 1:
        return [base]

    start = base.installment_number or 1
    return [
        _shift(
            base,
            number - start,
            installment_number=number,
            is_paid=base.is_paid if number == start else False,
        )
        for number in range(start, base.installments_total + 1)
    ]


def generate_recurring_transactions(
    base: NewTransaction, months: Optional[int]
) -> list[NewTransaction]:
    """``months`` monthly copies starting at the base; later ones are unpaid."""
    if not base.is_recurring or not months or months <= 0:
        return [base]

    return [base] + [_shift(base, offset, is_paid=False) for offset in range(1, months)]


def process_transaction(base: NewTransaction) -> list[NewTransaction]:
    """Expand a transaction by its mode.

    Installments take precedence over recurrence; anything else is returned
    as a single record.
    """
    if base.mode == MODE_INSTALLMENT and base.installments_total and base.installments_total > 1:
        return generate_installment_transactions(base)
    if base.is_recurring and base.recurring_months:
        return generate_recurring_transactions(base, base.recurring_months)
    return [base]
