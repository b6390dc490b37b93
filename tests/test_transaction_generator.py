"""Tests for installment and recurring expansion."""

from datetime import date
from decimal import Decimal

from famtrack.domain.entities import NewTransaction
from famtrack.domain.transaction_generator import (
    generate_installment_transactions,
    generate_recurring_transactions,
    process_transaction,
)


def base(**kwargs):
    defaults = dict(
        date=date(2025, 1, 31),
        amount=Decimal("100.00"),
        type="expense",
        category_id="20000000-0000-0000-0000-000000000903",
        description="TV",
    )
    defaults.update(kwargs)
    return NewTransaction(**defaults)


class TestInstallments:
    """Test installment expansion."""

    def test_from_middle_installment(self):
        """Test installment 3 of 6 yields installments 3 through 6."""
        result = generate_installment_transactions(
            base(mode="parcelada", installment_number=3, installments_total=6, is_paid=True,
                 due_date=date(2025, 2, 10))
        )
        assert [t.installment_number for t in result] == [3, 4, 5, 6]
        assert [t.date for t in result] == [
            date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31), date(2025, 4, 30)
        ]
        assert [t.is_paid for t in result] == [True, False, False, False]
        assert result[-1].due_date == date(2025, 5, 10)
        assert {t.amount for t in result} == {Decimal("100.00")}
        assert {t.installments_total for t in result} == {6}

    def test_defaults_to_first(self):
        result = generate_installment_transactions(base(mode="parcelada", installments_total=3))
        assert [t.installment_number for t in result] == [1, 2, 3]

    def test_single_installment_total(self):
        assert len(generate_installment_transactions(base(mode="parcelada", installments_total=1))) == 1


class TestRecurring:
    """Test monthly recurrence."""

    def test_copies(self):
        result = generate_recurring_transactions(base(is_recurring=True, is_paid=True), 3)
        assert [t.date for t in result] == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31)]
        assert [t.is_paid for t in result] == [True, False, False]

    def test_not_recurring(self):
        assert len(generate_recurring_transactions(base(), 5)) == 1


class TestProcessTransaction:
    """Test dispatch by mode."""

    def test_installment_beats_recurring(self):
        result = process_transaction(
            base(mode="parcelada", installments_total=2, is_recurring=True, recurring_months=12)
        )
        assert len(result) == 2

    def test_single(self):
        single = base()
        assert process_transaction(single) == [single]
