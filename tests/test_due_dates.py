"""Tests for due date calculation."""

from datetime import date

import pytest

from famtrack.domain.due_dates import calculate_due_date
from famtrack.domain.entities import CreditCard

CARD = CreditCard(id="c1", name="Visa", last_four_digits="1234", closing_day=10, due_day=20)


class TestCalculateDueDate:
    """Test the billing cycle convention."""

    @pytest.mark.parametrize(
        "purchase,due",
        [
            (date(2025, 3, 9), date(2025, 3, 20)),
            (date(2025, 3, 10), date(2025, 4, 20)),
            (date(2025, 3, 25), date(2025, 4, 20)),
        ],
    )
    def test_closing_day_boundary(self, purchase, due):
        """Test purchases before closing stay in the month; from closing on they roll."""
        assert calculate_due_date(purchase, "credit_card", CARD) == due

    def test_december_rolls_into_january(self):
        assert calculate_due_date(date(2024, 12, 15), "credit_card", CARD) == date(2025, 1, 20)

    def test_defaults_without_card(self):
        """Test closing day 1 and due day 10."""
        assert calculate_due_date(date(2025, 5, 1), "credit_card") == date(2025, 6, 10)
        assert calculate_due_date(date(2025, 5, 17), "credit_card") == date(2025, 6, 10)

    def test_card_without_days(self):
        card = CreditCard(id="c2", name="Master", last_four_digits="5678")
        assert calculate_due_date(date(2025, 5, 17), "credit_card", card) == date(2025, 6, 10)

    def test_due_day_clamped_to_month_end(self):
        card = CreditCard(id="c3", name="Elo", last_four_digits="0000", closing_day=25, due_day=31)
        assert calculate_due_date(date(2025, 1, 26), "credit_card", card) == date(2025, 2, 28)

    def test_checking_due_on_its_date(self):
        assert calculate_due_date(date(2025, 3, 25), "checking", CARD) == date(2025, 3, 25)
