"""Tests for AI categorization and catch-all category resolution."""

import asyncio
from datetime import date
from decimal import Decimal

import pytest

from famtrack.ai.categories import find_other_category, resolve_category_reference
from famtrack.ai.categorizer import TransactionCategorizer
from famtrack.ai.providers import LLMProvider
from famtrack.domain.category_mapping import (
    PARENT_CATEGORIES,
    SUBCATEGORIES,
    UNIDENTIFIED_CATEGORY_ID,
)
from famtrack.domain.entities import Category, ParsedTransaction
from famtrack.domain.errors import ConfigurationError, ProviderError

from conftest import count_prompt_transactions

UBER = ParsedTransaction(
    date=date(2025, 1, 15), description="UBER *TRIP", amount=Decimal("23.90"), type="expense"
)
SALARY = ParsedTransaction(
    date=date(2025, 1, 5), description="SALARIO ACME", amount=Decimal("5000.00"), type="income"
)
BAKERY = ParsedTransaction(
    date=date(2025, 1, 16), description="PADARIA", amount=Decimal("12.00"), type="expense",
    card_last_digits="1234", card_holder_name="MARIA SILVA",
)


class TestFindOtherCategory:
    """Test the catch-all category precedence."""

    def test_exact_name_first(self):
        """Test the exact "Outros Despesas" name wins."""
        catalog = [
            Category(id="a", name="Outros gastos", type="expense"),
            Category(id="b", name="Outros Despesas", type="expense"),
        ]
        assert find_other_category(catalog, "expense") == "b"

    def test_contains_outros_without_accents_or_case(self):
        """Test the name match ignores case."""
        catalog = [
            Category(id="a", name="Mercado", type="expense"),
            Category(id="b", name="OUTROS", type="expense"),
            Category(id="c", name="Lazer", type="expense"),
        ]
        assert find_other_category(catalog, "expense") == "b"

    def test_last_of_type(self):
        """Test the last category of the type is used, never the first."""
        catalog = [
            Category(id="a", name="Salário", type="income"),
            Category(id="b", name="Mercado", type="expense"),
            Category(id="c", name="Freelance", type="income"),
        ]
        assert find_other_category(catalog, "income") == "c"

    def test_no_category_of_type(self):
        """Test a catalog without the type is a configuration error."""
        catalog = [Category(id="a", name="Mercado", type="expense")]
        with pytest.raises(ConfigurationError):
            find_other_category(catalog, "income")

    def test_default_catalog(self, catalog):
        """Test the seeded catalog's catch-alls."""
        assert find_other_category(catalog, "expense") == PARENT_CATEGORIES["OUTROS"]
        assert find_other_category(catalog, "income") == SUBCATEGORIES["OUTRAS_RECEITAS"]


class TestResolveCategoryReference:
    """Test mapping model answers to catalog ids."""

    def test_id(self, catalog):
        assert resolve_category_reference(SUBCATEGORIES["URBANO"], catalog) == SUBCATEGORIES["URBANO"]

    def test_name(self, catalog):
        """Test names match without case or accents."""
        assert resolve_category_reference("combustivel", catalog) == SUBCATEGORIES["COMBUSTIVEL"]

    @pytest.mark.parametrize("value", [None, "", 42, "00000000-0000-0000-0000-000000000000"])
    def test_unresolved(self, catalog, value):
        assert resolve_category_reference(value, catalog) is None


class TestCategorizeTransactions:
    """Test a single categorization call."""

    def test_primary_provider(self, catalog, fake_provider):
        """Test ids come back in input order with every field preserved."""
        provider = fake_provider(
            "gemini",
            {"categories": [SUBCATEGORIES["URBANO"], SUBCATEGORIES["SALARIO"], "Padaria e Feira"]},
        )
        categorizer = TransactionCategorizer([provider])

        result = asyncio.run(categorizer.categorize_transactions([UBER, SALARY, BAKERY], catalog))

        assert [t.category_id for t in result] == [
            SUBCATEGORIES["URBANO"],
            SUBCATEGORIES["SALARIO"],
            SUBCATEGORIES["PADARIA_FEIRA"],
        ]
        assert result[2].card_holder_name == "MARIA SILVA"
        assert result[2].amount == Decimal("12.00")
        assert "UBER *TRIP" in provider.prompts[0]
        assert UNIDENTIFIED_CATEGORY_ID in provider.prompts[0]

    def test_unknown_answer_gets_catch_all(self, catalog, fake_provider):
        """Test an unresolvable answer falls back by the transaction's type."""
        provider = fake_provider("gemini", {"categories": ["???", "nope"]})
        result = asyncio.run(
            TransactionCategorizer([provider]).categorize_transactions([UBER, SALARY], catalog)
        )
        assert result[0].category_id == PARENT_CATEGORIES["OUTROS"]
        assert result[1].category_id == SUBCATEGORIES["OUTRAS_RECEITAS"]

    def test_wrong_length_escalates(self, catalog, fake_provider):
        """Test a reply with the wrong number of ids fails the tier."""
        primary = fake_provider("gemini", {"categories": [SUBCATEGORIES["URBANO"]]})
        secondary = fake_provider(
            "openai", {"categories": [SUBCATEGORIES["URBANO"], SUBCATEGORIES["SALARIO"]]}
        )
        result = asyncio.run(
            TransactionCategorizer([primary, secondary]).categorize_transactions(
                [UBER, SALARY], catalog
            )
        )
        assert [t.category_id for t in result] == [SUBCATEGORIES["URBANO"], SUBCATEGORIES["SALARIO"]]
        assert len(secondary.prompts) == 1

    def test_all_tiers_fail(self, catalog, fake_provider):
        """Test the deterministic fallback is the same for every expense."""
        primary = fake_provider("gemini", ProviderError("timeout"))
        secondary = fake_provider("openai", {"unexpected": True})
        result = asyncio.run(
            TransactionCategorizer([primary, secondary]).categorize_transactions(
                [UBER, SALARY, BAKERY], catalog
            )
        )
        assert result[0].category_id == result[2].category_id == PARENT_CATEGORIES["OUTROS"]
        assert result[1].category_id == SUBCATEGORIES["OUTRAS_RECEITAS"]

    def test_empty_input(self, catalog, fake_provider):
        """Test no call is made without transactions."""
        provider = fake_provider("gemini", {"categories": []})
        assert asyncio.run(TransactionCategorizer([provider]).categorize_transactions([], catalog)) == []
        assert provider.prompts == []

    def test_missing_type_fails_loudly(self, fake_provider):
        """Test a catalog with no expense category raises."""
        catalog = [Category(id="i", name="Salário", type="income")]
        with pytest.raises(ConfigurationError):
            asyncio.run(TransactionCategorizer([]).categorize_transactions([UBER], catalog))


class TestCategorizeBatch:
    """Test batched categorization."""

    @staticmethod
    def answer_all_urbano(prompt):
        return {"categories": [SUBCATEGORIES["URBANO"]] * count_prompt_transactions(prompt)}

    def make_transactions(self, count):
        return [
            ParsedTransaction(
                date=date(2025, 1, 1 + i % 28),
                description=f"COMPRA {i:03d}",
                amount=Decimal(i + 1),
                type="expense",
            )
            for i in range(count)
        ]

    def test_small_input_single_call(self, catalog, fake_provider):
        """Test fewer than 20 transactions use one call."""
        provider = fake_provider("gemini", self.answer_all_urbano)
        result = asyncio.run(
            TransactionCategorizer([provider]).categorize_batch(self.make_transactions(19), catalog)
        )
        assert len(result) == 19
        assert len(provider.prompts) == 1

    def test_batches_preserve_order(self, catalog, fake_provider):
        """Test output order and length match the input across batches."""
        transactions = self.make_transactions(35)
        provider = fake_provider("gemini", self.answer_all_urbano)

        result = asyncio.run(
            TransactionCategorizer([provider]).categorize_batch(transactions, catalog, batch_size=15)
        )

        assert len(provider.prompts) == 3
        assert [t.description for t in result] == [t.description for t in transactions]
        assert all(t.category_id == SUBCATEGORIES["URBANO"] for t in result)

    def test_waves_of_three(self, catalog):
        """Test at most three calls run at once and each wave ends before the next."""

        class SlowProvider(LLMProvider):
            name = "gemini"

            def __init__(self):
                self.in_flight = 0
                self.peak = 0
                self.calls = 0
                self.events = []

            async def generate_json(self, prompt):
                self.calls += 1
                self.in_flight += 1
                self.peak = max(self.peak, self.in_flight)
                self.events.append("start")
                await asyncio.sleep(0.01)
                self.in_flight -= 1
                self.events.append("end")
                return {"categories": [SUBCATEGORIES["URBANO"]] * count_prompt_transactions(prompt)}

        transactions = self.make_transactions(100)
        provider = SlowProvider()

        result = asyncio.run(
            TransactionCategorizer([provider]).categorize_batch(transactions, catalog, batch_size=15)
        )

        assert provider.calls == 7
        assert provider.peak == 3
        assert provider.events == ["start"] * 3 + ["end"] * 3 + ["start"] * 3 + ["end"] * 3 + [
            "start",
            "end",
        ]
        assert [t.description for t in result] == [t.description for t in transactions]

    def test_failed_batch_falls_back_alone(self, catalog, fake_provider):
        """Test one failing batch does not affect the others."""

        def flaky(prompt):
            if '"COMPRA 000"' in prompt:
                raise ProviderError("rate limited")
            return self.answer_all_urbano(prompt)

        provider = fake_provider("gemini", flaky)
        result = asyncio.run(
            TransactionCategorizer([provider]).categorize_batch(
                self.make_transactions(30), catalog, batch_size=15
            )
        )
        assert {t.category_id for t in result[:15]} == {PARENT_CATEGORIES["OUTROS"]}
        assert {t.category_id for t in result[15:]} == {SUBCATEGORIES["URBANO"]}
