"""Tests for the statement import pipeline."""

import asyncio
from decimal import Decimal

import pytest

from famtrack.domain.category_mapping import PARENT_CATEGORIES, SUBCATEGORIES
from famtrack.domain.statement_import import (
    NOTHING_EXTRACTED,
    StatementImportService,
    categorized_from_ai_item,
)

from conftest import USER_ID, count_prompt_transactions


def urbano_for_all(prompt):
    return {"categories": [SUBCATEGORIES["URBANO"]] * count_prompt_transactions(prompt)}


class TestFastParserPath:
    """Test imports the local parser can read."""

    def test_parsed_and_categorized(self, temp_db, catalog, fake_provider, fixtures_dir):
        """Test the parser's lines are categorized without AI extraction."""
        text = (fixtures_dir / "nubank_fatura.txt").read_text(encoding="utf-8")
        provider = fake_provider("gemini", urbano_for_all)
        service = StatementImportService(temp_db, [provider])

        result = asyncio.run(service.extract_transactions(text, USER_ID))

        assert result.metadata.method == "fast_parser"
        assert result.metadata.bank == "Nubank"
        assert result.metadata.statement_type == "credit_card"
        assert result.metadata.total_transactions == 3
        assert len(provider.prompts) == 1
        assert {t.category_id for t in result.transactions} == {SUBCATEGORIES["URBANO"]}
        assert {t.source for t in result.transactions} == {"credit_card_import"}
        assert result.category_name(SUBCATEGORIES["URBANO"]) == "Urbano"
        # Extraction alone stores nothing
        assert temp_db.list_transactions(USER_ID) == []

    def test_explicit_type(self, temp_db, catalog, fake_provider, fixtures_dir):
        """Test the caller's statement type is used."""
        text = (fixtures_dir / "itau_extrato.txt").read_text(encoding="utf-8")
        service = StatementImportService(temp_db, [fake_provider("gemini", urbano_for_all)])
        result = asyncio.run(service.extract_transactions(text, USER_ID, "checking"))
        assert result.metadata.statement_type == "checking"
        assert {t.source for t in result.transactions} == {"bank_statement_import"}

    def test_providers_down(self, temp_db, catalog, fixtures_dir):
        """Test every line still gets a catch-all category without providers."""
        text = (fixtures_dir / "itau_extrato.txt").read_text(encoding="utf-8")
        result = asyncio.run(StatementImportService(temp_db, []).extract_transactions(text, USER_ID))
        by_type = {t.type: t.category_id for t in result.transactions}
        assert by_type == {
            "income": SUBCATEGORIES["OUTRAS_RECEITAS"],
            "expense": PARENT_CATEGORIES["OUTROS"],
        }


class TestAIFallbackPath:
    """Test imports the local parser cannot read."""

    def test_ai_extraction(self, temp_db, catalog, fake_provider, fixtures_dir):
        """Test the model extracts and categorizes the whole document."""
        text = (fixtures_dir / "scanned_receipt.txt").read_text(encoding="utf-8")
        provider = fake_provider(
            "gemini",
            {
                "transactions": [
                    {
                        "date": "2025-01-10",
                        "description": "FARMACIA SAO JOAO",
                        "amount": -42.5,
                        "type": "expense",
                        "categoryId": SUBCATEGORIES["FARMACIA"],
                    },
                    {"date": "2025-01-11", "description": "PIX RECEBIDO ANA", "amount": "100"},
                    {"date": "not a date", "description": "BROKEN", "amount": 1},
                ]
            },
        )
        service = StatementImportService(temp_db, [provider])

        result = asyncio.run(service.extract_transactions(text, USER_ID, "checking"))

        assert result.metadata.method == "ai_fallback"
        assert [t.description for t in result.transactions] == ["FARMACIA SAO JOAO", "PIX RECEBIDO ANA"]
        pharmacy, pix = result.transactions
        assert pharmacy.amount == Decimal("42.5")
        assert pharmacy.category_id == SUBCATEGORIES["FARMACIA"]
        assert pix.type == "income"
        assert pix.category_id == SUBCATEGORIES["OUTRAS_RECEITAS"]

    def test_nothing_extracted(self, temp_db, catalog, fixtures_dir):
        """Test an empty result carries a warning instead of failing."""
        text = (fixtures_dir / "scanned_receipt.txt").read_text(encoding="utf-8")
        result = asyncio.run(StatementImportService(temp_db, []).import_statement(text, USER_ID))
        assert result.transactions == []
        assert result.transaction_ids == []
        assert result.metadata.warning == NOTHING_EXTRACTED
        assert result.to_dict()["metadata"]["warning"] == NOTHING_EXTRACTED


class TestImportStatement:
    """Test persisting an import."""

    def test_stores_in_one_batch(self, temp_db, catalog, fake_provider, fixtures_dir):
        text = (fixtures_dir / "bradesco_fatura.txt").read_text(encoding="utf-8")
        service = StatementImportService(temp_db, [fake_provider("gemini", urbano_for_all)])

        result = asyncio.run(service.import_statement(text, USER_ID, "credit_card"))

        assert len(result.transaction_ids) == 3
        stored = temp_db.list_transactions(USER_ID)
        assert {t.id for t in stored} == set(result.transaction_ids)
        members = {m.name for m in temp_db.get_all_family_members(USER_ID)}
        assert members == {"MARIA SILVA", "JOAO PEDRO SILVA"}

    def test_to_dict(self, temp_db, catalog, fake_provider, fixtures_dir):
        """Test the serialized shape."""
        text = (fixtures_dir / "nubank_fatura.txt").read_text(encoding="utf-8")
        service = StatementImportService(temp_db, [fake_provider("gemini", urbano_for_all)])
        payload = asyncio.run(service.extract_transactions(text, USER_ID)).to_dict()

        assert set(payload) == {"transactions", "metadata"}
        assert payload["metadata"]["method"] == "fast_parser"
        assert payload["metadata"]["totalTransactions"] == 3
        first = payload["transactions"][0]
        assert first["categoryId"] == SUBCATEGORIES["URBANO"]
        assert first["category"] == "Urbano"
        assert isinstance(first["amount"], str)


class TestCategorizedFromAIItem:
    """Test coercion of model-extracted items."""

    def test_installment_fields(self, catalog):
        item = {
            "date": "2025-01-05",
            "description": "AMAZON 01/03",
            "amount": 30,
            "type": "expense",
            "categoryId": "Eletrônicos",
            "mode": "parcelada",
            "installment_number": "1",
            "installments_total": 3,
            "card_last_digits": "1234",
        }
        txn = categorized_from_ai_item(item, catalog)
        assert txn.category_id == SUBCATEGORIES["ELETRONICOS"]
        assert (txn.mode, txn.installment_number, txn.installments_total) == ("parcelada", 1, 3)
        assert txn.card_last_digits == "1234"

    @pytest.mark.parametrize(
        "item",
        [
            {"date": "2025-01-05", "amount": 1},
            {"date": "2025-01-05", "description": "X", "amount": "abc"},
            {"description": "X", "amount": 1},
        ],
    )
    def test_unusable_items(self, catalog, item):
        assert categorized_from_ai_item(item, catalog) is None
