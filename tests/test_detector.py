"""Tests for bank, statement type and transaction type detection."""

import pytest

from famtrack.parsing import detect_bank, detect_statement_type, detect_transaction_type
from famtrack.parsing.banks import RULESETS, select_ruleset
from famtrack.parsing.detector import BANK_PATTERNS


class TestDetectBank:
    """Test issuer detection."""

    @pytest.mark.parametrize(
        "text,bank",
        [
            ("NU PAGAMENTOS S.A. - Fatura", "Nubank"),
            ("Banco Inter S.A. extrato", "Inter"),
            ("ITAÚ UNIBANCO S.A.", "Itaú"),
            ("BTG Pactual Banking", "BTG"),
            ("Banco Santander (Brasil)", "Santander"),
            ("C6 BANK - fatura", "C6 Bank"),
            ("Cora SCM Ltda", "Cora"),
            ("Banco Bradesco S.A.", "Bradesco"),
        ],
    )
    def test_known_banks(self, text, bank):
        """Test each issuer is recognized by its name."""
        assert detect_bank(text) == bank

    def test_unknown_bank(self):
        """Test text without an issuer name."""
        assert detect_bank("Extrato de conta\n01/01 PADARIA 10,00") == "Desconhecido"

    def test_bradesco_checked_last(self):
        """Test a Bradesco boleto inside a Nubank invoice does not win."""
        text = "Nubank\n10/01 BOLETO BRADESCO 50,00"
        assert detect_bank(text) == "Nubank"


class TestRulesetRegistry:
    """Test rulesets are picked the same way the detector names banks."""

    def test_registry_follows_detector_order(self):
        assert list(RULESETS) == [bank for bank, _ in BANK_PATTERNS]

    @pytest.mark.parametrize(
        "text",
        ["ITAÚ UNIBANCO S.A.", "Nubank\n10/01 BOLETO BRADESCO 50,00", "Banco Bradesco S.A."],
    )
    def test_select_matches_detect_bank(self, text):
        assert select_ruleset(text).bank == detect_bank(text)

    def test_unknown_issuer(self):
        assert select_ruleset("Extrato de conta") is None


class TestDetectStatementType:
    """Test credit card vs checking classification."""

    def test_credit_card_invoice(self):
        """Test invoice vocabulary."""
        text = "Fatura do cartão de crédito\nTotal da fatura R$ 100,00\nPagamento mínimo"
        assert detect_statement_type(text) == "credit_card"

    def test_checking_statement(self):
        """Test account statement vocabulary."""
        text = "Extrato de conta corrente\nSaldo anterior R$ 10,00"
        assert detect_statement_type(text) == "checking"

    def test_tie_goes_to_checking(self):
        """Test equal scores resolve to checking."""
        assert detect_statement_type("fatura\nextrato") == "checking"

    def test_no_vocabulary(self):
        """Test text with neither vocabulary."""
        assert detect_statement_type("lorem ipsum") == "checking"


class TestDetectTransactionType:
    """Test keyword income/expense classification."""

    @pytest.mark.parametrize(
        "description",
        ["SALÁRIO EMPRESA X", "Pix recebido Maria", "TED RECEBIDA", "Estorno compra", "CASHBACK"],
    )
    def test_income_keywords(self, description):
        """Test income keywords, regardless of case."""
        assert detect_transaction_type(description) == "income"

    @pytest.mark.parametrize("description", ["UBER *TRIP", "Pix enviado Joao", "PADARIA"])
    def test_everything_else_is_expense(self, description):
        """Test descriptions without income keywords."""
        assert detect_transaction_type(description) == "expense"
