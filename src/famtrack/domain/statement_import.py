"""Statement import pipeline: parse, categorize, post-process, persist."""

import time
from dataclasses import dataclass, field, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Sequence

import structlog

from famtrack.ai.categories import find_other_category, resolve_category_reference
from famtrack.ai.categorizer import TransactionCategorizer
from famtrack.ai.extractor import StatementExtractor
from famtrack.ai.providers import LLMProvider
from famtrack.database.base import Database
from famtrack.domain.entities import (
    MODE_INSTALLMENT,
    MODE_SINGLE,
    TRANSACTION_TYPES,
    CategorizedTransaction,
    Category,
    NewTransaction,
)
from famtrack.domain.post_processor import PostProcessor
from famtrack.parsing.statement_parser import parse_statement
from famtrack.parsing.type_detector import detect_transaction_type
from famtrack.utils.date_parser import parse_date

logger = structlog.get_logger(__name__)

METHOD_FAST_PARSER = "fast_parser"
METHOD_AI_FALLBACK = "ai_fallback"
NOTHING_EXTRACTED = "Could not extract any transaction from the document"
UNKNOWN_CATEGORY_NAME = "Outros"


@dataclass(frozen=True)
class ImportMetadata:
    """How an import was carried out."""

    method: str
    bank: str
    statement_type: str
    total_transactions: int
    processing_time_ms: int
    confidence: float
    parsing_method: str
    warning: Optional[str] = None


@dataclass(frozen=True)
class ImportResult:
    """Transactions produced from one statement, ready to store."""

    transactions: list[NewTransaction]
    category_names: dict[str, str]
    metadata: ImportMetadata
    transaction_ids: list[str] = field(default_factory=list)

    def category_name(self, category_id: str) -> str:
        return self.category_names.get(category_id, UNKNOWN_CATEGORY_NAME)

    def to_dict(self) -> dict[str, Any]:
        """Serializable form: ``{"transactions": [...], "metadata": {...}}``."""
        metadata = {
            "method": self.metadata.method,
            "bank": self.metadata.bank,
            "statementType": self.metadata.statement_type,
            "totalTransactions": self.metadata.total_transactions,
            "processingTime": self.metadata.processing_time_ms,
            "confidence": self.metadata.confidence,
            "parsingMethod": self.metadata.parsing_method,
        }
        if self.metadata.warning:
            metadata["warning"] = self.metadata.warning
        return {
            "transactions": [transaction_to_dict(txn, self) for txn in self.transactions],
            "metadata": metadata,
        }


def transaction_to_dict(txn: NewTransaction, result: ImportResult) -> dict[str, Any]:
    return {
        "date": txn.date.isoformat(),
        "description": txn.description,
        "amount": str(txn.amount),
        "type": txn.type,
        "categoryId": txn.category_id,
        "category": result.category_name(txn.category_id),
        "mode": txn.mode,
        "installmentNumber": txn.installment_number,
        "installmentsTotal": txn.installments_total,
        "cardId": txn.card_id,
        "familyMemberId": txn.family_member_id,
        "dueDate": txn.due_date.isoformat() if txn.due_date else None,
        "isPaid": txn.is_paid,
        "isRecurring": txn.is_recurring,
        "recurringMonths": txn.recurring_months,
        "source": txn.source,
    }


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def categorized_from_ai_item(
    item: dict[str, Any], catalog: Sequence[Category]
) -> Optional[CategorizedTransaction]:
    """Convert one model-extracted dict, or None when it lacks usable data."""
    description = str(item.get("description") or "").strip()
    if not description:
        return None
    try:
        txn_date = parse_date(str(item.get("date") or ""))
        amount = abs(Decimal(str(item.get("amount"))))
    except (ValueError, InvalidOperation):
        return None

    txn_type = item.get("type")
    if txn_type not in TRANSACTION_TYPES:
        txn_type = detect_transaction_type(description)

    category_id = resolve_category_reference(item.get("categoryId"), catalog)
    if category_id is None:
        category_id = find_other_category(catalog, txn_type)

    installment_number = _optional_int(item.get("installment_number"))
    installments_total = _optional_int(item.get("installments_total"))
    mode = MODE_INSTALLMENT if item.get("mode") == MODE_INSTALLMENT else MODE_SINGLE
    digits = item.get("card_last_digits")
    holder = item.get("card_holder_name")

    return CategorizedTransaction(
        date=txn_date,
        description=description,
        amount=amount,
        type=txn_type,
        mode=mode,
        installment_number=installment_number,
        installments_total=installments_total,
        card_last_digits=str(digits).strip() if digits else None,
        card_holder_name=str(holder).strip() if holder else None,
        category_id=category_id,
    )


class StatementImportService:
    """Runs the statement import pipeline for one user."""

    def __init__(self, db: Database, providers: Sequence[LLMProvider]):
        """Initialize statement import service.

        Args:
            db: Database instance
            providers: Language model providers in fallback order
        """
        self.db = db
        self.categorizer = TransactionCategorizer(providers)
        self.extractor = StatementExtractor(providers)
        self.post_processor = PostProcessor(db)

    async def extract_transactions(
        self,
        text: str,
        user_id: str,
        statement_type: Optional[str] = None,
    ) -> ImportResult:
        """Turn statement text into categorized, post-processed transactions.

        The local parser runs first. When it finds lines, they are categorized
        by the model (``fast_parser``); when it finds none, the model extracts
        them from the whole document (``ai_fallback``). Nothing is stored.

        Args:
            text: Raw statement text
            user_id: Owner of the import
            statement_type: ``checking`` or ``credit_card``; detected when None

        Returns:
            ImportResult. An empty transaction list carries a warning in
            its metadata.

        Raises:
            ConfigurationError: If the catalog lacks a category of a needed type
        """
        started = time.perf_counter()
        parsed = parse_statement(text, statement_type)
        effective_type = parsed.statement_type
        categories = self.db.get_all_categories(user_id)

        if parsed.transactions:
            method = METHOD_FAST_PARSER
            categorized = await self.categorizer.categorize_batch(parsed.transactions, categories)
        else:
            method = METHOD_AI_FALLBACK
            logger.info("local_parser_empty", bank=parsed.bank)
            items = await self.extractor.extract_with_ai(text, effective_type, categories)
            categorized = []
            for item in items:
                txn = categorized_from_ai_item(item, categories)
                if txn is None:
                    logger.warning("ai_item_skipped", item=item)
                    continue
                categorized.append(txn)

        cards = self.db.get_all_credit_cards(user_id)
        transactions = await self.post_processor.post_process_transactions(
            categorized, effective_type, user_id, preloaded_cards=cards
        )

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        metadata = ImportMetadata(
            method=method,
            bank=parsed.bank,
            statement_type=effective_type,
            total_transactions=len(transactions),
            processing_time_ms=elapsed_ms,
            confidence=parsed.confidence,
            parsing_method=parsed.parsing_method,
            warning=None if transactions else NOTHING_EXTRACTED,
        )
        logger.info(
            "statement_extracted",
            method=method,
            bank=parsed.bank,
            statement_type=effective_type,
            count=len(transactions),
            processing_time_ms=elapsed_ms,
        )
        return ImportResult(
            transactions=transactions,
            category_names={category.id: category.name for category in categories},
            metadata=metadata,
        )

    async def import_statement(
        self,
        text: str,
        user_id: str,
        statement_type: Optional[str] = None,
    ) -> ImportResult:
        """Extract transactions and store them in one batch.

        Returns:
            The extraction result with the stored IDs filled in
        """
        result = await self.extract_transactions(text, user_id, statement_type)
        if not result.transactions:
            return result
        ids = self.db.batch_create_transactions(result.transactions, user_id)
        logger.info("statement_imported", count=len(ids))
        return replace(result, transaction_ids=ids)
