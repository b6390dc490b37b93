"""Full-document AI extraction, used when the local parser finds nothing."""

import re
from typing import Any, Sequence

import structlog

from famtrack.ai.fallback import Tier, run_tiers
from famtrack.ai.prompts import build_extraction_prompt
from famtrack.ai.providers import LLMProvider
from famtrack.domain.entities import CREDIT_CARD, Category
from famtrack.domain.errors import ProviderError

logger = structlog.get_logger(__name__)

HOLDER_LINE = re.compile(r"Total para[ \t]+([A-ZÀ-Ü \t]+)", re.I)
# Shortest description that can be matched against a line reliably
MIN_MATCH_DESCRIPTION = 5
MATCH_PREFIX = 20


def find_card_holders(text: str) -> list[str]:
    """Names announced by "Total para NAME" markers, in document order."""
    return [
        match.group(1).strip()
        for match in HOLDER_LINE.finditer(text)
        if match.group(1).strip()
    ]


def assign_card_holders_from_text(
    transactions: list[dict[str, Any]], text: str
) -> list[dict[str, Any]]:
    """Attribute transactions to cardholders by scanning the raw text.

    Every "Total para NAME" line opens NAME's section. A transaction whose
    description prefix appears on a line inside a section belongs to that
    section's holder; later sections win when a description repeats.
    Transactions that never match are returned unchanged.
    """
    description_to_holder: dict[str, str] = {}
    current_holder = None

    for line in text.splitlines():
        holder_match = HOLDER_LINE.search(line)
        if holder_match:
            current_holder = holder_match.group(1).strip()
            continue
        if not current_holder:
            continue
        lowered = line.lower()
        for txn in transactions:
            description = str(txn.get("description") or "")
            if len(description) <= MIN_MATCH_DESCRIPTION:
                continue
            if description.lower()[:MATCH_PREFIX] in lowered:
                description_to_holder[description] = current_holder

    if description_to_holder:
        logger.debug("card_holders_assigned_from_text", count=len(description_to_holder))

    return [
        {**txn, "card_holder_name": description_to_holder[txn.get("description")]}
        if txn.get("description") in description_to_holder
        else txn
        for txn in transactions
    ]


class StatementExtractor:
    """Extracts transactions from a whole document with a language model."""

    def __init__(self, providers: Sequence[LLMProvider]):
        self.providers = list(providers)

    async def extract_with_ai(
        self, text: str, statement_type: str, categories: Sequence[Category]
    ) -> list[dict[str, Any]]:
        """Ask the model for every transaction in ``text``.

        Args:
            text: Raw statement text
            statement_type: ``checking`` or ``credit_card``
            categories: Catalog snapshot offered to the model

        Returns:
            The model's transaction dicts, or an empty list when every
            provider failed
        """
        prompt = build_extraction_prompt(text, statement_type, categories)

        def attempt(provider: LLMProvider):
            async def call() -> list[dict[str, Any]]:
                reply = await provider.generate_json(prompt)
                items = reply.get("transactions")
                if not isinstance(items, list):
                    raise ProviderError(f"{provider.name} reply has no 'transactions' array")
                return [item for item in items if isinstance(item, dict)]

            return Tier(provider.name, call)

        transactions = await run_tiers(
            [attempt(provider) for provider in self.providers], lambda: []
        )
        logger.info("ai_extraction_finished", count=len(transactions))

        if statement_type == CREDIT_CARD and transactions:
            tagged = sum(1 for txn in transactions if txn.get("card_holder_name"))
            holders = find_card_holders(text)
            if tagged == 0 and holders:
                logger.debug("card_holders_missing", holders=holders)
                transactions = assign_card_holders_from_text(transactions, text)

        return transactions
