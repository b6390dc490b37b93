"""AI categorization of parsed transactions."""

import asyncio
from dataclasses import fields
from typing import Sequence

import structlog

from famtrack.ai.categories import find_other_category, resolve_category_reference
from famtrack.ai.fallback import Tier, run_tiers
from famtrack.ai.prompts import build_categorization_prompt
from famtrack.ai.providers import LLMProvider
from famtrack.domain.entities import (
    CategorizedTransaction,
    Category,
    EXPENSE,
    ParsedTransaction,
)
from famtrack.domain.errors import ProviderError

logger = structlog.get_logger(__name__)

DEFAULT_BATCH_SIZE = 15
# Below this many transactions a single call is cheaper than batching
BATCHING_THRESHOLD = 20
CONCURRENT_BATCHES = 3


def _categorized(txn: ParsedTransaction, category_id: str) -> CategorizedTransaction:
    values = {f.name: getattr(txn, f.name) for f in fields(ParsedTransaction)}
    return CategorizedTransaction(**values, category_id=category_id)


class TransactionCategorizer:
    """Assigns a category to every parsed transaction.

    Providers are tried in order; when all of them fail, each transaction
    gets the catch-all category of its own type.
    """

    def __init__(self, providers: Sequence[LLMProvider]):
        """Initialize categorizer.

        Args:
            providers: Providers in fallback order
        """
        self.providers = list(providers)

    async def categorize_transactions(
        self,
        transactions: Sequence[ParsedTransaction],
        categories: Sequence[Category],
    ) -> list[CategorizedTransaction]:
        """Categorize transactions with one prompt.

        Args:
            transactions: Parsed transactions
            categories: Catalog snapshot offered to the model

        Returns:
            One categorized transaction per input, in input order

        Raises:
            ConfigurationError: If a transaction's type has no category at all
        """
        if not transactions:
            return []

        prompt = build_categorization_prompt(transactions, categories)

        def attempt(provider: LLMProvider):
            async def call() -> list[str]:
                reply = await provider.generate_json(prompt)
                return self._read_reply(reply, transactions, categories, provider.name)

            return Tier(provider.name, call)

        def local_fallback() -> list[str]:
            logger.warning("categorization_fallback", count=len(transactions))
            return [
                find_other_category(categories, txn.type or EXPENSE) for txn in transactions
            ]

        category_ids = await run_tiers(
            [attempt(provider) for provider in self.providers], local_fallback
        )
        return [_categorized(txn, cid) for txn, cid in zip(transactions, category_ids)]

    def _read_reply(
        self,
        reply: dict,
        transactions: Sequence[ParsedTransaction],
        categories: Sequence[Category],
        provider: str,
    ) -> list[str]:
        answers = reply.get("categories")
        if not isinstance(answers, list):
            raise ProviderError(f"{provider} reply has no 'categories' array")
        if len(answers) != len(transactions):
            raise ProviderError(
                f"{provider} returned {len(answers)} categories for "
                f"{len(transactions)} transactions"
            )

        category_ids = []
        for txn, answer in zip(transactions, answers):
            category_id = resolve_category_reference(answer, categories)
            if category_id is None:
                category_id = find_other_category(categories, txn.type or EXPENSE)
            category_ids.append(category_id)
        return category_ids

    async def categorize_batch(
        self,
        transactions: Sequence[ParsedTransaction],
        categories: Sequence[Category],
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> list[CategorizedTransaction]:
        """Categorize in slices of ``batch_size``, three slices at a time.

        Each wave of concurrent calls finishes before the next starts. Fewer
        than 20 transactions go through a single call.

        Args:
            transactions: Parsed transactions
            categories: Catalog snapshot offered to the model
            batch_size: Transactions per model call

        Returns:
            One categorized transaction per input, in input order
        """
        if len(transactions) < BATCHING_THRESHOLD:
            return await self.categorize_transactions(transactions, categories)
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        batches = [
            transactions[start:start + batch_size]
            for start in range(0, len(transactions), batch_size)
        ]
        logger.debug("categorizing_batches", count=len(transactions), batches=len(batches))

        results: list[CategorizedTransaction] = []
        for wave_start in range(0, len(batches), CONCURRENT_BATCHES):
            wave = batches[wave_start:wave_start + CONCURRENT_BATCHES]
            wave_results = await asyncio.gather(
                *(self.categorize_transactions(batch, categories) for batch in wave)
            )
            for batch_result in wave_results:
                results.extend(batch_result)
        return results
