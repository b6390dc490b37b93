"""Deterministic post-processing of extracted statement transactions."""

import asyncio
import re
from dataclasses import dataclass, replace
from typing import Optional, Sequence

import structlog

from famtrack.database.base import Database
from famtrack.domain.due_dates import calculate_due_date
from famtrack.domain.entities import (
    CREDIT_CARD,
    MODE_INSTALLMENT,
    MODE_SINGLE,
    SOURCE_BANK_STATEMENT_IMPORT,
    SOURCE_CREDIT_CARD_IMPORT,
    CategorizedTransaction,
    CreditCard,
    FamilyMember,
    NewTransaction,
)

logger = structlog.get_logger(__name__)

INVOICE_PAYMENT_MARKERS = ("PAGTO", "PAGAMENTO", "DEB EM C/C", "DEBITO EM C/C")
INSTALLMENT_SUFFIX = re.compile(r"(\d{2})/(\d{2})\s*$")


@dataclass(frozen=True)
class _Working:
    """A transaction moving through the stages."""

    txn: CategorizedTransaction
    family_member_id: Optional[str] = None
    card_id: Optional[str] = None


def guess_relationship(name: str) -> str:
    """Placeholder guess for an auto-created member: long names read as spouses."""
    return "spouse" if len(name.split()) >= 3 else "other"


def is_invoice_payment(description: str) -> bool:
    upper = description.upper()
    return any(marker in upper for marker in INVOICE_PAYMENT_MARKERS)


def redetect_installment(txn: CategorizedTransaction) -> CategorizedTransaction:
    """Apply a trailing NN/MM marker unless the transaction is already parcelled.

    Markers that cannot be an installment (number above total, or a total
    below 2, as in a trailing "25/12" date) are ignored.
    """
    match = INSTALLMENT_SUFFIX.search(txn.description)
    if not match:
        return txn
    if txn.installment_number and txn.mode == MODE_INSTALLMENT:
        return txn
    number, total = int(match.group(1)), int(match.group(2))
    if total < 2 or not 1 <= number <= total:
        return txn
    return replace(
        txn,
        mode=MODE_INSTALLMENT,
        installment_number=number,
        installments_total=total,
    )


class PostProcessor:
    """Turns categorized statement lines into storable transactions."""

    def __init__(self, db: Database):
        """Initialize post-processor.

        Args:
            db: Database instance
        """
        self.db = db

    async def post_process_transactions(
        self,
        transactions: Sequence[CategorizedTransaction],
        statement_type: str,
        user_id: str,
        preloaded_cards: Optional[Sequence[CreditCard]] = None,
    ) -> list[NewTransaction]:
        """Run the five post-processing stages.

        1. Drop invoice-payment lines (credit-card statements only).
        2. Re-derive installments from a trailing NN/MM marker.
        3. Find or create a family member for every cardholder name.
        4. Match registered cards by last four digits, then by holder.
        5. Stamp due date, source and ``is_paid=False``.

        Args:
            transactions: Categorized transactions
            statement_type: ``checking`` or ``credit_card``
            user_id: Owner of the import
            preloaded_cards: The user's cards, when the caller already has them

        Returns:
            Transactions ready to store, in input order
        """
        working = list(transactions)

        if statement_type == CREDIT_CARD:
            kept = [txn for txn in working if not is_invoice_payment(txn.description)]
            if len(kept) < len(working):
                logger.debug("invoice_payments_removed", count=len(working) - len(kept))
            working = kept

        working = [redetect_installment(txn) for txn in working]

        members = await self._resolve_members(working, user_id)
        staged = [
            _Working(
                txn=txn,
                family_member_id=(
                    members[txn.card_holder_name].id if txn.card_holder_name else None
                ),
            )
            for txn in working
        ]

        cards = (
            list(preloaded_cards)
            if preloaded_cards is not None
            else self.db.get_all_credit_cards(user_id)
        )
        staged = self._match_cards(staged, cards)

        cards_by_id = {card.id: card for card in cards}
        source = (
            SOURCE_CREDIT_CARD_IMPORT
            if statement_type == CREDIT_CARD
            else SOURCE_BANK_STATEMENT_IMPORT
        )
        results = [
            NewTransaction(
                date=item.txn.date,
                amount=item.txn.amount,
                type=item.txn.type,
                category_id=item.txn.category_id,
                description=item.txn.description,
                mode=item.txn.mode or MODE_SINGLE,
                installment_number=item.txn.installment_number,
                installments_total=item.txn.installments_total,
                card_id=item.card_id,
                family_member_id=item.family_member_id,
                due_date=calculate_due_date(
                    item.txn.date, statement_type, cards_by_id.get(item.card_id)
                ),
                is_paid=False,
                source=source,
            )
            for item in staged
        ]
        logger.debug("post_processing_finished", count=len(results))
        return results

    async def _resolve_members(
        self, transactions: Sequence[CategorizedTransaction], user_id: str
    ) -> dict[str, FamilyMember]:
        names = list(
            dict.fromkeys(txn.card_holder_name for txn in transactions if txn.card_holder_name)
        )
        if not names:
            return {}
        resolved = await asyncio.gather(
            *(asyncio.to_thread(self._find_or_create_member, user_id, name) for name in names)
        )
        return dict(zip(names, resolved))

    def _find_or_create_member(self, user_id: str, name: str) -> FamilyMember:
        member = self.db.find_family_member_by_name(user_id, name)
        if member is not None:
            return member
        relationship = guess_relationship(name)
        logger.info("family_member_created", name=name, relationship=relationship)
        return self.db.create_family_member(user_id, name, relationship)

    def _match_cards(
        self, staged: list[_Working], cards: Sequence[CreditCard]
    ) -> list[_Working]:
        by_digits = {card.last_four_digits: card for card in cards}
        by_member = {
            card.holder_family_member_id: card
            for card in cards
            if card.holder_family_member_id
        }

        matched = []
        for item in staged:
            digits = item.txn.card_last_digits
            if digits:
                card = by_digits.get(digits)
                if card is None:
                    logger.debug("card_not_registered", last_digits=digits)
                    matched.append(item)
                    continue
                matched.append(
                    replace(
                        item,
                        card_id=card.id,
                        family_member_id=card.holder_family_member_id or item.family_member_id,
                    )
                )
            elif item.family_member_id and item.family_member_id in by_member:
                matched.append(replace(item, card_id=by_member[item.family_member_id].id))
            else:
                matched.append(item)
        return matched
