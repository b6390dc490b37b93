"""Domain model entities for famtrack.

Pure data classes for the family finance model and the intermediate shapes
produced while importing a statement. Storage-specific details live in the
database layer; everything here is independent of the schema.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

# Transaction direction
INCOME = "income"
EXPENSE = "expense"
TRANSACTION_TYPES = (INCOME, EXPENSE)

# Statement kinds
CHECKING = "checking"
CREDIT_CARD = "credit_card"
STATEMENT_TYPES = (CHECKING, CREDIT_CARD)

# Transaction modes
MODE_SINGLE = "avulsa"
MODE_INSTALLMENT = "parcelada"
TRANSACTION_MODES = (MODE_SINGLE, MODE_INSTALLMENT)

# Transaction provenance
SOURCE_MANUAL = "manual"
SOURCE_CREDIT_CARD_IMPORT = "credit_card_import"
SOURCE_BANK_STATEMENT_IMPORT = "bank_statement_import"

# Family member relationships
RELATIONSHIPS = ("self", "spouse", "child", "parent", "other")


@dataclass(frozen=True)
class Category:
    """Category domain entity with a two-level hierarchy."""

    id: str
    name: str
    type: str
    parent_id: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_subcategory(self) -> bool:
        return self.parent_id is not None


@dataclass(frozen=True)
class CreditCard:
    """Registered credit card."""

    id: str
    name: str
    last_four_digits: str
    closing_day: Optional[int] = None
    due_day: Optional[int] = None
    holder_family_member_id: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class FamilyMember:
    """Family member a transaction or card can be attributed to."""

    id: str
    name: str
    relationship: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ParsedTransaction:
    """A statement line extracted before categorization.

    Amount is never negative; the direction lives in ``type``.
    """

    date: date
    description: str
    amount: Decimal
    type: Optional[str] = None
    mode: Optional[str] = None
    installment_number: Optional[int] = None
    installments_total: Optional[int] = None
    card_last_digits: Optional[str] = None
    card_holder_name: Optional[str] = None


@dataclass(frozen=True)
class CategorizedTransaction(ParsedTransaction):
    """A parsed transaction with the category chosen for it."""

    category_id: str = ""


@dataclass(frozen=True)
class ParserResult:
    """Output of the local statement parser."""

    transactions: list[ParsedTransaction]
    bank: str
    statement_type: str
    parsing_method: str
    confidence: float

    @property
    def total_transactions(self) -> int:
        return len(self.transactions)


@dataclass(frozen=True)
class NewTransaction:
    """A transaction ready to be stored.

    Shared by manual entry and statement import.
    """

    date: date
    amount: Decimal
    type: str
    category_id: str
    description: str
    mode: str = MODE_SINGLE
    installment_number: Optional[int] = None
    installments_total: Optional[int] = None
    card_id: Optional[str] = None
    family_member_id: Optional[str] = None
    due_date: Optional[date] = None
    is_paid: bool = False
    is_recurring: bool = False
    recurring_months: Optional[int] = None
    source: str = SOURCE_MANUAL


@dataclass(frozen=True)
class Transaction:
    """Stored transaction domain entity."""

    id: str
    date: date
    amount: Decimal
    type: str
    category_id: str
    description: str
    mode: str
    installment_number: Optional[int]
    installments_total: Optional[int]
    card_id: Optional[str]
    family_member_id: Optional[str]
    due_date: Optional[date]
    is_paid: bool
    is_recurring: bool
    recurring_months: Optional[int]
    source: str
    created_at: datetime
