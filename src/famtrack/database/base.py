"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from famtrack.domain.entities import (
    Category,
    CreditCard,
    FamilyMember,
    NewTransaction,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for famtrack.

    Every user-owned record is scoped by ``user_id``. Implementations may be
    called from worker threads and must not share a session across threads.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        name: str,
        category_type: str,
        parent_id: Optional[str] = None,
        user_id: Optional[str] = None,
        category_id: Optional[str] = None,
    ) -> str:
        """Create a category. Returns category ID.

        A ``user_id`` of None creates a shared default category.
        """
        pass

    @abstractmethod
    def get_category(self, category_id: str) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_all_categories(self, user_id: str) -> list[Category]:
        """List the shared default categories plus the user's own, in catalog order."""
        pass

    # Credit card operations
    @abstractmethod
    def create_credit_card(
        self,
        user_id: str,
        name: str,
        last_four_digits: str,
        closing_day: Optional[int] = None,
        due_day: Optional[int] = None,
        holder_family_member_id: Optional[str] = None,
    ) -> str:
        """Create a credit card. Returns card ID."""
        pass

    @abstractmethod
    def get_all_credit_cards(self, user_id: str) -> list[CreditCard]:
        """List the user's credit cards."""
        pass

    # Family member operations
    @abstractmethod
    def get_all_family_members(self, user_id: str) -> list[FamilyMember]:
        """List the user's family members."""
        pass

    @abstractmethod
    def find_family_member_by_name(self, user_id: str, name: str) -> Optional[FamilyMember]:
        """Find a family member whose name contains ``name``, ignoring case."""
        pass

    @abstractmethod
    def create_family_member(self, user_id: str, name: str, relationship: str) -> FamilyMember:
        """Create a family member and return it."""
        pass

    # Transaction operations
    @abstractmethod
    def batch_create_transactions(
        self, transactions: list[NewTransaction], user_id: str
    ) -> list[str]:
        """Store transactions in a single commit. Returns IDs in input order."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List the user's transactions ordered by date.

        Args:
            user_id: Owner of the transactions
            start_date: Optional start date filter
            end_date: Optional end date filter
        """
        pass
