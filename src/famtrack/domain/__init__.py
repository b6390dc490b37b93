"""Domain layer for famtrack application."""

from famtrack.domain.transaction import TransactionService
from famtrack.domain.category import CategoryService
from famtrack.domain.card import CardService
from famtrack.domain.family import FamilyService

__all__ = [
    "TransactionService",
    "CategoryService",
    "CardService",
    "FamilyService",
]
