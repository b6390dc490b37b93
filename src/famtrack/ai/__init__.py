"""Language model integration: providers, categorization and extraction."""

from famtrack.ai.categorizer import TransactionCategorizer
from famtrack.ai.extractor import StatementExtractor
from famtrack.ai.factories import create_providers
from famtrack.ai.providers import LLMProvider

__all__ = [
    "LLMProvider",
    "StatementExtractor",
    "TransactionCategorizer",
    "create_providers",
]
