"""Shared pytest fixtures for famtrack tests."""

import os
import re
import tempfile
from pathlib import Path

import pytest
import structlog

from famtrack.ai.providers import LLMProvider
from famtrack.database.factories import create_sqlite_database
from famtrack.domain.card import CardService
from famtrack.domain.category import CategoryService
from famtrack.domain.family import FamilyService
from famtrack.domain.transaction import TransactionService

USER_ID = "user-1"

_PROMPT_TRANSACTION = re.compile(r'^\d+\. "', re.M)


class FakeProvider(LLMProvider):
    """Provider that answers from a script instead of a network call.

    Each reply is a dict (returned as is), an exception (raised), or a
    callable taking the prompt. The last reply repeats once the script runs
    out.
    """

    def __init__(self, name, *replies):
        self.name = name
        self.replies = list(replies)
        self.prompts = []

    async def generate_json(self, prompt):
        self.prompts.append(prompt)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(prompt)
        return reply


def count_prompt_transactions(prompt: str) -> int:
    """Number of transactions listed in a categorization prompt."""
    return len(_PROMPT_TRANSACTION.findall(prompt))


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_id():
    return USER_ID


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def card_service(temp_db):
    """Create a CardService with a temporary database."""
    return CardService(temp_db)


@pytest.fixture
def family_service(temp_db):
    """Create a FamilyService with a temporary database."""
    return FamilyService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def catalog(category_service):
    """Seed the default categories and return them in catalog order."""
    category_service.seed_default_categories()
    return category_service.list_categories(USER_ID)


@pytest.fixture
def fake_provider():
    """Factory for scripted providers: ``fake_provider("gemini", reply, ...)``."""
    return FakeProvider


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configured by CLI invocations."""
    yield
    structlog.reset_defaults()
