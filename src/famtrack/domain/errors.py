"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class ConfigurationError(DomainError):
    """The user's data is incomplete in a way no fallback can paper over."""


class ProviderError(DomainError):
    """A language model provider failed or returned unusable output."""


def category_not_found(category_id: str) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def card_not_found(card: str) -> str:
    """Return message for missing credit card."""
    return f"Credit card '{card}' not found"


def family_member_not_found(name: str) -> str:
    """Return message for missing family member."""
    return f"Family member '{name}' not found"


def no_category_of_type(category_type: str) -> str:
    """Return message when the catalog has no category of a type."""
    return (
        f"No {category_type} category exists. "
        "Run 'init-categories' or create one before importing."
    )


def invalid_category_id(category_id: str) -> str:
    """Return message for a category ID that is neither a UUID nor a legacy ID."""
    return (
        f"Invalid category ID '{category_id}'. "
        "Expected a UUID or a legacy numeric ID from 1 to 12."
    )


def duplicate_card_digits(last_four_digits: str) -> str:
    """Return message for a second card with the same final digits."""
    return f"A credit card ending in {last_four_digits} already exists"
