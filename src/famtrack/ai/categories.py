"""Resolving model-supplied category references against the catalog."""

from typing import Any, Optional, Sequence

import structlog

from famtrack.domain.entities import Category, INCOME
from famtrack.domain.errors import ConfigurationError, no_category_of_type
from famtrack.utils.text import normalize_name

logger = structlog.get_logger(__name__)

OTHER_EXPENSES = "Outros Despesas"
OTHER_INCOME = "Outros Receitas"


def resolve_category_reference(value: Any, catalog: Sequence[Category]) -> Optional[str]:
    """Map a model's category answer to a catalog id.

    Accepts either an id present in the catalog or a category name, matched
    without regard to case or accents.

    Returns:
        The category id, or None when the value matches nothing
    """
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()

    for category in catalog:
        if category.id == value:
            return category.id

    wanted = normalize_name(value)
    for category in catalog:
        if normalize_name(category.name) == wanted:
            logger.debug("category_name_resolved", value=value, category_id=category.id)
            return category.id

    logger.debug("category_unresolved", value=value)
    return None


def find_other_category(catalog: Sequence[Category], transaction_type: str) -> str:
    """Pick the catch-all category for a transaction type.

    In order: the exact "Outros Despesas"/"Outros Receitas" name, any category
    of the type whose name contains "outros", then the last category of the
    type in catalog order.

    Raises:
        ConfigurationError: If the catalog has no category of that type
    """
    exact = OTHER_INCOME if transaction_type == INCOME else OTHER_EXPENSES
    for category in catalog:
        if category.name == exact:
            return category.id

    of_type = [category for category in catalog if category.type == transaction_type]
    for category in of_type:
        if "outros" in normalize_name(category.name):
            return category.id

    if of_type:
        return of_type[-1].id

    raise ConfigurationError(no_category_of_type(transaction_type))
