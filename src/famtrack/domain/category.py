"""Category domain service."""

from typing import Optional

import structlog

from famtrack.database.base import Database
from famtrack.domain.category_mapping import DEFAULT_CATEGORIES
from famtrack.domain.entities import Category, TRANSACTION_TYPES
from famtrack.domain.errors import NotFoundError, ValidationError, category_not_found

logger = structlog.get_logger(__name__)


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        name: str,
        category_type: str,
        parent_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> str:
        """Create a category.

        Args:
            name: Category name
            category_type: ``income`` or ``expense``
            parent_id: Optional parent category ID
            user_id: Owner; None creates a shared category

        Returns:
            Category ID

        Raises:
            ValidationError: If the type is unknown or differs from the parent's
            NotFoundError: If the parent category doesn't exist
        """
        if category_type not in TRANSACTION_TYPES:
            raise ValidationError(
                f"Invalid category type '{category_type}'. Must be one of: "
                f"{', '.join(TRANSACTION_TYPES)}"
            )
        if parent_id is not None:
            parent = self.db.get_category(parent_id)
            if parent is None:
                raise NotFoundError(category_not_found(parent_id))
            if parent.type != category_type:
                raise ValidationError(
                    f"Subcategory type '{category_type}' does not match parent "
                    f"'{parent.name}' ({parent.type})"
                )
        return self.db.create_category(
            name=name, category_type=category_type, parent_id=parent_id, user_id=user_id
        )

    def get_category(self, category_id: str) -> Optional[Category]:
        """Get category by ID, or None if not found."""
        return self.db.get_category(category_id)

    def list_categories(self, user_id: str) -> list[Category]:
        """List the shared and user-owned categories in catalog order."""
        return self.db.get_all_categories(user_id)

    def get_category_tree(self, user_id: str) -> list[tuple[Category, list[Category]]]:
        """Parent categories with their subcategories, in catalog order."""
        categories = self.list_categories(user_id)
        children: dict[str, list[Category]] = {}
        for category in categories:
            if category.parent_id is not None:
                children.setdefault(category.parent_id, []).append(category)
        return [
            (category, children.get(category.id, []))
            for category in categories
            if category.parent_id is None
        ]

    def seed_default_categories(self) -> int:
        """Create the shared default catalog rows that are missing.

        Returns:
            Number of categories created
        """
        created = 0
        for parent_name, parent_id, category_type, subcategories in DEFAULT_CATEGORIES:
            if self.db.get_category(parent_id) is None:
                self.db.create_category(
                    name=parent_name, category_type=category_type, category_id=parent_id
                )
                created += 1
            for name, category_id in subcategories:
                if self.db.get_category(category_id) is None:
                    self.db.create_category(
                        name=name,
                        category_type=category_type,
                        parent_id=parent_id,
                        category_id=category_id,
                    )
                    created += 1
        logger.info("default_categories_seeded", created=created)
        return created
