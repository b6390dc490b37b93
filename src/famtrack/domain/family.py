"""Family member domain service."""

from famtrack.database.base import Database
from famtrack.domain.entities import FamilyMember, RELATIONSHIPS
from famtrack.domain.errors import ValidationError


class FamilyService:
    """Service for managing family members."""

    def __init__(self, db: Database):
        self.db = db

    def add_member(self, user_id: str, name: str, relationship: str = "other") -> FamilyMember:
        """Add a family member.

        Raises:
            ValidationError: If the name is blank or the relationship unknown
        """
        name = name.strip()
        if not name:
            raise ValidationError("Family member name cannot be empty")
        if relationship not in RELATIONSHIPS:
            raise ValidationError(
                f"Invalid relationship '{relationship}'. Must be one of: "
                f"{', '.join(RELATIONSHIPS)}"
            )
        return self.db.create_family_member(user_id, name, relationship)

    def list_members(self, user_id: str) -> list[FamilyMember]:
        return self.db.get_all_family_members(user_id)
