"""Mapper functions to convert SQLAlchemy models into domain entities."""

from famtrack.domain import entities as domain
from famtrack.database.models import (
    Category as ORMCategory,
    CreditCard as ORMCreditCard,
    FamilyMember as ORMFamilyMember,
    Transaction as ORMTransaction,
)


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        type=orm_category.type,
        parent_id=orm_category.parent_id,
        user_id=orm_category.user_id,
        created_at=orm_category.created_at,
    )


def credit_card_to_domain(orm_card: ORMCreditCard) -> domain.CreditCard:
    """Convert SQLAlchemy CreditCard model to domain CreditCard entity."""
    return domain.CreditCard(
        id=orm_card.id,
        name=orm_card.name,
        last_four_digits=orm_card.last_four_digits,
        closing_day=orm_card.closing_day,
        due_day=orm_card.due_day,
        holder_family_member_id=orm_card.holder_family_member_id,
        created_at=orm_card.created_at,
    )


def family_member_to_domain(orm_member: ORMFamilyMember) -> domain.FamilyMember:
    """Convert SQLAlchemy FamilyMember model to domain FamilyMember entity."""
    return domain.FamilyMember(
        id=orm_member.id,
        name=orm_member.name,
        relationship=orm_member.relationship,
        created_at=orm_member.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        amount=orm_transaction.amount,
        type=orm_transaction.type,
        category_id=orm_transaction.category_id,
        description=orm_transaction.description,
        mode=orm_transaction.mode,
        installment_number=orm_transaction.installment_number,
        installments_total=orm_transaction.installments_total,
        card_id=orm_transaction.card_id,
        family_member_id=orm_transaction.family_member_id,
        due_date=orm_transaction.due_date,
        is_paid=orm_transaction.is_paid,
        is_recurring=orm_transaction.is_recurring,
        recurring_months=orm_transaction.recurring_months,
        source=orm_transaction.source,
        created_at=orm_transaction.created_at,
    )
