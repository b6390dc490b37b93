"""SQLAlchemy models for famtrack database."""

import uuid
from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class Category(Base):
    """Category model with hierarchical structure.

    Rows with a NULL user_id are the shared default catalog.
    """

    __tablename__ = "categories"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    type = Column(String(16), nullable=False)
    parent_id = Column(String(36), ForeignKey("categories.id"), nullable=True)
    user_id = Column(String, nullable=True, index=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    parent = relationship("Category", remote_side=[id], backref="children")
    transactions = relationship("Transaction", back_populates="category")


class FamilyMember(Base):
    """Family member model."""

    __tablename__ = "family_members"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    relationship = Column(String(16), nullable=False, default="other")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class CreditCard(Base):
    """Credit card model."""

    __tablename__ = "credit_cards"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    last_four_digits = Column(String(4), nullable=False)
    closing_day = Column(Integer, nullable=True)
    due_day = Column(Integer, nullable=True)
    holder_family_member_id = Column(
        String(36), ForeignKey("family_members.id"), nullable=True
    )
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    holder = relationship("FamilyMember")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String, nullable=False, index=True)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(String(16), nullable=False)
    category_id = Column(String(36), ForeignKey("categories.id"), nullable=False)
    description = Column(String, nullable=False)
    mode = Column(String(16), nullable=False, default="avulsa")
    installment_number = Column(Integer, nullable=True)
    installments_total = Column(Integer, nullable=True)
    card_id = Column(String(36), ForeignKey("credit_cards.id"), nullable=True)
    family_member_id = Column(String(36), ForeignKey("family_members.id"), nullable=True)
    due_date = Column(Date, nullable=True)
    is_paid = Column(Boolean, default=False, nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_months = Column(Integer, nullable=True)
    source = Column(String(32), nullable=False, default="manual")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    category = relationship("Category", back_populates="transactions")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    connect_args = {}
    if database_url.startswith("sqlite"):
        # Family member lookups run on worker threads
        connect_args["check_same_thread"] = False
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
