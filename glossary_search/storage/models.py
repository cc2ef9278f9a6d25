"""SQLAlchemy models for dictionaries, terms, definitions and usage stats."""

import time
import uuid
from typing import List, Optional

from sqlalchemy import ForeignKey, Index, Integer, String, Text, UniqueConstraint, literal_column
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

SCHEMA_VERSION = 1

# Definitions created in the same millisecond keep their insertion order.
DEFINITION_ROWID = literal_column("definitions.rowid")


def generate_uuid() -> str:
    """Generate a new UUID string."""
    return str(uuid.uuid4())


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class Base(DeclarativeBase):
    pass


class DictionaryRow(Base):
    __tablename__ = "dictionaries"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False, default=now_ms)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False, default=now_ms)

    terms: Mapped[List["TermRow"]] = relationship(
        back_populates="dictionary", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Dictionary {self.name} ({self.id})>"


class TermRow(Base):
    __tablename__ = "terms"
    __table_args__ = (
        UniqueConstraint("dictionary_id", "normalized_term", name="uq_terms_dictionary_normalized"),
        Index("idx_terms_normalized", "normalized_term"),
        Index("idx_terms_dictionary", "dictionary_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    dictionary_id: Mapped[str] = mapped_column(
        ForeignKey("dictionaries.id", ondelete="CASCADE"), nullable=False
    )
    term: Mapped[str] = mapped_column(Text, nullable=False)
    normalized_term: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False, default=now_ms)
    updated_at: Mapped[int] = mapped_column(Integer, nullable=False, default=now_ms)

    dictionary: Mapped[DictionaryRow] = relationship(back_populates="terms")
    definitions: Mapped[List["DefinitionRow"]] = relationship(
        back_populates="term",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [DefinitionRow.created_at, DEFINITION_ROWID],
    )

    def __repr__(self) -> str:
        return f"<Term {self.term} ({self.id})>"


class DefinitionRow(Base):
    __tablename__ = "definitions"
    __table_args__ = (Index("idx_definitions_term", "term_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    term_id: Mapped[str] = mapped_column(ForeignKey("terms.id", ondelete="CASCADE"), nullable=False)
    definition: Mapped[str] = mapped_column(Text, nullable=False)
    context: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[int] = mapped_column(Integer, nullable=False, default=now_ms)

    term: Mapped[TermRow] = relationship(back_populates="definitions")


class UsageStatRow(Base):
    __tablename__ = "usage_stats"
    __table_args__ = (Index("idx_usage_stats_term", "term_id"),)

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    term_id: Mapped[str] = mapped_column(
        ForeignKey("terms.id", ondelete="CASCADE"), nullable=False, unique=True
    )
    lookup_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_accessed: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)


class SchemaVersionRow(Base):
    __tablename__ = "schema_version"

    version: Mapped[int] = mapped_column(Integer, primary_key=True)
    applied_at: Mapped[int] = mapped_column(Integer, nullable=False)
