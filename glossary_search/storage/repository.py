"""
Glossary Repository
Database access layer for dictionaries, terms, definitions and usage stats.
"""

from typing import Iterable, List, Optional, Set

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..core.exceptions import DuplicateDictionaryError, DuplicateTermError
from ..core.filters import FilterSpec
from ..core.normalizer import TextNormalizer
from ..models.glossary import (
    CandidateTerm,
    Definition,
    Dictionary,
    DictionaryTermCount,
    Statistics,
    Term,
    TermDetails,
    TermUsage,
)
from .database import Database
from .models import DefinitionRow, DictionaryRow, TermRow, UsageStatRow, now_ms
from .sql_filter import build_statement

logger = structlog.get_logger()

_TERM_DETAILS = (selectinload(TermRow.dictionary), selectinload(TermRow.definitions))


class GlossaryRepository:
    """
    Repository for glossary database operations.

    Every method runs in its own transaction and returns detached pydantic
    records, never ORM rows.
    """

    def __init__(self, database: Database) -> None:
        self.database = database
        self.normalizer = TextNormalizer()

    # ==================== DICTIONARY OPERATIONS ====================

    def create_dictionary(self, name: str, description: Optional[str] = None) -> Dictionary:
        """Create a new dictionary."""
        with self.database.session() as session:
            row = DictionaryRow(name=name, description=description)
            session.add(row)
            self._flush_unique(session, DuplicateDictionaryError(f"Dictionary '{name}' already exists"))
            logger.info("Created dictionary", dictionary_id=row.id, name=name)
            return Dictionary.model_validate(row)

    def list_dictionaries(self) -> List[Dictionary]:
        """List all dictionaries ordered by name."""
        with self.database.session() as session:
            rows = session.scalars(select(DictionaryRow).order_by(DictionaryRow.name))
            return [Dictionary.model_validate(row) for row in rows]

    def get_dictionary(self, dictionary_id: str) -> Optional[Dictionary]:
        with self.database.session() as session:
            row = session.get(DictionaryRow, dictionary_id)
            return Dictionary.model_validate(row) if row else None

    def get_dictionary_by_name(self, name: str) -> Optional[Dictionary]:
        with self.database.session() as session:
            row = session.scalar(select(DictionaryRow).where(DictionaryRow.name == name))
            return Dictionary.model_validate(row) if row else None

    def update_dictionary(
        self,
        dictionary_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Optional[Dictionary]:
        """Update a dictionary's name and/or description."""
        with self.database.session() as session:
            row = session.get(DictionaryRow, dictionary_id)
            if row is None:
                return None

            if name is not None:
                row.name = name
            if description is not None:
                row.description = description
            row.updated_at = now_ms()

            self._flush_unique(session, DuplicateDictionaryError(f"Dictionary '{name}' already exists"))
            return Dictionary.model_validate(row)

    def delete_dictionary(self, dictionary_id: str) -> bool:
        """Delete a dictionary together with its terms and definitions."""
        with self.database.session() as session:
            row = session.get(DictionaryRow, dictionary_id)
            if row is None:
                return False
            session.delete(row)
        logger.info("Deleted dictionary", dictionary_id=dictionary_id)
        return True

    def resolve_dictionary(self, ref: str) -> Optional[str]:
        """Resolve a dictionary id or name to an id."""
        if not ref:
            return None
        with self.database.session() as session:
            if session.get(DictionaryRow, ref) is not None:
                return ref
            return session.scalar(select(DictionaryRow.id).where(DictionaryRow.name == ref))

    # ==================== TERM OPERATIONS ====================

    def add_term(
        self,
        dictionary_id: str,
        term: str,
        definition: Optional[str] = None,
        context: Optional[str] = None,
    ) -> TermDetails:
        """
        Add a term, and its first definition when one is given, in one transaction.

        Raises:
            DuplicateTermError: If the dictionary already holds the normalized term
        """
        normalized = self.normalizer.normalize(term)
        with self.database.session() as session:
            row = TermRow(dictionary_id=dictionary_id, term=term, normalized_term=normalized)
            if definition is not None:
                row.definitions.append(DefinitionRow(definition=definition, context=context))
            session.add(row)
            self._flush_unique(
                session, DuplicateTermError(f"Term '{term}' already exists in this dictionary")
            )
            session.refresh(row)
            return TermDetails.model_validate(row)

    def get_term(self, term_id: str) -> Optional[TermDetails]:
        with self.database.session() as session:
            row = session.get(TermRow, term_id, options=_TERM_DETAILS)
            return TermDetails.model_validate(row) if row else None

    def get_terms_by_normalized(self, normalized_term: str) -> List[TermDetails]:
        """Get a term from every dictionary that defines it."""
        with self.database.session() as session:
            rows = session.scalars(
                select(TermRow)
                .where(TermRow.normalized_term == normalized_term)
                .options(*_TERM_DETAILS)
                .order_by(TermRow.created_at, TermRow.id)
            )
            return [TermDetails.model_validate(row) for row in rows]

    def update_term(self, term_id: str, term: str) -> Optional[Term]:
        """Rename a term; its normalized form is recomputed."""
        with self.database.session() as session:
            row = session.get(TermRow, term_id)
            if row is None:
                return None

            row.term = term
            row.normalized_term = self.normalizer.normalize(term)
            row.updated_at = now_ms()
            self._flush_unique(
                session, DuplicateTermError(f"Term '{term}' already exists in this dictionary")
            )
            return Term.model_validate(row)

    def delete_term(self, term_id: str) -> bool:
        with self.database.session() as session:
            row = session.get(TermRow, term_id)
            if row is None:
                return False
            session.delete(row)
        return True

    def list_terms(self, dictionary_id: str) -> List[TermDetails]:
        """List a dictionary's terms ordered by term text."""
        with self.database.session() as session:
            rows = session.scalars(
                select(TermRow)
                .where(TermRow.dictionary_id == dictionary_id)
                .options(*_TERM_DETAILS)
                .order_by(TermRow.term, TermRow.id)
            )
            return [TermDetails.model_validate(row) for row in rows]

    def resolve_term(self, ref: str) -> Optional[str]:
        """Resolve a term id, or failing that its normalized text, to an id."""
        if not ref:
            return None
        with self.database.session() as session:
            if session.get(TermRow, ref) is not None:
                return ref
            return session.scalar(
                select(TermRow.id)
                .where(TermRow.normalized_term == self.normalizer.normalize(ref))
                .order_by(TermRow.created_at, TermRow.id)
                .limit(1)
            )

    def normalized_terms(self, dictionary_id: str) -> Set[str]:
        with self.database.session() as session:
            return set(
                session.scalars(
                    select(TermRow.normalized_term).where(TermRow.dictionary_id == dictionary_id)
                )
            )

    def all_term_texts(self) -> List[str]:
        """Distinct term texts across all dictionaries."""
        with self.database.session() as session:
            return list(session.scalars(select(TermRow.term).distinct().order_by(TermRow.term)))

    # ==================== DEFINITION OPERATIONS ====================

    def add_definition(
        self, term_id: str, definition: str, context: Optional[str] = None
    ) -> Optional[Definition]:
        with self.database.session() as session:
            term = session.get(TermRow, term_id)
            if term is None:
                return None

            row = DefinitionRow(term_id=term_id, definition=definition, context=context)
            session.add(row)
            term.updated_at = now_ms()
            session.flush()
            return Definition.model_validate(row)

    def get_definition(self, definition_id: str) -> Optional[Definition]:
        with self.database.session() as session:
            row = session.get(DefinitionRow, definition_id)
            return Definition.model_validate(row) if row else None

    def list_definitions(self, term_id: str) -> List[Definition]:
        """List a term's definitions in creation order."""
        with self.database.session() as session:
            term = session.get(TermRow, term_id, options=[selectinload(TermRow.definitions)])
            if term is None:
                return []
            return [Definition.model_validate(row) for row in term.definitions]

    def update_definition(self, definition_id: str, definition: str) -> Optional[Definition]:
        with self.database.session() as session:
            row = session.get(DefinitionRow, definition_id)
            if row is None:
                return None
            row.definition = definition
            row.term.updated_at = now_ms()
            return Definition.model_validate(row)

    def update_definition_context(
        self, definition_id: str, context: Optional[str]
    ) -> Optional[Definition]:
        with self.database.session() as session:
            row = session.get(DefinitionRow, definition_id)
            if row is None:
                return None
            row.context = context
            row.term.updated_at = now_ms()
            return Definition.model_validate(row)

    def delete_definition(self, definition_id: str) -> bool:
        with self.database.session() as session:
            row = session.get(DefinitionRow, definition_id)
            if row is None:
                return False
            row.term.updated_at = now_ms()
            session.delete(row)
        return True

    # ==================== SEARCH ====================

    def load_candidates(
        self,
        dictionary_ids: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
    ) -> List[CandidateTerm]:
        """
        Load the terms the matcher scans for, longest first.

        Args:
            dictionary_ids: Restrict to these dictionaries; ``None`` loads all
            limit: Maximum number of candidates

        Returns:
            Candidate terms with their definitions in creation order
        """
        statement = select(TermRow).options(*_TERM_DETAILS)
        if dictionary_ids is not None:
            ids = list(dictionary_ids)
            if not ids:
                return []
            statement = statement.where(TermRow.dictionary_id.in_(ids))

        statement = statement.order_by(
            func.length(TermRow.term).desc(), TermRow.created_at, TermRow.id
        )
        if limit is not None:
            # One extra row tells whether the cap dropped anything
            statement = statement.limit(limit + 1)

        with self.database.session() as session:
            rows = list(session.scalars(statement))
            if limit is not None and len(rows) > limit:
                rows = rows[:limit]
                logger.warning(
                    "Candidate term limit reached, shortest terms are not scanned",
                    limit=limit,
                    shortest_kept=rows[-1].term if rows else None,
                )

            return [
                CandidateTerm(
                    id=row.id,
                    dictionary_id=row.dictionary_id,
                    dictionary_name=row.dictionary.name,
                    text=row.term,
                    normalized_text=row.normalized_term,
                    definitions=[d.definition for d in row.definitions],
                )
                for row in rows
            ]

    def execute_filter(self, filter_spec: FilterSpec) -> List[TermDetails]:
        """Run a search filter; a match-nothing filter issues no query."""
        statement = build_statement(filter_spec)
        if statement is None:
            return []

        with self.database.session() as session:
            rows = session.scalars(statement.options(*_TERM_DETAILS))
            return [TermDetails.model_validate(row) for row in rows]

    # ==================== USAGE STATISTICS ====================

    def record_lookup(self, term_ids: Iterable[str]) -> None:
        """Increment the lookup counter of each term."""
        timestamp = now_ms()
        with self.database.session() as session:
            for term_id in term_ids:
                stat = session.scalar(select(UsageStatRow).where(UsageStatRow.term_id == term_id))
                if stat is None:
                    session.add(UsageStatRow(term_id=term_id, lookup_count=1, last_accessed=timestamp))
                else:
                    stat.lookup_count += 1
                    stat.last_accessed = timestamp

    def get_statistics(self, dictionary_id: Optional[str] = None, top: int = 10) -> Statistics:
        """
        Aggregate counts over the store, optionally for a single dictionary.

        Args:
            dictionary_id: Restrict every count to this dictionary
            top: Number of most looked-up terms to report
        """
        with self.database.session() as session:
            dictionaries = select(func.count(DictionaryRow.id))
            terms = select(func.count(TermRow.id))
            definitions = select(func.count(DefinitionRow.id)).join(
                TermRow, DefinitionRow.term_id == TermRow.id
            )
            per_dictionary = (
                select(DictionaryRow.id, DictionaryRow.name, func.count(TermRow.id))
                .outerjoin(TermRow, TermRow.dictionary_id == DictionaryRow.id)
                .group_by(DictionaryRow.id, DictionaryRow.name)
                .order_by(DictionaryRow.name)
            )
            usage = (
                select(UsageStatRow, TermRow.term, DictionaryRow.name)
                .join(TermRow, UsageStatRow.term_id == TermRow.id)
                .join(DictionaryRow, TermRow.dictionary_id == DictionaryRow.id)
                .order_by(UsageStatRow.lookup_count.desc(), TermRow.term)
                .limit(top)
            )

            if dictionary_id is not None:
                dictionaries = dictionaries.where(DictionaryRow.id == dictionary_id)
                terms = terms.where(TermRow.dictionary_id == dictionary_id)
                definitions = definitions.where(TermRow.dictionary_id == dictionary_id)
                per_dictionary = per_dictionary.where(DictionaryRow.id == dictionary_id)
                usage = usage.where(TermRow.dictionary_id == dictionary_id)

            return Statistics(
                total_dictionaries=session.scalar(dictionaries),
                total_terms=session.scalar(terms),
                total_definitions=session.scalar(definitions),
                dictionaries=[
                    DictionaryTermCount(dictionary_id=row_id, name=name, term_count=count)
                    for row_id, name, count in session.execute(per_dictionary)
                ],
                most_looked_up=[
                    TermUsage(
                        term_id=stat.term_id,
                        term=term,
                        dictionary=dictionary_name,
                        lookup_count=stat.lookup_count,
                        last_accessed=stat.last_accessed,
                    )
                    for stat, term, dictionary_name in session.execute(usage)
                ],
            )

    @staticmethod
    def _flush_unique(session: Session, error: Exception) -> None:
        try:
            session.flush()
        except IntegrityError as e:
            logger.warning("Unique constraint violated", error=str(error))
            raise error from e
