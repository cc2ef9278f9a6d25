"""Lower ``FilterSpec`` trees to SQLAlchemy select statements."""

from typing import Optional

from sqlalchemy import Select, and_, false, func, or_, select, true
from sqlalchemy.sql.elements import ColumnElement

from ..core.filters import (
    LIKE_ESCAPE,
    AllOf,
    AnyOf,
    DictionaryIn,
    FieldPredicate,
    FilterSpec,
    MatchNothing,
    SearchField,
)
from .models import DefinitionRow, DictionaryRow, TermRow

ORDER_COLUMNS = {
    "term": (TermRow.term, TermRow.id),
}


def field_column(field: SearchField) -> ColumnElement:
    """Column expression a search field is compared against."""
    if field is SearchField.TERM:
        return TermRow.normalized_term
    if field is SearchField.DEFINITION:
        return func.lower(DefinitionRow.definition)
    return func.lower(DefinitionRow.context)


def lower_predicate(predicate) -> ColumnElement:
    """Translate one predicate node into a boolean SQL expression."""
    if isinstance(predicate, FieldPredicate):
        column = field_column(predicate.field)
        pattern = predicate.pattern
        if pattern is None:
            return column == predicate.value
        return column.like(pattern, escape=LIKE_ESCAPE)

    if isinstance(predicate, AnyOf):
        if not predicate.predicates:
            return false()
        return or_(*(lower_predicate(child) for child in predicate.predicates))

    if isinstance(predicate, AllOf):
        if not predicate.predicates:
            return true()
        return and_(*(lower_predicate(child) for child in predicate.predicates))

    if isinstance(predicate, DictionaryIn):
        return TermRow.dictionary_id.in_(predicate.dictionary_ids)

    if isinstance(predicate, MatchNothing):
        return false()

    raise TypeError(f"Unsupported predicate node: {predicate!r}")


def build_statement(filter_spec: FilterSpec) -> Optional[Select]:
    """
    Build the select statement for a filter.

    Args:
        filter_spec: Filter produced by ``QueryBuilder.build_filter``

    Returns:
        A DISTINCT select of term rows, ordered and paginated, or ``None``
        when the filter matches nothing and no query should be issued
    """
    if filter_spec.matches_nothing:
        return None

    statement = select(TermRow).join(DictionaryRow, TermRow.dictionary_id == DictionaryRow.id)

    if filter_spec.searches_definitions:
        statement = statement.outerjoin(DefinitionRow, DefinitionRow.term_id == TermRow.id)

    if filter_spec.where is not None:
        statement = statement.where(lower_predicate(filter_spec.where))

    order_columns = []
    for key in filter_spec.order_by:
        try:
            order_columns.extend(ORDER_COLUMNS[key])
        except KeyError:
            raise ValueError(f"Unsupported order key: {key!r}") from None

    return (
        statement.distinct()
        .order_by(*order_columns)
        .limit(filter_spec.pagination.limit)
        .offset(filter_spec.pagination.offset)
    )
