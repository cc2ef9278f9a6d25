"""Storage-agnostic search filters.

A ``FilterSpec`` describes which term rows a search selects, in which order
and which page of them. Predicates form a small tagged union that any
backend can interpret; ``glossary_search.storage.sql_filter`` lowers it to
SQL.
"""

from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import InvalidSearchOptionError

LIKE_ESCAPE = "\\"


class MatchType(str, Enum):
    """How a field is compared with the normalized query."""

    EXACT = "exact"
    PREFIX = "prefix"
    FUZZY = "fuzzy"
    CONTAINS = "contains"


class SearchField(str, Enum):
    """Record fields a search may look at."""

    TERM = "term"
    DEFINITION = "definition"
    CONTEXT = "context"


class SearchOptions(BaseModel):
    """Options for an advanced term search."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    dictionaries: Optional[List[str]] = Field(
        None, description="Dictionary ids or names to restrict the search to"
    )
    match_type: MatchType = Field(MatchType.CONTAINS, description="Matching mode")
    search_in: List[SearchField] = Field(
        default_factory=lambda: [SearchField.TERM], description="Fields to search in"
    )
    limit: int = Field(100, ge=0, description="Maximum number of rows")
    offset: int = Field(0, ge=0, description="Number of rows to skip")

    @field_validator("search_in")
    @classmethod
    def dedupe_fields(cls, v: List[SearchField]) -> List[SearchField]:
        """Drop repeated fields while keeping their first position."""
        return list(dict.fromkeys(v))


def coerce_options(options: Union[SearchOptions, dict, None]) -> SearchOptions:
    """Turn raw option values into ``SearchOptions``, failing on unsupported values."""
    if options is None:
        return SearchOptions()
    if isinstance(options, SearchOptions):
        return options

    try:
        return SearchOptions.model_validate(options)
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        raise InvalidSearchOptionError(f"Invalid search options: {problems}") from exc


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so ``value`` is matched literally."""
    return (
        value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class FieldPredicate(BaseModel):
    """Compare one field with the normalized query."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["field"] = "field"
    field: SearchField
    match_type: MatchType
    value: str

    @property
    def pattern(self) -> Optional[str]:
        """LIKE pattern for wildcard modes, ``None`` for exact comparison."""
        if self.match_type is MatchType.EXACT:
            return None
        if self.match_type is MatchType.PREFIX:
            return f"{escape_like(self.value)}%"
        if self.match_type is MatchType.FUZZY:
            # "ai" -> "%a%i%": the query characters in order, anything in between
            return "%" + "%".join(escape_like(char) for char in self.value) + "%"
        return f"%{escape_like(self.value)}%"


class DictionaryIn(BaseModel):
    """Restrict rows to terms of the given dictionaries."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["dictionary_in"] = "dictionary_in"
    dictionary_ids: List[str]


class MatchNothing(BaseModel):
    """Select no rows at all."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["match_nothing"] = "match_nothing"


class AnyOf(BaseModel):
    """Logical OR over child predicates."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["any_of"] = "any_of"
    predicates: List["Predicate"]


class AllOf(BaseModel):
    """Logical AND over child predicates."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["all_of"] = "all_of"
    predicates: List["Predicate"]


Predicate = Annotated[
    Union[FieldPredicate, DictionaryIn, MatchNothing, AnyOf, AllOf],
    Field(discriminator="kind"),
]

AnyOf.model_rebuild()
AllOf.model_rebuild()


class Pagination(BaseModel):
    model_config = ConfigDict(frozen=True)

    limit: int = Field(100, ge=0)
    offset: int = Field(0, ge=0)


class FilterSpec(BaseModel):
    """A complete search: predicate tree, ordering and page."""

    model_config = ConfigDict(frozen=True)

    query: str = Field(..., description="Normalized query text")
    match_type: MatchType
    search_fields: List[SearchField]
    where: Optional[Predicate] = Field(None, description="None selects every row")
    order_by: List[str] = Field(default_factory=lambda: ["term"])
    pagination: Pagination = Field(default_factory=Pagination)

    @property
    def matches_nothing(self) -> bool:
        return isinstance(self.where, MatchNothing)

    @property
    def searches_definitions(self) -> bool:
        """Whether the definitions table has to be consulted."""
        return any(
            field in (SearchField.DEFINITION, SearchField.CONTEXT) for field in self.search_fields
        )
