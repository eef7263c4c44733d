"""
Data-driven query directives.

Turns request-level sort and paging parameters into an ordered, paged query:

    spec = QuerySpec(sort=parse_sort("species,-id"), page=PageRequest(2, 10))
    apply_query_spec(animals, spec)

A sort key is one of two variants:

    NamedProperty("id")        resolved on the element type at call time
    KeySelector(lambda a: ...)  used as-is

Directives are applied in order: the first orders, the rest break ties.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from querykit.errors import InvalidArgumentError, require
from querykit.ordering import (
    OrderedQuery,
    SortDirection,
    order_by_direction,
    order_by_property_or_default_in_direction,
    then_by_direction,
    then_by_property_or_default_in_direction,
)
from querykit.pagination import PageRequest

T = TypeVar("T")

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


@dataclass(frozen=True)
class NamedProperty:
    """Sort by the property with this name."""

    name: str


@dataclass(frozen=True)
class KeySelector:
    """Sort by the value this function returns."""

    func: Callable[[Any], Any]


SortKey = Union[NamedProperty, KeySelector]


@dataclass(frozen=True)
class SortDirective:
    """
    One sort key and its direction.

    Properties:
        key: NamedProperty, KeySelector, or a plain name (wrapped in NamedProperty)
        direction: SortDirection or "asc"/"desc"
        fallback: Used when a NamedProperty does not resolve (optional)
    """

    key: SortKey
    direction: SortDirection = SortDirection.ASCENDING
    fallback: Optional[Callable[[Any], Any]] = None

    def __post_init__(self) -> None:
        require(self.key, "key")
        if isinstance(self.key, str):
            object.__setattr__(self, "key", NamedProperty(self.key))
        elif callable(self.key) and not isinstance(self.key, (NamedProperty, KeySelector)):
            object.__setattr__(self, "key", KeySelector(self.key))
        object.__setattr__(self, "direction", SortDirection.parse(self.direction))


@dataclass(frozen=True)
class QuerySpec:
    """
    A sort chain and an optional page.

    Properties:
        sort: SortDirectives, most significant first
        page: PageRequest, or None for no paging
    """

    sort: Tuple[SortDirective, ...] = field(default_factory=tuple)
    page: Optional[PageRequest] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "sort", tuple(self.sort))


def parse_sort(text: Optional[str]) -> List[SortDirective]:
    """
    Parse a comma-separated sort string.

    Each item is a property name with an optional direction, either as a
    prefix ("-" descending, "+" ascending) or as a suffix word:

        "species,-id"          species asc, id desc
        "name desc, id"        name desc, id asc

    Blank items are ignored; None or "" gives no directives.

    Raises:
        InvalidArgumentError: an item is not a valid name/direction
    """
    directives: List[SortDirective] = []
    if not text:
        return directives

    for item in text.split(","):
        item = item.strip()
        if not item:
            continue

        direction = SortDirection.ASCENDING
        if item[0] in "+-":
            if item[0] == "-":
                direction = SortDirection.DESCENDING
            item = item[1:].strip()

        parts = item.split()
        if len(parts) == 2:
            direction = SortDirection.parse(parts[1])
        elif len(parts) != 1:
            raise InvalidArgumentError(f"Invalid sort item: {item!r}", "text")

        name = parts[0]
        if not _NAME_RE.fullmatch(name):
            raise InvalidArgumentError(f"Invalid property name in sort: {name!r}", "text")
        directives.append(SortDirective(NamedProperty(name), direction))

    return directives


def order_by_directives(
    source: Iterable[T],
    directives: Sequence[SortDirective],
    element_type: Optional[type] = None,
) -> OrderedQuery[T]:
    """
    Order source by a chain of directives.

    Raises:
        InvalidArgumentError: directives is empty
        PropertyNotFoundError: a NamedProperty without fallback does not resolve
    """
    require(source, "source")
    require(directives, "directives")
    if not directives:
        raise InvalidArgumentError("At least one sort directive is required", "directives")

    first, *rest = directives
    query = _apply_first(source, first, element_type)
    for directive in rest:
        query = _apply_next(query, directive)
    return query


def _apply_first(source, directive: SortDirective, element_type):
    key = directive.key
    if isinstance(key, KeySelector):
        return order_by_direction(source, directive.direction, key.func, element_type)
    return order_by_property_or_default_in_direction(
        source, directive.direction, key.name, directive.fallback, element_type
    )


def _apply_next(query: OrderedQuery, directive: SortDirective) -> OrderedQuery:
    key = directive.key
    if isinstance(key, KeySelector):
        return then_by_direction(query, directive.direction, key.func)
    return then_by_property_or_default_in_direction(
        query, directive.direction, key.name, directive.fallback
    )


def apply_query_spec(
    source: Iterable[T],
    spec: QuerySpec,
    element_type: Optional[type] = None,
) -> Iterable[T]:
    """
    Order source by spec.sort, then cut out spec.page.

    Either part may be absent; with neither, source is returned unchanged.
    """
    require(source, "source")
    require(spec, "spec")

    result: Iterable[T] = source
    if spec.sort:
        result = order_by_directives(result, spec.sort, element_type)
    if spec.page is not None:
        if not spec.sort:
            logger.warning("Paging without a sort order; pages may overlap between calls")
        result = spec.page.apply(result)
    return result
