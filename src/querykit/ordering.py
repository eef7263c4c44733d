"""
Ordered queries and dynamic property ordering.

Sort a sequence by a key function, or by a property named at runtime:

    order_by_property(animals, "name")
    order_by_property_or_default(animals, request_field, lambda a: a.id)
    order_by_property(animals, "species").then_by_property_descending("id")

The result is an OrderedQuery: a lazy, immutable view that sorts its source
each time it is iterated. Further keys are chained with then_by*; each one
only breaks ties left by the keys before it.

ORDERING CONTRACT:
    Sorting is stable. Elements with equal keys keep their input order,
    in both directions. A key of None sorts before every other value, so
    it comes first ascending and last descending.

PROPERTY RESOLUTION:
    The property name is looked up on the element type (see reflection.py).
    The element type is taken from, in order:
        1. the element_type argument
        2. the source, when it is already an OrderedQuery
        3. the first item, when the source is a non-empty list or tuple
    Otherwise resolution waits for the first iteration and uses the type of
    the first element; an unknown name then raises at that point.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, Tuple, TypeVar, Union

from querykit.errors import InvalidArgumentError, PropertyNotFoundError, require
from querykit.reflection import find_property, property_accessor, type_name

T = TypeVar("T")

logger = logging.getLogger(__name__)


class SortDirection(Enum):
    """Sort direction of a single key."""

    ASCENDING = "asc"
    DESCENDING = "desc"

    @classmethod
    def parse(cls, value: Union["SortDirection", str]) -> "SortDirection":
        """
        Accept a SortDirection or one of "asc", "ascending", "desc",
        "descending" (any case).
        """
        if isinstance(value, SortDirection):
            return value
        if isinstance(value, str):
            text = value.strip().lower()
            if text in ("asc", "ascending"):
                return cls.ASCENDING
            if text in ("desc", "descending"):
                return cls.DESCENDING
        raise InvalidArgumentError(f"Unknown sort direction: {value!r}", "direction")


@dataclass(frozen=True)
class _SortKey:
    """
    One key of an OrderedQuery.

    selector is None while the key still waits for the element type.
    """

    selector: Optional[Callable[[Any], Any]]
    descending: bool = False
    property_name: Optional[str] = None
    fallback: Optional[Callable[[Any], Any]] = None

    def resolved(self, element_type: Optional[type]) -> "_SortKey":
        if self.selector is not None or element_type is None:
            return self
        return replace(self, selector=_resolve_selector(element_type, self.property_name, self.fallback))


def _resolve_selector(
    element_type: type,
    property_name: Optional[str],
    fallback: Optional[Callable[[Any], Any]],
) -> Callable[[Any], Any]:
    if find_property(element_type, property_name) is not None:
        return property_accessor(element_type, property_name)
    if fallback is None:
        raise PropertyNotFoundError(type_name(element_type), str(property_name))
    logger.debug(
        "Type %s has no property %r, ordering by fallback selector",
        type_name(element_type),
        property_name,
    )
    return fallback


def _none_first(selector: Callable[[Any], Any]) -> Callable[[Any], Tuple[bool, Any]]:
    def key(element: Any) -> Tuple[bool, Any]:
        value = selector(element)
        return value is not None, value

    return key


class OrderedQuery(Generic[T]):
    """
    A source plus the chain of keys it is sorted by.

    Properties:
        element_type: Type of the elements, if known
        keys: Tuple of (selector, descending) pairs, most significant first

    IMPORTANT:
        Nothing is read from the source until iteration. Each iteration
        re-reads the source, so a generator source can be iterated once.
    """

    def __init__(
        self,
        source: Iterable[T],
        keys: Tuple[_SortKey, ...],
        element_type: Optional[type] = None,
    ):
        self._source = require(source, "source")
        self._keys = tuple(keys)
        self._element_type = element_type

    @property
    def element_type(self) -> Optional[type]:
        return self._element_type

    @property
    def keys(self) -> Tuple[Tuple[Optional[Callable[[Any], Any]], bool], ...]:
        return tuple((key.selector, key.descending) for key in self._keys)

    def __iter__(self) -> Iterator[T]:
        items = list(self._source)
        if not items:
            return

        keys = self._keys
        if any(key.selector is None for key in keys):
            element_type = type(items[0])
            logger.debug("Resolving deferred sort keys against %s", type_name(element_type))
            keys = tuple(key.resolved(element_type) for key in keys)

        # Least significant key first; each stable pass keeps earlier ties
        for key in reversed(keys):
            items.sort(key=_none_first(key.selector), reverse=key.descending)
        yield from items

    def __repr__(self) -> str:
        directions = ", ".join(
            f"{key.property_name or getattr(key.selector, '__name__', 'key')} "
            f"{'desc' if key.descending else 'asc'}"
            for key in self._keys
        )
        return f"OrderedQuery({directions})"

    def _then(self, key: _SortKey) -> "OrderedQuery[T]":
        return OrderedQuery(self._source, self._keys + (key,), self._element_type)

    def then_by(self, key_selector: Callable[[T], Any]) -> "OrderedQuery[T]":
        return then_by_direction(self, SortDirection.ASCENDING, key_selector)

    def then_by_descending(self, key_selector: Callable[[T], Any]) -> "OrderedQuery[T]":
        return then_by_direction(self, SortDirection.DESCENDING, key_selector)

    def then_by_property(self, property_name: str) -> "OrderedQuery[T]":
        return then_by_property(self, property_name)

    def then_by_property_descending(self, property_name: str) -> "OrderedQuery[T]":
        return then_by_property_descending(self, property_name)

    def to_list(self) -> List[T]:
        return list(self)


def _element_type_of(source: Iterable[Any], element_type: Optional[type]) -> Optional[type]:
    if element_type is not None:
        return element_type
    if isinstance(source, OrderedQuery):
        return source.element_type
    if isinstance(source, (list, tuple)) and source:
        return type(source[0])
    return None


def _property_key(
    property_name: Optional[str],
    fallback: Optional[Callable[[Any], Any]],
    element_type: Optional[type],
    direction: SortDirection,
) -> _SortKey:
    descending = direction == SortDirection.DESCENDING
    if property_name is None:
        return _SortKey(require(fallback, "fallback"), descending)
    if element_type is None:
        logger.debug("Element type unknown, deferring resolution of %r", property_name)
        return _SortKey(None, descending, property_name, fallback)
    selector = _resolve_selector(element_type, property_name, fallback)
    return _SortKey(selector, descending, property_name, fallback)


def _require_ordered(source: Any) -> "OrderedQuery":
    require(source, "source")
    if not isinstance(source, OrderedQuery):
        raise InvalidArgumentError(
            "Secondary ordering needs an OrderedQuery; order the source first", "source"
        )
    return source


# =========================================================================
# EXPLICIT KEY SELECTORS
# =========================================================================


def order_by_direction(
    source: Iterable[T],
    direction: Union[SortDirection, str],
    key_selector: Callable[[T], Any],
    element_type: Optional[type] = None,
) -> OrderedQuery[T]:
    """
    Order source by key_selector in the given direction.

    This is the single place a direction becomes ascending or descending;
    every other order_by* function goes through it or through the same
    key construction.
    """
    require(source, "source")
    require(key_selector, "key_selector")
    direction = SortDirection.parse(direction)
    key = _SortKey(key_selector, direction == SortDirection.DESCENDING)
    return OrderedQuery(source, (key,), _element_type_of(source, element_type))


def order_by(source: Iterable[T], key_selector: Callable[[T], Any]) -> OrderedQuery[T]:
    return order_by_direction(source, SortDirection.ASCENDING, key_selector)


def order_by_descending(source: Iterable[T], key_selector: Callable[[T], Any]) -> OrderedQuery[T]:
    return order_by_direction(source, SortDirection.DESCENDING, key_selector)


def then_by_direction(
    source: OrderedQuery[T],
    direction: Union[SortDirection, str],
    key_selector: Callable[[T], Any],
) -> OrderedQuery[T]:
    """Add key_selector as the next tie-breaker of an ordered query."""
    ordered = _require_ordered(source)
    require(key_selector, "key_selector")
    direction = SortDirection.parse(direction)
    return ordered._then(_SortKey(key_selector, direction == SortDirection.DESCENDING))


# =========================================================================
# PROPERTY NAMES
# =========================================================================


def order_by_property_in_direction(
    source: Iterable[T],
    direction: Union[SortDirection, str],
    property_name: str,
    element_type: Optional[type] = None,
) -> OrderedQuery[T]:
    """
    Order source by the property called property_name.

    The name must be declared on the element type: a dataclass or
    named-tuple field, a __slots__ entry, a class annotation or a property.
    Attributes a plain class only assigns in __init__ are not found; annotate
    them on the class, or use order_by_property_or_default with a fallback.

    Raises:
        MissingArgumentError: source or property_name is None
        PropertyNotFoundError: the element type has no such property
    """
    require(source, "source")
    require(property_name, "property_name")
    element_type = _element_type_of(source, element_type)
    key = _property_key(property_name, None, element_type, SortDirection.parse(direction))
    return OrderedQuery(source, (key,), element_type)


def order_by_property(
    source: Iterable[T], property_name: str, element_type: Optional[type] = None
) -> OrderedQuery[T]:
    return order_by_property_in_direction(source, SortDirection.ASCENDING, property_name, element_type)


def order_by_property_descending(
    source: Iterable[T], property_name: str, element_type: Optional[type] = None
) -> OrderedQuery[T]:
    return order_by_property_in_direction(source, SortDirection.DESCENDING, property_name, element_type)


def order_by_property_or_default_in_direction(
    source: Iterable[T],
    direction: Union[SortDirection, str],
    property_name: Optional[str],
    fallback: Optional[Callable[[T], Any]],
    element_type: Optional[type] = None,
) -> OrderedQuery[T]:
    """
    Order by the named property if it exists, otherwise by fallback.

    Only raises when the name does not resolve and fallback is None.
    """
    require(source, "source")
    element_type = _element_type_of(source, element_type)
    key = _property_key(property_name, fallback, element_type, SortDirection.parse(direction))
    return OrderedQuery(source, (key,), element_type)


def order_by_property_or_default(
    source: Iterable[T],
    property_name: Optional[str],
    fallback: Optional[Callable[[T], Any]],
    element_type: Optional[type] = None,
) -> OrderedQuery[T]:
    return order_by_property_or_default_in_direction(
        source, SortDirection.ASCENDING, property_name, fallback, element_type
    )


def order_by_property_or_default_descending(
    source: Iterable[T],
    property_name: Optional[str],
    fallback: Optional[Callable[[T], Any]],
    element_type: Optional[type] = None,
) -> OrderedQuery[T]:
    return order_by_property_or_default_in_direction(
        source, SortDirection.DESCENDING, property_name, fallback, element_type
    )


def then_by_property_in_direction(
    source: OrderedQuery[T],
    direction: Union[SortDirection, str],
    property_name: str,
) -> OrderedQuery[T]:
    """
    Break ties of an ordered query by the property called property_name.

    Raises:
        MissingArgumentError: source or property_name is None
        InvalidArgumentError: source is not an OrderedQuery
        PropertyNotFoundError: the element type has no such property
    """
    ordered = _require_ordered(source)
    require(property_name, "property_name")
    key = _property_key(property_name, None, ordered.element_type, SortDirection.parse(direction))
    return ordered._then(key)


def then_by_property(source: OrderedQuery[T], property_name: str) -> OrderedQuery[T]:
    return then_by_property_in_direction(source, SortDirection.ASCENDING, property_name)


def then_by_property_descending(source: OrderedQuery[T], property_name: str) -> OrderedQuery[T]:
    return then_by_property_in_direction(source, SortDirection.DESCENDING, property_name)


def then_by_property_or_default_in_direction(
    source: OrderedQuery[T],
    direction: Union[SortDirection, str],
    property_name: Optional[str],
    fallback: Optional[Callable[[T], Any]],
) -> OrderedQuery[T]:
    ordered = _require_ordered(source)
    key = _property_key(property_name, fallback, ordered.element_type, SortDirection.parse(direction))
    return ordered._then(key)


def then_by_property_or_default(
    source: OrderedQuery[T],
    property_name: Optional[str],
    fallback: Optional[Callable[[T], Any]],
) -> OrderedQuery[T]:
    return then_by_property_or_default_in_direction(
        source, SortDirection.ASCENDING, property_name, fallback
    )


def then_by_property_or_default_descending(
    source: OrderedQuery[T],
    property_name: Optional[str],
    fallback: Optional[Callable[[T], Any]],
) -> OrderedQuery[T]:
    return then_by_property_or_default_in_direction(
        source, SortDirection.DESCENDING, property_name, fallback
    )
