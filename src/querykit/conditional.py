"""
Conditional query composition.

Each helper applies one query step only when a condition holds, so a
pipeline can be built from optional request parameters without branching:

    query = where_if(animals, species is not None, lambda a: a.species == species)
    query = skip_if(query, offset > 0, offset)
    query = take_if(query, limit is not None, limit)

When the condition is false the source is returned as-is (the same object).
When it is true the result is a lazy iterator; nothing is read until it is
consumed.
"""

from itertools import islice
from typing import Callable, Iterable, TypeVar

T = TypeVar("T")


def where_if(source: Iterable[T], condition: bool, predicate: Callable[[T], bool]) -> Iterable[T]:
    """Filter source by predicate only if condition is true."""
    if not condition:
        return source
    return filter(predicate, source)


def take_if(source: Iterable[T], condition: bool, count: int) -> Iterable[T]:
    """Keep the first count elements only if condition is true."""
    if not condition:
        return source
    return islice(source, max(count, 0))


def skip_if(source: Iterable[T], condition: bool, count: int) -> Iterable[T]:
    """Drop the first count elements only if condition is true."""
    if not condition:
        return source
    return islice(source, max(count, 0), None)
