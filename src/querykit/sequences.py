"""
Generic sequence utilities.

Every function here takes any Python iterable and returns a lazy iterator,
except has_duplicates which answers a question.

IMPORTANT:
    Arguments are validated when the function is called, not when the
    result is first iterated. Each public function checks its inputs and
    then hands off to a private generator.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable as IterableABC
from typing import Any, Callable, Iterable, Iterator, Optional, TypeVar

from querykit.comparers import EqualityComparer, KeySet
from querykit.errors import require

T = TypeVar("T")
K = TypeVar("K")

logger = logging.getLogger(__name__)


def distinct_by(
    source: Iterable[T],
    key_selector: Callable[[T], K],
    comparer: Optional[EqualityComparer] = None,
) -> Iterator[T]:
    """
    Yield the first element of source for each distinct derived key.

    Args:
        source: Elements to filter
        key_selector: Maps an element to its key
        comparer: Key equality (natural equality if omitted)

    Keys need not be hashable; unhashable keys are compared by equality.

    Raises:
        MissingArgumentError: source or key_selector is None
    """
    require(source, "source")
    require(key_selector, "key_selector")
    return _distinct_by(source, key_selector, comparer)


def _distinct_by(source, key_selector, comparer):
    known_keys = KeySet(comparer=comparer)
    for element in source:
        if known_keys.add(key_selector(element)):
            yield element


def except_by(
    first: Iterable[T],
    second: Iterable[T],
    key_selector: Callable[[T], K],
    comparer: Optional[EqualityComparer] = None,
) -> Iterator[T]:
    """
    Yield elements of first whose key is not among the keys of second.

    This is a set difference: once an element of first is yielded its key
    joins the exclusion set, so a later element of first with the same key
    is suppressed too.

    Example:
        except_by([1, 2, 2, 3], [3], lambda x: x)  ->  1, 2

    Raises:
        MissingArgumentError: first, second or key_selector is None
    """
    require(first, "first")
    require(second, "second")
    require(key_selector, "key_selector")
    return _except_by(first, second, key_selector, comparer)


def _except_by(first, second, key_selector, comparer):
    keys = KeySet((key_selector(element) for element in second), comparer)
    for element in first:
        key = key_selector(element)
        if key in keys:
            continue

        yield element
        keys.add(key)


def _as_children(node: Any) -> Optional[Iterable[Any]]:
    # Strings iterate into strings; treating them as containers never ends
    if isinstance(node, (str, bytes, bytearray)):
        return None
    if isinstance(node, IterableABC):
        return node
    return None


def flatten(
    source: Optional[Iterable[T]],
    filter: Optional[Callable[[T], bool]] = None,
    child_selector: Optional[Callable[[T], Optional[Iterable[T]]]] = None,
) -> Iterator[T]:
    """
    Depth-first, pre-order walk of source and everything reachable from it.

    Each element is yielded, then its children are walked. Children come
    from child_selector, or, when it is omitted, from the element itself if
    it is a (non-string) iterable. filter is applied at every level: an
    element rejected by it is neither yielded nor descended into.

    A None source (or None children) yields nothing rather than raising.

    Example:
        flatten([[1, 2], [3]])  ->  [1, 2], 1, 2, [3], 3
    """
    if source is None:
        return
    if filter is not None:
        source = (node for node in source if filter(node))

    for node in source:
        yield node
        children = _as_children(node) if child_selector is None else child_selector(node)
        yield from flatten(children, filter, child_selector)


def for_each(source: Iterable[T], action: Callable[[T], Any]) -> Iterator[T]:
    """
    Pass elements through unchanged, calling action on each as it is consumed.

    Nothing happens until the result is iterated.

    Raises:
        MissingArgumentError: source or action is None
    """
    require(source, "source")
    require(action, "action")
    return _for_each(source, action)


def _for_each(source, action):
    for element in source:
        action(element)
        yield element


def for_each_indexed(source: Iterable[T], action: Callable[[T, int], Any]) -> Iterator[T]:
    """Like for_each, but action also receives the zero-based position."""
    require(source, "source")
    require(action, "action")
    return _for_each_indexed(source, action)


def _for_each_indexed(source, action):
    for index, element in enumerate(source):
        action(element, index)
        yield element


def has_duplicates(source: Iterable[T], key_selector: Optional[Callable[[T], K]] = None) -> bool:
    """
    True if two elements of source share a key.

    Keys are the elements themselves unless key_selector is given, and
    need not be hashable. Stops reading source at the first duplicate.

    Raises:
        MissingArgumentError: source is None
    """
    require(source, "source")
    seen = KeySet()
    for element in source:
        key = element if key_selector is None else key_selector(element)
        if not seen.add(key):
            logger.debug("Duplicate key found: %r", key)
            return True
    return False


def as_iterable(iterator: Optional[Iterator[T]]) -> Iterator[T]:
    """Wrap an iterator in a generator; None yields nothing."""
    if iterator is None:
        return
    yield from iterator
