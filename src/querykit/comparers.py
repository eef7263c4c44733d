"""
Key equality comparers.

A comparer decides when two derived keys are "the same key" for
distinct_by / except_by. Without one, natural == and hash() are used.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Hashable


class EqualityComparer(ABC):
    """Defines key equality. equals() and hash() must agree."""

    @abstractmethod
    def equals(self, left: Any, right: Any) -> bool:
        ...

    @abstractmethod
    def hash(self, value: Any) -> int:
        ...


class DefaultComparer(EqualityComparer):
    """Natural equality."""

    def equals(self, left: Any, right: Any) -> bool:
        return left == right

    def hash(self, value: Any) -> int:
        return hash(value)


class NormalizingComparer(EqualityComparer):
    """
    Compares keys after mapping them through a normalizer.

    Example:
        NormalizingComparer(str.casefold)  # case-insensitive string keys
    """

    def __init__(self, normalize: Callable[[Any], Hashable]):
        self.normalize = normalize

    def equals(self, left: Any, right: Any) -> bool:
        return self.normalize(left) == self.normalize(right)

    def hash(self, value: Any) -> int:
        return hash(self.normalize(value))


CASE_INSENSITIVE = NormalizingComparer(lambda s: s.casefold() if isinstance(s, str) else s)


class _ComparedKey:
    """Wraps a key so set/dict membership goes through a comparer."""

    __slots__ = ("value", "comparer")

    def __init__(self, value: Any, comparer: EqualityComparer):
        self.value = value
        self.comparer = comparer

    def __hash__(self) -> int:
        return self.comparer.hash(self.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _ComparedKey):
            return NotImplemented
        return self.comparer.equals(self.value, other.value)


class KeySet:
    """
    A set of keys whose membership honours an optional comparer.

    Hashable keys live in a set. Unhashable keys (lists, dicts) are kept in
    a list and found by an equality scan, so any key works, but many
    unhashable keys make membership linear.
    """

    def __init__(self, keys=(), comparer: EqualityComparer | None = None):
        self._comparer = comparer
        self._items = set()
        self._unhashable = []
        for key in keys:
            self.add(key)

    def _wrap(self, key: Any) -> Hashable:
        if self._comparer is None:
            return key
        return _ComparedKey(key, self._comparer)

    def _equals(self, left: Any, right: Any) -> bool:
        if self._comparer is None:
            return left == right
        return self._comparer.equals(left, right)

    @staticmethod
    def _is_hashable(wrapped: Any) -> bool:
        try:
            hash(wrapped)
        except TypeError:
            return False
        return True

    def add(self, key: Any) -> bool:
        """Add key; return True if it was not already present."""
        if key in self:
            return False
        wrapped = self._wrap(key)
        if self._is_hashable(wrapped):
            self._items.add(wrapped)
        else:
            self._unhashable.append(key)
        return True

    def __contains__(self, key: Any) -> bool:
        wrapped = self._wrap(key)
        if self._is_hashable(wrapped) and wrapped in self._items:
            return True
        return any(self._equals(key, other) for other in self._unhashable)

    def __len__(self) -> int:
        return len(self._items) + len(self._unhashable)
