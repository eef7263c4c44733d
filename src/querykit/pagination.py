"""
Pagination over ordered sequences.

    slice_page(order_by_property(animals, "id"), page=2, size=20)

Pages are 1-based. A size of 0 means "no limit" and is only allowed for
page 1: any later page of an unbounded result is undefined.

IMPORTANT:
    Paging only gives stable, non-overlapping pages when the source has a
    deterministic order. Pass an OrderedQuery (or an already sorted list).
"""

import logging
from dataclasses import dataclass
from itertools import islice
from typing import Iterable, Iterator, TypeVar

from querykit.conditional import take_if
from querykit.errors import InvalidArgumentError, require

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _validate_page(page: int, size: int) -> None:
    if page <= 0:
        raise InvalidArgumentError("Page number should be strictly greater than zero!", "page")

    if size < 0:
        raise InvalidArgumentError("Page size should not be negative!", "size")

    if size == 0 and page > 1:
        raise InvalidArgumentError(
            "Size 0 should only be used with page number 1, otherwise data parity can not be guaranteed!",
            "size",
        )


def slice_page(source: Iterable[T], page: int, size: int) -> Iterator[T]:
    """
    Return the page-th block of size elements of source.

    Args:
        source: Ordered elements
        page: 1-based page number
        size: Page size, 0 for everything

    Returns:
        Lazy iterator over the page

    Raises:
        MissingArgumentError: source is None
        InvalidArgumentError: page < 1, size < 0, or size 0 with page > 1
    """
    require(source, "source")
    _validate_page(page, size)
    logger.debug("Slicing page %d with size %d", page, size)
    return iter(take_if(islice(source, (page - 1) * size, None), size > 0, size))


@dataclass(frozen=True)
class PageRequest:
    """
    Page number and size, validated on construction.

    Properties:
        page: 1-based page number
        size: Page size, 0 for everything (page 1 only)
    """

    page: int = 1
    size: int = 0

    def __post_init__(self) -> None:
        _validate_page(self.page, self.size)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    def apply(self, source: Iterable[T]) -> Iterator[T]:
        return slice_page(source, self.page, self.size)
