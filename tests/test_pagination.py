"""
Tests for pagination.

These tests verify:
    - Page boundaries over an ordered sequence
    - size == 0 means "everything", but only for page 1
    - Invalid page/size combinations raise InvalidArgumentError
"""

import pytest

from querykit.errors import InvalidArgumentError, MissingArgumentError
from querykit.ordering import order_by
from querykit.pagination import PageRequest, slice_page

ARR_SIZE = 5
PAGE_SIZE = 2


@pytest.fixture
def ordered():
    return order_by([3, 0, 4, 1, 2], lambda x: x)


class TestSlicePage:

    def test_concrete_pages(self, ordered):
        assert list(slice_page(ordered, 1, PAGE_SIZE)) == [0, 1]
        assert list(slice_page(ordered, 2, PAGE_SIZE)) == [2, 3]
        assert list(slice_page(ordered, 3, PAGE_SIZE)) == [4]
        assert list(slice_page(ordered, 4, PAGE_SIZE)) == []

    def test_page_larger_than_source(self, ordered):
        assert len(list(slice_page(ordered, 1, ARR_SIZE * 2))) == ARR_SIZE

    def test_size_zero_returns_everything(self, ordered):
        assert list(slice_page(ordered, 1, 0)) == [0, 1, 2, 3, 4]

    def test_random_source(self, random_numbers):
        ordered = order_by(random_numbers(ARR_SIZE), lambda x: x)
        assert len(list(slice_page(ordered, 1, PAGE_SIZE))) == PAGE_SIZE
        assert len(list(slice_page(ordered, 2, PAGE_SIZE))) == PAGE_SIZE
        assert len(list(slice_page(ordered, 3, PAGE_SIZE))) == 1

    def test_pages_cover_source_once(self, random_numbers):
        ordered = order_by(random_numbers(23), lambda x: x)
        pages = [list(slice_page(ordered, page, 5)) for page in range(1, 6)]
        assert [x for page in pages for x in page] == list(ordered)

    def test_page_must_be_positive(self, ordered):
        with pytest.raises(InvalidArgumentError) as exc_info:
            slice_page(ordered, 0, PAGE_SIZE)
        assert exc_info.value.argument == "page"

    def test_size_must_not_be_negative(self, ordered):
        with pytest.raises(InvalidArgumentError) as exc_info:
            slice_page(ordered, 1, -1)
        assert exc_info.value.argument == "size"

    def test_size_zero_only_on_first_page(self, ordered):
        with pytest.raises(InvalidArgumentError):
            slice_page(ordered, 2, 0)

    def test_none_source(self):
        with pytest.raises(MissingArgumentError):
            slice_page(None, 1, PAGE_SIZE)

    def test_is_lazy(self):
        def boom():
            raise AssertionError("source was read")
            yield  # pragma: no cover

        slice_page(boom(), 1, PAGE_SIZE)


class TestPageRequest:

    def test_defaults_to_everything(self):
        request = PageRequest()
        assert request.page == 1
        assert request.size == 0
        assert list(request.apply([1, 2, 3])) == [1, 2, 3]

    def test_offset(self):
        assert PageRequest(page=3, size=10).offset == 20

    def test_apply(self, ordered):
        assert list(PageRequest(page=2, size=PAGE_SIZE).apply(ordered)) == [2, 3]

    @pytest.mark.parametrize("page,size", [(0, 10), (1, -1), (2, 0)])
    def test_invalid(self, page, size):
        with pytest.raises(InvalidArgumentError):
            PageRequest(page=page, size=size)

    def test_immutable(self):
        request = PageRequest(page=1, size=10)
        with pytest.raises(AttributeError):
            request.page = 2
