"""
querykit: sequence and query helpers.

    - sequences:     distinct_by, except_by, flatten, for_each, has_duplicates
    - conditional:   where_if, take_if, skip_if
    - ordering:      order_by_property and friends, OrderedQuery
    - pagination:    slice_page, PageRequest
    - directives:    parse_sort, QuerySpec, apply_query_spec
    - expressions:   expression tree nodes (with deconstruct and interpreter)

Every function is stateless. Results are lazy unless stated otherwise.
"""

import logging

from .comparers import CASE_INSENSITIVE, DefaultComparer, EqualityComparer, NormalizingComparer
from .conditional import skip_if, take_if, where_if
from .directives import (
    KeySelector,
    NamedProperty,
    QuerySpec,
    SortDirective,
    apply_query_spec,
    order_by_directives,
    parse_sort,
)
from .errors import (
    InvalidArgumentError,
    MissingArgumentError,
    PropertyNotFoundError,
    QueryKitError,
    UnsupportedExpressionError,
)
from .ordering import (
    OrderedQuery,
    SortDirection,
    order_by,
    order_by_descending,
    order_by_direction,
    order_by_property,
    order_by_property_descending,
    order_by_property_in_direction,
    order_by_property_or_default,
    order_by_property_or_default_descending,
    then_by_direction,
    then_by_property,
    then_by_property_descending,
    then_by_property_in_direction,
    then_by_property_or_default,
    then_by_property_or_default_in_direction,
    then_by_property_or_default_descending,
)
from .pagination import PageRequest, slice_page
from .sequences import (
    as_iterable,
    distinct_by,
    except_by,
    flatten,
    for_each,
    for_each_indexed,
    has_duplicates,
)

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "CASE_INSENSITIVE",
    "DefaultComparer",
    "EqualityComparer",
    "InvalidArgumentError",
    "KeySelector",
    "MissingArgumentError",
    "NormalizingComparer",
    "NamedProperty",
    "OrderedQuery",
    "PageRequest",
    "PropertyNotFoundError",
    "QueryKitError",
    "QuerySpec",
    "SortDirection",
    "SortDirective",
    "UnsupportedExpressionError",
    "apply_query_spec",
    "as_iterable",
    "distinct_by",
    "except_by",
    "flatten",
    "for_each",
    "for_each_indexed",
    "has_duplicates",
    "order_by",
    "order_by_descending",
    "order_by_direction",
    "order_by_directives",
    "order_by_property",
    "order_by_property_descending",
    "order_by_property_in_direction",
    "order_by_property_or_default",
    "order_by_property_or_default_descending",
    "parse_sort",
    "skip_if",
    "slice_page",
    "take_if",
    "then_by_direction",
    "then_by_property",
    "then_by_property_descending",
    "then_by_property_in_direction",
    "then_by_property_or_default",
    "then_by_property_or_default_in_direction",
    "then_by_property_or_default_descending",
    "where_if",
]
