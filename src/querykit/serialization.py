"""
Serialization helpers for query specs (QuerySpec, SortDirective, PageRequest).

Provides JSON/YAML round-trip via an intermediate dict representation:

    sort:
      - key: species
        direction: asc
      - key: id
        direction: desc
    page:
      page: 2
      size: 10

The sort list may also be given as a sort string ("species,-id").
Only named properties can be serialized; KeySelector directives cannot.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from querykit.directives import NamedProperty, QuerySpec, SortDirective, parse_sort
from querykit.errors import InvalidArgumentError
from querykit.ordering import SortDirection
from querykit.pagination import PageRequest


def sort_directive_to_dict(d: SortDirective) -> Dict[str, Any]:
    if not isinstance(d.key, NamedProperty):
        raise TypeError(f"Unsupported sort key type: {type(d.key)}")
    return {"key": d.key.name, "direction": d.direction.value}


def sort_directive_from_dict(d: Any) -> SortDirective:
    if isinstance(d, str):
        directives = parse_sort(d)
        if len(directives) != 1:
            raise InvalidArgumentError(f"Expected a single sort item, got {d!r}", "d")
        return directives[0]
    if not isinstance(d, dict) or "key" not in d:
        raise InvalidArgumentError(f"Invalid sort directive: {d!r}", "d")
    return SortDirective(
        NamedProperty(d["key"]),
        SortDirection.parse(d.get("direction", SortDirection.ASCENDING)),
    )


def page_request_to_dict(p: PageRequest | None) -> Dict[str, Any] | None:
    if p is None:
        return None
    return {"page": p.page, "size": p.size}


def page_request_from_dict(d: Dict[str, Any] | None) -> PageRequest | None:
    if d is None:
        return None
    if not isinstance(d, dict):
        raise InvalidArgumentError(f"Invalid page request: {d!r}", "d")
    return PageRequest(page=int(d.get("page", 1)), size=int(d.get("size", 0)))


def query_spec_to_dict(s: QuerySpec) -> Dict[str, Any]:
    return {
        "sort": [sort_directive_to_dict(d) for d in s.sort],
        "page": page_request_to_dict(s.page),
    }


def query_spec_from_dict(d: Dict[str, Any] | None) -> QuerySpec:
    if d is None:
        return QuerySpec()
    if not isinstance(d, dict):
        raise InvalidArgumentError(f"Invalid query spec: {d!r}", "d")

    sort = d.get("sort") or []
    if isinstance(sort, str):
        directives = parse_sort(sort)
    else:
        directives = [sort_directive_from_dict(item) for item in sort]

    return QuerySpec(sort=tuple(directives), page=page_request_from_dict(d.get("page")))


def query_spec_to_json(s: QuerySpec) -> str:
    return json.dumps(query_spec_to_dict(s), sort_keys=True)


def query_spec_from_json(s: str) -> QuerySpec:
    try:
        d = json.loads(s)
    except json.JSONDecodeError as exc:
        raise InvalidArgumentError(f"Invalid JSON query spec: {exc}", "s") from exc
    return query_spec_from_dict(d)


def query_spec_to_yaml(s: QuerySpec) -> str:
    return yaml.safe_dump(query_spec_to_dict(s), sort_keys=False)


def query_spec_from_yaml(s: str) -> QuerySpec:
    try:
        d = yaml.safe_load(s)
    except yaml.YAMLError as exc:
        raise InvalidArgumentError(f"Invalid YAML query spec: {exc}", "s") from exc
    return query_spec_from_dict(d)
