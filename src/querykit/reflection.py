"""
Member lookup by name.

Answers "does this type have a property called X?" and builds the typed
accessor x => x.X for it.

A property is a public, non-method member declared on the type:
    - dataclass fields
    - named-tuple fields
    - __slots__ entries
    - class annotations (anywhere in the MRO)
    - properties and other data descriptors

IMPORTANT:
    Lookup is an exact, case-sensitive match. Names starting with an
    underscore are never properties. Nothing is cached.
    Only the class is inspected, never an instance, so attributes that a
    plain class assigns only in __init__ are not properties.
"""

import dataclasses
import functools
import inspect
import logging
from typing import Any, Callable, List, Optional

from querykit.errors import PropertyNotFoundError, require
from querykit.expressions import LambdaExpression, MemberExpression, ParameterExpression
from querykit.interpreter import compile_lambda

logger = logging.getLogger(__name__)


def type_name(element_type: type) -> str:
    """Fully qualified type name used in error messages."""
    module = getattr(element_type, "__module__", None)
    qualname = getattr(element_type, "__qualname__", repr(element_type))
    if module in (None, "builtins"):
        return qualname
    return f"{module}.{qualname}"


def get_property_names(element_type: type) -> List[str]:
    """
    List the property names of element_type, in declaration order.

    Args:
        element_type: The class to inspect

    Returns:
        Unique public property names
    """
    require(element_type, "element_type")
    names: List[str] = []

    def add(name: str) -> None:
        if not name.startswith("_") and name not in names:
            names.append(name)

    if dataclasses.is_dataclass(element_type):
        for field in dataclasses.fields(element_type):
            add(field.name)

    for name in getattr(element_type, "_fields", ()):
        add(name)

    for klass in reversed(inspect.getmro(element_type)):
        if klass is object:
            continue
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            add(name)
        for name in inspect.get_annotations(klass):
            add(name)
        for name, value in klass.__dict__.items():
            if inspect.isdatadescriptor(value) or isinstance(value, functools.cached_property):
                add(name)

    return names


def find_property(element_type: type, property_name: Optional[str]) -> Optional[str]:
    """Return property_name if element_type declares it, else None."""
    if property_name is None:
        return None
    if property_name in get_property_names(element_type):
        return property_name
    return None


def property_accessor_expression(element_type: type, property_name: str) -> LambdaExpression:
    """
    Build the expression tree x => x.<property_name>.

    Raises:
        PropertyNotFoundError: element_type has no such property
    """
    require(element_type, "element_type")
    if find_property(element_type, property_name) is None:
        raise PropertyNotFoundError(type_name(element_type), property_name)

    arg = ParameterExpression("x", element_type)
    body = MemberExpression(arg, property_name)
    return LambdaExpression(parameters=(arg,), body=body, name=f"get_{property_name}")


def property_accessor(element_type: type, property_name: str) -> Callable[[Any], Any]:
    """Compiled form of property_accessor_expression."""
    accessor = compile_lambda(property_accessor_expression(element_type, property_name))
    logger.debug("Built accessor for %s.%s", type_name(element_type), property_name)
    return accessor
