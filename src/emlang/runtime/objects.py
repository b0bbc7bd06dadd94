"""
Class templates and instances.

A class definition produces an Object template whose properties are its
methods plus ``~name`` (and optionally ``~init`` and ``~display``).
Instances are clones of the template, so every object is a plain value:
binding it to another name, or handing it to a method as ``self``,
copies it.
"""

from typing import Dict, Optional

from .values import Value, ValueKind, FunctionData, object_val, string_val

NAME_PROP = "~name"
INIT_PROP = "~init"
DISPLAY_PROP = "~display"

# The receiver is always bound under this name, whatever the first
# declared parameter is called.
RECEIVER = "self"


def make_template(name: str, methods: Dict[str, Value]) -> Value:
    """Build the Object template for a class."""
    props = {NAME_PROP: string_val(name)}
    props.update(methods)
    return object_val(props)


def class_name(obj: Value) -> str:
    """The ``~name`` of an object, or ``object`` when it has none."""
    name = obj.get_prop(NAME_PROP)
    if name is not None and name.kind == ValueKind.STRING:
        return name.data
    return "object"


def find_method(obj: Value, name: str) -> Optional[FunctionData]:
    """The function stored under ``name``, or None if absent or not a function."""
    prop = obj.get_prop(name)
    if prop is None or prop.kind != ValueKind.FUNCTION:
        return None
    return prop.data


def constructor(template: Value) -> Optional[FunctionData]:
    return find_method(template, INIT_PROP)


def display_method(obj: Value) -> Optional[FunctionData]:
    return find_method(obj, DISPLAY_PROP)
