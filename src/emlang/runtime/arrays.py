"""
Array indexing helpers.

Reads truncate a numeric index toward zero; writes insist on a whole
number. Either way the index must land inside the array, and the target
must be an array.
"""

import math

from .values import Value, ValueKind, display
from ..errors import error_bad_index, error_index_out_of_bounds, error_not_indexable
from ..tokens import SourceSpan


def to_index(index: Value, strict: bool = False, span: SourceSpan = None) -> int:
    """
    Convert an index value to a Python int.

    With ``strict`` the number must already be integral (used when
    writing); otherwise it is truncated toward zero (used when reading).
    """
    if index.kind != ValueKind.NUMBER or not math.isfinite(index.data):
        raise error_bad_index(display(index), span)
    x = index.data
    if strict and not x.is_integer():
        raise error_bad_index(display(index), span)
    i = int(x)
    if i < 0:
        raise error_bad_index(display(index), span)
    return i


def _check_target(container: Value, i: int, span: SourceSpan) -> None:
    if container.kind != ValueKind.ARRAY:
        raise error_not_indexable(container.kind.type_name, span)
    if i >= len(container.data):
        raise error_index_out_of_bounds(i, len(container.data), span)


def item_slot(container: Value, index: Value, strict: bool = False, span: SourceSpan = None) -> Value:
    """The element stored at ``index`` (not a copy), for reading or descending into."""
    i = to_index(index, strict, span)
    _check_target(container, i, span)
    return container.data[i]


def get_item(container: Value, index: Value, span: SourceSpan = None) -> Value:
    """Read ``container[index]`` as an independent value."""
    return item_slot(container, index, span=span).clone()


def set_item(container: Value, index: Value, value: Value, span: SourceSpan = None) -> None:
    """Overwrite an existing element in place; never grows the array."""
    i = to_index(index, strict=True, span=span)
    _check_target(container, i, span)
    container.data[i] = value
