"""
Structural equality for behavior outcomes.

``deep_equal`` is the default comparator of an experiment. Two outcomes are
equal when they hold the same data, even if they are distinct objects of a
class without ``__eq__``.
"""

import math
from collections.abc import Mapping
from dataclasses import fields, is_dataclass
from numbers import Number
from typing import Any, Dict, Set, Tuple


def deep_equal(a: Any, b: Any) -> bool:
    """
    Compare two values by content.

    Rules:
    - Numbers compare by value; NaN equals NaN
    - Otherwise both values must be of the same type
    - Mappings compare key by key, lists and tuples element by element
    - Dataclasses and plain objects compare their attributes
    - Types with their own ``__eq__`` (sets, strings, ...) use it

    Args:
        a: Control value
        b: Candidate value

    Returns:
        True if both values hold the same data
    """
    return _equal(a, b, set())


def _equal(a: Any, b: Any, seen: Set[Tuple[int, int]]) -> bool:
    if a is b:
        return True

    if _is_number(a) and _is_number(b):
        if _is_nan(a) and _is_nan(b):
            return True
        return a == b

    if type(a) is not type(b):
        return False

    # Self-referencing structures: a pair already under comparison is assumed equal
    key = (id(a), id(b))
    if key in seen:
        return True
    seen.add(key)

    if isinstance(a, Mapping):
        if a.keys() != b.keys():
            return False
        return all(_equal(a[k], b[k], seen) for k in a)

    if isinstance(a, (list, tuple)):
        if len(a) != len(b):
            return False
        return all(_equal(x, y, seen) for x, y in zip(a, b))

    if is_dataclass(a):
        return all(_equal(getattr(a, f.name), getattr(b, f.name), seen) for f in fields(a))

    if type(a).__eq__ is not object.__eq__:
        return bool(a == b)

    return _equal(_state(a), _state(b), seen)


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def _is_nan(value: Any) -> bool:
    return isinstance(value, float) and math.isnan(value)


def _state(obj: Any) -> Dict[str, Any]:
    state = dict(getattr(obj, "__dict__", {}))
    for cls in type(obj).__mro__:
        slots = cls.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for slot in slots:
            if slot not in ("__dict__", "__weakref__") and hasattr(obj, slot):
                state[slot] = getattr(obj, slot)
    return state
