"""
Filter mode resolution.

Accepts enum members or their string values (case-insensitive) and checks
that the mode belongs to the operator family being called.
"""

from enum import Enum
from typing import Any, Iterable, Optional, Type, TypeVar

from core.enums import FilterFamily, FilterMode
from core.exceptions import UnsupportedFilterMode

E = TypeVar("E", bound=Enum)


def lookup_tag(value: Any, enum_class: Type[E]) -> Optional[E]:
    """
    Find the member of enum_class named by value.

    Members pass through unchanged. Strings are stripped and lowercased
    before the lookup, so "  Sobel " finds GradientOperator.SOBEL.

    Returns:
        The member, or None if value names none of them
    """
    if isinstance(value, enum_class):
        return value
    if not isinstance(value, str):
        return None
    try:
        return enum_class(value.strip().lower())
    except ValueError:
        return None


def resolve_mode(
    value: Any,
    allowed: Iterable[FilterMode],
    family: Optional[FilterFamily] = None,
) -> FilterMode:
    """
    Resolve a filter mode and check it against the allowed set.

    Raises:
        UnsupportedFilterMode: If the value is not a known mode or not allowed
    """
    mode = lookup_tag(value, FilterMode)
    if mode is None:
        raise UnsupportedFilterMode(value)
    if mode not in tuple(allowed):
        raise UnsupportedFilterMode(mode.value, family.value if family else None)
    return mode


def resolve_operation(value: Any, enum_class: Type[E], family: FilterFamily) -> E:
    """
    Resolve an operator enum such as GradientOperator or CombineOperation.

    Raises:
        UnsupportedFilterMode: If the value is not a member of enum_class
    """
    operation = lookup_tag(value, enum_class)
    if operation is None:
        raise UnsupportedFilterMode(value, family.value)
    return operation
