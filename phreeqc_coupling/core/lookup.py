"""
Name-based lookup over configured chemical entities
"""

from typing import Iterable, TypeVar

from ..exceptions import NotFoundError

T = TypeVar("T")


def find_by_name(items: Iterable[T], name: str, kind: str) -> T:
    """
    Return the first item whose ``name`` attribute equals ``name``.

    Args:
        items: Components, phases, reactants or secondary variables
        name: Name to look for
        kind: Human-readable entity kind used in the error message

    Raises:
        NotFoundError: If no item carries that name
    """
    for item in items:
        if item.name == name:
            return item
    raise NotFoundError(kind, name)
