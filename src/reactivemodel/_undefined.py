"""The UNDEFINED sentinel — what a Model returns for keys never set.

Distinct from None: None is a value a caller can set on purpose, UNDEFINED
means "no value". Reactions treat both as not-yet-defined.
"""

from __future__ import annotations

from typing import Iterable


class _Undefined:
    __slots__ = ()

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()


def is_defined(value: object) -> bool:
    return value is not UNDEFINED and value is not None


def all_defined(values: Iterable[object]) -> bool:
    """True when no value is UNDEFINED or None. Vacuously true when empty."""
    return all(is_defined(v) for v in values)
