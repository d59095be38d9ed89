"""Merging of optional generator options.

Each option may be given at most once.  Merging two partial option sets keeps
whichever side supplied a value and fails when both did.  The operation is
commutative and associative, so any number of partial sets fold into one.
"""

from dataclasses import fields
from typing import Any, Optional


class DuplicateAttribute(ValueError):
    """The same option was supplied twice for one target."""

    def __init__(self, key: str, first: Any, second: Any,
                 target: Optional[str] = None):
        self.key = key
        self.first = first
        self.second = second
        self.target = target
        where = f" on {target}" if target else ""
        super().__init__(
            f"redundant attribute argument `{key}`{where}: {key}={second!r}\n"
            f"note: first one here: {key}={first!r}"
        )


def either(key: str, a: Any, b: Any, target: Optional[str] = None) -> Any:
    """Return the one value that is not None; both set is an error."""
    if a is None:
        return b
    if b is None:
        return a
    raise DuplicateAttribute(key, a, b, target)


def merge(first, second, target: Optional[str] = None):
    """Merge two instances of the same options dataclass field by field."""
    values = {
        f.name: either(f.name, getattr(first, f.name), getattr(second, f.name), target)
        for f in fields(first)
    }
    return type(first)(**values)
