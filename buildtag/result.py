"""Build result — a totally ordered status for a completed build.

Ordering, worst to best::

    ABORTED < NOT_BUILT < FAILURE < UNSTABLE < SUCCESS

``str(result)`` is the upper-case name; it ends up verbatim in tag names,
so it must never change for an existing member.
"""

import enum


class Result(enum.Enum):
    """Outcome of a build.

    Each member carries an ``ordinal`` (higher is better) used for all
    comparisons.  Enum values are never compared directly.
    """

    ABORTED   = 0
    NOT_BUILT = 1
    FAILURE   = 2
    UNSTABLE  = 3
    SUCCESS   = 4

    @property
    def ordinal(self) -> int:
        return self.value

    def __str__(self) -> str:
        return self.name

    def __lt__(self, other: "Result") -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self.ordinal < other.ordinal

    def __le__(self, other: "Result") -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self.ordinal <= other.ordinal

    def __gt__(self, other: "Result") -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self.ordinal > other.ordinal

    def __ge__(self, other: "Result") -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self.ordinal >= other.ordinal

    def is_better_or_equal_to(self, other: "Result") -> bool:
        return self >= other

    def is_worse_than(self, other: "Result") -> bool:
        return self < other

    def combine(self, other: "Result") -> "Result":
        """Return the worse of the two results."""
        return self if self <= other else other

    @classmethod
    def from_string(cls, text: str) -> "Result":
        """Parse a result name (case-insensitive, ``-`` accepted for ``_``).

        Raises ``ValueError`` for unknown names.
        """
        key = text.strip().upper().replace("-", "_")
        try:
            return cls[key]
        except KeyError:
            names = ", ".join(m.name for m in cls)
            raise ValueError(f"Unknown build result '{text}' (expected one of: {names})") from None
