"""Operation outcomes."""

from enum import IntEnum


class Outcome(IntEnum):
    """
    Result of one operation.

    Values are ordered by severity, so ``max()`` of several outcomes is the
    one that should decide the process result.
    """

    NO_OP = 0
    SUCCESS = 1
    FAILURE = 2

    @property
    def is_error(self) -> bool:
        return self is Outcome.FAILURE

    @property
    def exit_code(self) -> int:
        return 1 if self.is_error else 0

    @classmethod
    def worst(cls, *outcomes: "Outcome") -> "Outcome":
        return max(outcomes, default=cls.NO_OP)
