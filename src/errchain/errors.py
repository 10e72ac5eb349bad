"""Exception bridge for ErrorChain values.

ChainError lets a caller leave the Outcome world and raise: the message is the
chain's user message and ``__cause__`` points at the root fault when that fault
is itself an exception, so tracebacks show the original failure.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Self, TypeVar

from .chain import ErrorChain

if TYPE_CHECKING:
    from .outcome import Outcome

T = TypeVar("T")


class ChainError(Exception):
    """Exception wrapping an ErrorChain for raising."""

    __slots__ = ("chain",)

    def __init__(self, chain: ErrorChain) -> None:
        if not isinstance(chain, ErrorChain):
            raise TypeError(f"ChainError requires an ErrorChain, got {type(chain).__name__}")
        self.chain = chain
        super().__init__(chain.user_message())
        root = chain.root_fault()
        if isinstance(root, BaseException):
            self.__cause__ = root

    @classmethod
    def create(cls, message: str) -> Self:
        """Create from a single message."""
        return cls(ErrorChain(message))

    def messages(self) -> tuple[str, ...]:
        return self.chain.messages()

    def root_fault(self) -> object | None:
        return self.chain.root_fault()


def raise_for(outcome: Outcome[T]) -> T:
    """Return the success value or raise ChainError with the failure chain."""
    if outcome.is_success():
        return outcome.unwrap()
    raise ChainError(outcome.unwrap_failure())
