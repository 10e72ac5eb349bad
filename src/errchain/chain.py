"""Immutable error chains with context stacking and root-fault tracking.

An ErrorChain is one layer of a failure explanation: a message plus an optional
cause. The cause is a closed two-case union:
- FaultCause: a raw external fault (usually an exception), always the innermost cause
- ChainCause: a deeper ErrorChain describing what was attempted earlier

Adding context never mutates a chain; it builds a new node wrapping the old one.

Example:
    >>> chain = wrap_fault("Can't get user fanf42", ConnectionError("timeout"))
    >>> chain.wrap_context("Can't rename user").user_message()
    "Can't rename user <- Can't get user fanf42 <- timeout"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Iterator

    from .outcome import Outcome

SEPARATOR = " <- "


# ═══════════════════════════════════════════════════════════════════════════════
# Fault Description
# ═══════════════════════════════════════════════════════════════════════════════


def describe_fault(fault: object) -> str:
    """Human-readable description of a raw fault.

    Prefers a string ``message`` attribute, then ``str(fault)``. A blank
    description falls back to the fault's class name.
    """
    message = getattr(fault, "message", None)
    if isinstance(message, str) and message.strip():
        return message
    text = str(fault)
    if not text.strip():
        return type(fault).__name__
    return text


# ═══════════════════════════════════════════════════════════════════════════════
# Cause Variants
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class FaultCause:
    """Raw external fault at the bottom of a chain."""

    fault: object

    def __post_init__(self) -> None:
        if self.fault is None:
            raise ValueError("FaultCause requires a fault, got None")


@dataclass(frozen=True, slots=True)
class ChainCause:
    """Nested chain: an earlier, more specific explanation."""

    chain: ErrorChain

    def __post_init__(self) -> None:
        if not isinstance(self.chain, ErrorChain):
            raise TypeError(f"ChainCause requires an ErrorChain, got {type(self.chain).__name__}")


Cause: TypeAlias = FaultCause | ChainCause


# ═══════════════════════════════════════════════════════════════════════════════
# ErrorChain
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class ErrorChain:
    """One node of a multi-level failure explanation.

    Frozen and slotted. Read operations (messages, user_message, root_fault) are
    pure functions of the structure and return the same result on every call.
    """

    message: str
    cause: Cause | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.message, str) or not self.message.strip():
            raise ValueError("ErrorChain message must be a non-empty string")
        if self.cause is not None and not isinstance(self.cause, (FaultCause, ChainCause)):
            raise TypeError(f"cause must be FaultCause or ChainCause, got {type(self.cause).__name__}")

    # ─── Construction ──────────────────────────────────────────────────

    @classmethod
    def leaf(cls, message: str) -> ErrorChain:
        """Chain with no cause."""
        return cls(message)

    @classmethod
    def wrap_fault(cls, message: str, fault: object) -> ErrorChain:
        """Chain capturing a raw fault as the innermost cause."""
        return cls(message, FaultCause(fault))

    def wrap_context(self, message: str) -> ErrorChain:
        """New outer node explaining what this layer was attempting."""
        return ErrorChain(message, ChainCause(self))

    def with_fault(self, fault: object) -> ErrorChain:
        """Copy of this node with its cause replaced by a raw fault."""
        return ErrorChain(self.message, FaultCause(fault))

    def fail(self) -> Outcome[object]:
        """Lift this chain into a failed Outcome."""
        from .outcome import fail
        return fail(self)

    # ─── Traversal ─────────────────────────────────────────────────────

    def nodes(self) -> Iterator[ErrorChain]:
        """Yield chain nodes from outermost to innermost."""
        node: ErrorChain | None = self
        while node is not None:
            yield node
            node = node.cause.chain if isinstance(node.cause, ChainCause) else None

    @property
    def depth(self) -> int:
        """Number of chain nodes (raw fault not counted)."""
        return sum(1 for _ in self.nodes())

    def messages(self) -> tuple[str, ...]:
        """Messages outer to inner, ending with the raw fault's description if any."""
        out: list[str] = []
        for node in self.nodes():
            out.append(node.message)
            if isinstance(node.cause, FaultCause):
                out.append(describe_fault(node.cause.fault))
        return tuple(out)

    def user_message(self) -> str:
        """Messages joined with ' <- ', outer context first, root cause last."""
        return SEPARATOR.join(self.messages())

    def root_fault(self) -> object | None:
        """Terminal raw fault, or None when the chain ends without one."""
        for node in self.nodes():
            if isinstance(node.cause, FaultCause):
                return node.cause.fault
        return None

    def __str__(self) -> str:
        return self.user_message()


# ═══════════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════════


def leaf(message: str) -> ErrorChain:
    """Create a terminal ErrorChain concisely."""
    return ErrorChain(message)


def wrap_fault(message: str, fault: object) -> ErrorChain:
    """Create an ErrorChain rooted in a raw fault."""
    return ErrorChain(message, FaultCause(fault))
