"""Outcome: success value or ErrorChain failure, with pipeline combinators.

Discriminated union for fallible steps:
- Monad: and_then (bind), with async variant
- Functor: map
- Annotation: map_context / on_error / with_context wrap a failure's chain
- Fail-fast collection ops: sequence, traverse

A failure is never swallowed: every combinator either forwards it unchanged or
wraps it with more context. Only explicit inspection (match, unwrap_or, or_else)
ends propagation.

Example:
    >>> def get_user(uid: str) -> Outcome[dict]:
    ...     return fail(wrap_fault("db read failed", ConnectionError("timeout")))
    >>> out = get_user("fanf42").on_error("Can't get user fanf42")
    >>> out.unwrap_failure().user_message()
    "Can't get user fanf42 <- db read failed <- timeout"
"""

from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Awaitable, Callable, Generic, TypeVar

from .chain import ErrorChain
from .errors import ChainError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

T = TypeVar("T")
U = TypeVar("U")

_SUCCESS = True
_FAILURE = False


class Outcome(Generic[T]):
    """Result of one fallible step: Success(value) xor Failure(ErrorChain).

    Immutable. Combinators return a new Outcome, or this one when unchanged.

    Examples:
        >>> succeed(2).and_then(lambda x: succeed(x * 10)).unwrap()
        20
        >>> fail(leaf("boom")).and_then(lambda x: succeed(x * 10)).is_failure()
        True
    """

    __slots__ = ("_value", "_is_ok")
    __match_args__ = ("_value",)

    def __init__(self, value: T | ErrorChain, is_ok: bool) -> None:
        self._value = value
        self._is_ok = is_ok

    # ─── Type Checking ───────────────────────────────────────────────

    def is_success(self) -> bool:
        return self._is_ok

    def is_failure(self) -> bool:
        return not self._is_ok

    # ─── Value Extraction ──────────────────────────────────────────────

    def unwrap(self) -> T:
        """Extract success value. Raises ChainError on failure."""
        if self._is_ok:
            return self._value  # type: ignore[return-value]
        raise ChainError(self._value)  # type: ignore[arg-type]

    def unwrap_failure(self) -> ErrorChain:
        """Extract failure chain. Raises RuntimeError on success."""
        if not self._is_ok:
            return self._value  # type: ignore[return-value]
        raise RuntimeError(f"unwrap_failure() on Success: {self._value!r}")

    def unwrap_or(self, default: T) -> T:
        """Extract success value or return default."""
        return self._value if self._is_ok else default  # type: ignore[return-value]

    def unwrap_or_else(self, f: Callable[[ErrorChain], T]) -> T:
        """Extract success value or compute one from the failure chain."""
        return self._value if self._is_ok else f(self._value)  # type: ignore[return-value,arg-type]

    def expect(self, message: str) -> T:
        """Extract success value; on failure raise ChainError with message as outer context."""
        if self._is_ok:
            return self._value  # type: ignore[return-value]
        raise ChainError(self._value.wrap_context(message))  # type: ignore[union-attr]

    def value(self) -> T | None:
        """Success value, or None on failure."""
        return self._value if self._is_ok else None  # type: ignore[return-value]

    def failure(self) -> ErrorChain | None:
        """Failure chain, or None on success."""
        return self._value if not self._is_ok else None  # type: ignore[return-value]

    # ─── Functor / Monad ───────────────────────────────────────────────

    def map(self, f: Callable[[T], U]) -> Outcome[U]:
        """Apply f to success value. Signature: Outcome[T] → (T→U) → Outcome[U]"""
        return Outcome(f(self._value), _SUCCESS) if self._is_ok else self  # type: ignore[arg-type,return-value]

    def and_then(self, f: Callable[[T], Outcome[U]]) -> Outcome[U]:
        """Monadic bind. On failure f is never invoked and self is returned unchanged."""
        return f(self._value) if self._is_ok else self  # type: ignore[arg-type,return-value]

    flat_map = and_then

    async def and_then_async(self, f: Callable[[T], Awaitable[Outcome[U]] | Outcome[U]]) -> Outcome[U]:
        """Async bind. f starts only after this outcome is known; skipped on failure."""
        if not self._is_ok:
            return self  # type: ignore[return-value]
        out = f(self._value)  # type: ignore[arg-type]
        return await out if inspect.isawaitable(out) else out

    def or_else(self, f: Callable[[ErrorChain], Outcome[T]]) -> Outcome[T]:
        """On failure, apply f to recover. On success, pass through."""
        return f(self._value) if not self._is_ok else self  # type: ignore[arg-type]

    # ─── Context Annotation ────────────────────────────────────────────

    def map_context(self, message: str) -> Outcome[T]:
        """On failure, wrap the chain with message as outer context."""
        if self._is_ok:
            return self
        return Outcome(self._value.wrap_context(message), _FAILURE)  # type: ignore[union-attr]

    def on_error(self, message: str) -> Outcome[T]:
        """Method-chaining sugar for map_context."""
        return self.map_context(message)

    def with_context(self, f: Callable[[], str]) -> Outcome[T]:
        """Lazy map_context: f is called only on failure."""
        return self if self._is_ok else self.map_context(f())

    # ─── Inspection ────────────────────────────────────────────────────

    def inspect(self, f: Callable[[T], None]) -> Outcome[T]:
        """Call f with success value for side effects, return self."""
        if self._is_ok:
            f(self._value)  # type: ignore[arg-type]
        return self

    def inspect_failure(self, f: Callable[[ErrorChain], None]) -> Outcome[T]:
        """Call f with failure chain for side effects, return self."""
        if not self._is_ok:
            f(self._value)  # type: ignore[arg-type]
        return self

    def match(self, *, success: Callable[[T], U], failure: Callable[[ErrorChain], U]) -> U:
        """Exhaustive pattern match. Forces handling both variants."""
        return success(self._value) if self._is_ok else failure(self._value)  # type: ignore[arg-type]

    # ─── Dunder Methods ──────────────────────────────────────────────────

    __bool__ = lambda self: self._is_ok  # noqa: E731
    __hash__ = lambda self: hash((self._is_ok, self._value))  # noqa: E731
    __repr__ = lambda self: f"{'Success' if self._is_ok else 'Failure'}({self._value!r})"  # noqa: E731
    __str__ = __repr__

    def __eq__(self, other: object) -> bool:
        return self._is_ok == other._is_ok and self._value == other._value if isinstance(other, Outcome) else NotImplemented

    def __iter__(self) -> Iterator[T]:
        """Iterate: yields value on success, nothing on failure."""
        if self._is_ok:
            yield self._value  # type: ignore[misc]


# ═══════════════════════════════════════════════════════════════════════════════
# Constructors
# ═══════════════════════════════════════════════════════════════════════════════


def succeed(value: T) -> Outcome[T]:
    """Construct Success variant."""
    return Outcome(value, _SUCCESS)


def fail(chain: ErrorChain) -> Outcome[T]:
    """Construct Failure variant. Only ErrorChain values are accepted."""
    if not isinstance(chain, ErrorChain):
        raise TypeError(f"fail() requires an ErrorChain, got {type(chain).__name__}")
    return Outcome(chain, _FAILURE)


Success = succeed
Failure = fail


# ═══════════════════════════════════════════════════════════════════════════════
# Pipeline Functions
# ═══════════════════════════════════════════════════════════════════════════════


def and_then(outcome: Outcome[T], next_step: Callable[[T], Outcome[U]]) -> Outcome[U]:
    """Bind next_step onto outcome. Failure short-circuits; next_step is not called."""
    return outcome.and_then(next_step)


async def and_then_async(
    outcome: Outcome[T] | Awaitable[Outcome[T]],
    next_step: Callable[[T], Awaitable[Outcome[U]] | Outcome[U]],
) -> Outcome[U]:
    """Async bind. Accepts an outcome or an awaitable producing one."""
    resolved = await outcome if inspect.isawaitable(outcome) else outcome
    return await resolved.and_then_async(next_step)


def map_context(outcome: Outcome[T], message: str) -> Outcome[T]:
    """Annotate a failure with message; success passes through."""
    return outcome.map_context(message)


def sequence(outcomes: Iterable[Outcome[T]]) -> Outcome[list[T]]:
    """Iterable[Outcome[T]] → Outcome[list[T]]. Fail-fast on first failure."""
    values: list[T] = []
    for o in outcomes:
        if not o._is_ok:
            return o  # type: ignore[return-value]
        values.append(o._value)  # type: ignore[arg-type]
    return Outcome(values, _SUCCESS)


def traverse(items: Iterable[T], step: Callable[[T], Outcome[U]]) -> Outcome[list[U]]:
    """Apply step to each item, collecting values. Stops at the first failure."""
    values: list[U] = []
    for item in items:
        o = step(item)
        if not o._is_ok:
            return o  # type: ignore[return-value]
        values.append(o._value)  # type: ignore[arg-type]
    return Outcome(values, _SUCCESS)
