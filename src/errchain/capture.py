"""Boundary between raising code and Outcome pipelines.

attempt() runs an operation and turns a raised Exception into a Failure whose
root fault is that exception. Only Exception subclasses are captured:
KeyboardInterrupt, SystemExit and asyncio.CancelledError always propagate.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeAlias, TypeVar

from pydantic import ValidationError

from .chain import ErrorChain, wrap_fault
from .logging import get_logger
from .outcome import Outcome, fail, succeed
from .settings import get_settings

P = ParamSpec("P")
T = TypeVar("T")

# Static message, or one built from the call's arguments
MessageSpec: TypeAlias = "str | Callable[..., str]"


def _captured(message: str, exc: Exception) -> Outcome[Any]:
    chain = wrap_fault(message, exc)
    try:
        _log_captured(chain, exc)
    except ValidationError:
        # Broken ERRCHAIN_* settings must not replace the Failure
        pass
    return fail(chain)


def _log_captured(chain: ErrorChain, exc: Exception) -> None:
    if not get_settings().capture.log_faults:
        return
    log = get_logger("errchain.capture")
    if log.is_enabled_for(logging.DEBUG):
        log.debug(
            "fault captured",
            context=chain.message,
            fault_type=type(exc).__name__,
            user_message=chain.user_message(),
        )


def _lift(value: object) -> Outcome[Any]:
    return value if isinstance(value, Outcome) else succeed(value)


def attempt(message: str, operation: Callable[..., T | Outcome[T]], /, *args: Any, **kwargs: Any) -> Outcome[T]:
    """Run operation, converting a raised Exception into Failure(wrap_fault(message, exc)).

    A returned Outcome passes through untouched; any other value becomes Success.

    Example:
        >>> attempt("Can't read config", open, "/missing.toml").unwrap_failure().user_message()
        "Can't read config <- [Errno 2] No such file or directory: '/missing.toml'"
    """
    try:
        result = operation(*args, **kwargs)
    except Exception as exc:
        return _captured(message, exc)
    return _lift(result)


async def attempt_async(
    message: str,
    operation: Callable[..., Awaitable[T | Outcome[T]]] | Callable[..., T | Outcome[T]],
    /,
    *args: Any,
    **kwargs: Any,
) -> Outcome[T]:
    """Async version - awaits coroutine functions, runs sync callables in a thread."""
    try:
        if inspect.iscoroutinefunction(operation):
            result = await operation(*args, **kwargs)
        else:
            result = await asyncio.to_thread(operation, *args, **kwargs)
            if inspect.isawaitable(result):
                result = await result
    except Exception as exc:
        return _captured(message, exc)
    return _lift(result)


def catching(message: MessageSpec) -> Callable[[Callable[P, Any]], Callable[P, Any]]:
    """Decorator: the wrapped function returns an Outcome instead of raising.

    message may be a callable receiving the call's arguments.

    Example:
        >>> @catching(lambda uid: f"Can't get user {uid}")
        ... def get_user(uid: str) -> dict:
        ...     raise ConnectionError("timeout")
        >>> get_user("fanf42").unwrap_failure().user_message()
        "Can't get user fanf42 <- timeout"
    """
    def render(*args: Any, **kwargs: Any) -> str:
        return message(*args, **kwargs) if callable(message) else message

    def decorator(func: Callable[P, Any]) -> Callable[P, Any]:
        if inspect.iscoroutinefunction(func):
            @wraps(func)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> Outcome[Any]:
                try:
                    result = await func(*args, **kwargs)
                except Exception as exc:
                    return _captured(render(*args, **kwargs), exc)
                return _lift(result)
            return async_wrapper

        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> Outcome[Any]:
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                return _captured(render(*args, **kwargs), exc)
            return _lift(result)
        return wrapper

    return decorator


def from_exception(message: str, exc: BaseException) -> ErrorChain:
    """Build a chain from an exception and its explicit ``raise ... from`` causes.

    The outermost exception sits just below message; the deepest ``__cause__``
    becomes the root fault.
    """
    layers: list[BaseException] = []
    current: BaseException | None = exc
    while current is not None and all(current is not seen for seen in layers):
        layers.append(current)
        current = current.__cause__

    *outer, root = layers
    if not outer:
        return wrap_fault(message, root)
    chain = wrap_fault(_describe_layer(outer[-1]), root)
    for layer in reversed(outer[:-1]):
        chain = chain.wrap_context(_describe_layer(layer))
    return chain.wrap_context(message)


def _describe_layer(exc: BaseException) -> str:
    text = str(exc)
    return text if text.strip() else type(exc).__name__
