"""Contextual error chains and fail-fast Outcome pipelines.

- ErrorChain: immutable failure explanation, outer context first, raw fault last
- Outcome/succeed/fail: success value or ErrorChain failure
- and_then/map_context/on_error: compose fallible steps and annotate failures
- attempt/catching: turn raised exceptions into failures at the boundary
- ChainError/raise_for: turn failures back into exceptions
- ChainReport: serializable snapshot for diagnostics

Example:
    >>> from errchain import attempt, succeed
    >>>
    >>> def get_user(uid: str) -> Outcome[dict]:
    ...     return attempt(f"Can't get user {uid}", db.fetch, uid)
    >>>
    >>> saved = (
    ...     get_user("fanf42")
    ...     .map(lambda u: {**u, "name": u["name"].capitalize()})
    ...     .and_then(save_user)
    ...     .on_error("Can't rename user")
    ... )
    >>> if saved.is_failure():
    ...     print(saved.unwrap_failure().user_message())
"""

from .capture import attempt, attempt_async, catching, from_exception
from .chain import SEPARATOR, Cause, ChainCause, ErrorChain, FaultCause, describe_fault, leaf, wrap_fault
from .errors import ChainError, raise_for
from .outcome import (
    Failure,
    Outcome,
    Success,
    and_then,
    and_then_async,
    fail,
    map_context,
    sequence,
    succeed,
    traverse,
)
from .report import ChainReport, FaultInfo, report

__all__ = [
    # Error chain
    "ErrorChain", "FaultCause", "ChainCause", "Cause", "SEPARATOR",
    "leaf", "wrap_fault", "describe_fault",
    # Outcome pipeline
    "Outcome", "Success", "Failure", "succeed", "fail",
    "and_then", "and_then_async", "map_context", "sequence", "traverse",
    # Exception boundary
    "attempt", "attempt_async", "catching", "from_exception",
    "ChainError", "raise_for",
    # Diagnostics
    "ChainReport", "FaultInfo", "report",
]
