"""Tests for ErrorChain construction, traversal and root-fault lookup.

Validates:
- Leaf and fault-rooted chains
- Order law for stacked context
- Purity / idempotence of read operations
- Root fault invariance under wrapping
"""

from __future__ import annotations

import dataclasses

import pytest

from errchain import SEPARATOR, ChainCause, ErrorChain, FaultCause, describe_fault, leaf, wrap_fault


class ConnectionLost(Exception):
    """Raw fault raised by a transport."""


@dataclasses.dataclass(frozen=True)
class DiskFull:
    """Non-exception fault exposing a message accessor."""

    message: str = "DiskFull message"


# ═════════════════════════════════════════════════════════════════════════════
# Construction
# ═════════════════════════════════════════════════════════════════════════════


def test_leaf_has_single_message() -> None:
    chain = leaf("Can't get user")

    assert chain.messages() == ("Can't get user",)
    assert chain.root_fault() is None
    assert chain.cause is None
    assert chain.depth == 1


def test_leaf_classmethod_matches_function() -> None:
    assert ErrorChain.leaf("boom") == leaf("boom")


def test_wrap_fault_captures_fault() -> None:
    fault = ConnectionLost("timeout")
    chain = wrap_fault("Can't get user fanf42", fault)

    assert chain.cause == FaultCause(fault)
    assert chain.root_fault() is fault
    assert chain.messages() == ("Can't get user fanf42", "timeout")
    assert ErrorChain.wrap_fault("Can't get user fanf42", fault) == chain


@pytest.mark.parametrize("message", ["", "   ", None, 42])
def test_invalid_message_rejected(message: object) -> None:
    with pytest.raises(ValueError):
        ErrorChain(message)  # type: ignore[arg-type]


def test_invalid_cause_rejected() -> None:
    with pytest.raises(TypeError):
        ErrorChain("boom", cause="not a cause")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        ChainCause("not a chain")  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        FaultCause(None)


def test_chain_is_immutable() -> None:
    chain = leaf("boom")
    with pytest.raises(dataclasses.FrozenInstanceError):
        chain.message = "other"  # type: ignore[misc]


# ═════════════════════════════════════════════════════════════════════════════
# Context Stacking
# ═════════════════════════════════════════════════════════════════════════════


def test_wrap_context_does_not_mutate_original() -> None:
    inner = leaf("inner")
    outer = inner.wrap_context("outer")

    assert inner.messages() == ("inner",)
    assert outer.cause == ChainCause(inner)
    assert outer.cause.chain is inner


def test_order_law() -> None:
    """wrap_context(m1).wrap_context(m2) lists m2, m1, then the original messages."""
    base = wrap_fault("read row", ConnectionLost("timeout"))
    stacked = base.wrap_context("m1").wrap_context("m2")

    assert stacked.messages() == ("m2", "m1", *base.messages())
    assert stacked.messages() == ("m2", "m1", "read row", "timeout")
    assert stacked.depth == 3


def test_messages_do_not_duplicate() -> None:
    chain = leaf("a").wrap_context("b").wrap_context("c")

    assert chain.messages() == ("c", "b", "a")
    assert len(set(chain.messages())) == 3


def test_root_fault_survives_wrapping() -> None:
    fault = ConnectionLost("timeout")
    chain = wrap_fault("read row", fault)
    for i in range(50):
        chain = chain.wrap_context(f"layer {i}")

    assert chain.root_fault() is fault
    assert chain.messages()[-1] == "timeout"


def test_root_fault_absent_when_chain_ends_in_leaf() -> None:
    chain = leaf("validation failed").wrap_context("Can't save user")

    assert chain.root_fault() is None
    assert chain.messages() == ("Can't save user", "validation failed")


def test_with_fault_replaces_cause() -> None:
    fault = DiskFull()
    chain = leaf("Can't save user fanf42").with_fault(fault)

    assert chain.root_fault() is fault
    assert chain.messages() == ("Can't save user fanf42", "DiskFull message")


def test_deep_chain_does_not_recurse() -> None:
    chain = leaf("root")
    for i in range(5000):
        chain = chain.wrap_context(f"ctx {i}")

    assert len(chain.messages()) == 5001
    assert chain.messages()[0] == "ctx 4999"
    assert chain.root_fault() is None


# ═════════════════════════════════════════════════════════════════════════════
# Formatting & Purity
# ═════════════════════════════════════════════════════════════════════════════


def test_user_message_scenario() -> None:
    fault = ConnectionLost("timeout")
    chain = wrap_fault("Can't get user fanf42", fault)

    assert chain.user_message() == "Can't get user fanf42 <- timeout"
    assert str(chain) == chain.user_message()
    assert SEPARATOR == " <- "


def test_read_operations_are_idempotent() -> None:
    chain = wrap_fault("save", DiskFull()).wrap_context("rename")

    assert chain.messages() == chain.messages()
    assert chain.user_message() == chain.user_message()
    assert chain.root_fault() is chain.root_fault()
    assert list(chain.nodes()) == list(chain.nodes())


def test_structural_equality() -> None:
    fault = ConnectionLost("timeout")

    assert wrap_fault("a", fault).wrap_context("b") == wrap_fault("a", fault).wrap_context("b")
    assert leaf("a") != leaf("b")


def test_describe_fault() -> None:
    assert describe_fault(ConnectionLost("timeout")) == "timeout"
    assert describe_fault(ConnectionLost()) == "ConnectionLost"
    assert describe_fault(DiskFull()) == "DiskFull message"
    assert describe_fault("plain string fault") == "plain string fault"


def test_blank_fault_description_falls_back_to_type_name() -> None:
    assert describe_fault("") == "str"
    assert describe_fault(ConnectionLost("   ")) == "ConnectionLost"
    assert wrap_fault("Can't parse", "").messages() == ("Can't parse", "str")
    assert wrap_fault("Can't parse", "").user_message() == "Can't parse <- str"


def test_chain_fail_lifts_to_outcome() -> None:
    chain = leaf("boom")
    outcome = chain.fail()

    assert outcome.is_failure()
    assert outcome.unwrap_failure() is chain
