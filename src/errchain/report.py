"""Serializable diagnostic snapshots of ErrorChain values.

Chains hold arbitrary fault objects and are not meant to cross process
boundaries. ChainReport captures what a reader needs (messages, depth, root
fault type and description) as a frozen Pydantic model with JSON output.
"""

from __future__ import annotations

from typing import Annotated

import orjson
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, computed_field

from .chain import SEPARATOR, ErrorChain, describe_fault


class FaultInfo(BaseModel):
    """Type name and description of a root fault."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: Annotated[str, Field(min_length=1)]
    message: str

    @classmethod
    def from_fault(cls, fault: object) -> FaultInfo:
        return cls(type=type(fault).__name__, message=describe_fault(fault))


class ChainReport(BaseModel):
    """Snapshot of an ErrorChain for logs, APIs and test assertions."""

    model_config = ConfigDict(
        frozen=True, extra="forbid", revalidate_instances="never",
        json_schema_extra={
            "title": "Error Chain Report",
            "examples": [{
                "messages": ["Can't get user fanf42", "timeout"],
                "depth": 1,
                "root_fault": {"type": "ConnectionError", "message": "timeout"},
            }],
        },
    )

    messages: Annotated[tuple[str, ...], Field(min_length=1)]
    depth: PositiveInt
    root_fault: FaultInfo | None = None

    @computed_field
    @property
    def user_message(self) -> str:
        return SEPARATOR.join(self.messages)

    @classmethod
    def from_chain(cls, chain: ErrorChain) -> ChainReport:
        fault = chain.root_fault()
        return cls(
            messages=chain.messages(),
            depth=chain.depth,
            root_fault=FaultInfo.from_fault(fault) if fault is not None else None,
        )

    def to_json(self) -> str:
        return orjson.dumps(self.model_dump(mode="json")).decode()


def report(chain: ErrorChain) -> ChainReport:
    """Snapshot chain as a ChainReport."""
    return ChainReport.from_chain(chain)
