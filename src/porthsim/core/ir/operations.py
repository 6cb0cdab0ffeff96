"""
Operation tree types.

The parser turns the token stream into a tree of operations. Control
markers never survive into the tree: every ``if``/``while`` construct is
resolved into an IfOp/WhileOp node that owns its nested blocks.

An operation block is a plain ``list[Operation]``; ordering is execution
order.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from .location import SourceLocation
from .tokens import U64_MAX

# ---------------------------------------------------------------------------
# Intrinsics
# ---------------------------------------------------------------------------


class Intrinsic(StrEnum):
    """Built-in stack operations, keyed by their source spelling."""

    DUP = "dup"
    SWAP = "swap"
    DROP = "drop"
    PRINT = "print"
    OVER = "over"
    ROT = "rot"
    PLUS = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVMOD = "divmod"


_INTRINSICS: dict[str, Intrinsic] = {intrinsic.value: intrinsic for intrinsic in Intrinsic}


def parse_intrinsic(text: str) -> Intrinsic | None:
    """Exact-match ``text`` against the intrinsic table."""
    return _INTRINSICS.get(text)


# ---------------------------------------------------------------------------
# Operation kinds
# ---------------------------------------------------------------------------


class PushInt(BaseModel):
    """Push a literal unsigned 64-bit integer."""

    value: int = Field(ge=0, le=U64_MAX)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return str(self.value)


class IntrinsicOp(BaseModel):
    """Run one built-in stack operation."""

    intrinsic: Intrinsic

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return self.intrinsic.value


class IfStarBlock(BaseModel):
    """
    One ``else <cond> if* <inner>`` link of an if chain.

    ``location`` is the ``if*`` marker; ``cond_block`` is the block that
    followed the preceding ``else``.
    """

    location: SourceLocation
    cond_block: list[Operation] = Field(default_factory=list)
    inner_block: list[Operation] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class IfOp(BaseModel):
    """``if <if_block> [else <cond> if* <inner>]* [else <else_block>] end``"""

    if_block: list[Operation] = Field(default_factory=list)
    if_star_blocks: list[IfStarBlock] = Field(
        default_factory=list, description="Ordered as the else/if* chain appeared"
    )
    else_block: list[Operation] | None = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "if"


class WhileOp(BaseModel):
    """``while <cond_block> do <do_block> end``"""

    cond_block: list[Operation] = Field(default_factory=list)
    do_location: SourceLocation | None = Field(
        default=None, description="Location of the `do` marker, set once it is reached"
    )
    do_block: list[Operation] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return "while"


OpKind = PushInt | IntrinsicOp | IfOp | WhileOp


class Operation(BaseModel):
    """A parsed unit of execution and the location it came from."""

    kind: OpKind
    location: SourceLocation

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"{self.kind} @ {self.location}"


OpBlock = list[Operation]

# Rebuild models for recursive forward references
IfStarBlock.model_rebuild()
IfOp.model_rebuild()
WhileOp.model_rebuild()
Operation.model_rebuild()
