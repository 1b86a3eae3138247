"""Walk resolution: turning a slot selection into concrete token sequences.

A walk is one ordered token sequence through a flow. Resolving a flow
consumes one slot choice per nesting level of branching, not per split:
every split met while walking one flow level shares that level's slot, and
a split nested inside an alternative is resolved by the next level's slot.

Slot choices form a stack popped from the end: the last entry resolves the
top-level splits, the one before it the splits nested one level inside the
chosen alternatives, and so on. ``[inner, outer]`` reads as a list of pushes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from .gate import Slot
from .result import Err, Ok, Result, unwrap
from .tokens import Token

if TYPE_CHECKING:
    from .flow import Flow

logger = logging.getLogger(__name__)

Walk = tuple[Token, ...]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class WalkError(Exception):
    """Base class for malformed variant selections."""


class EmptyStack(WalkError):
    """A split was reached but no slot choice remained for its level."""

    def __init__(self, depth: int, slots: tuple[Slot, ...]):
        self.depth = depth
        self.slots = slots
        super().__init__(
            f"no slot choice for nesting level {depth}; got {len(slots)} "
            f"choice(s): {list(slots)}"
        )


class LeftoverStack(WalkError):
    """The walk finished with slot choices still unconsumed."""

    def __init__(self, leftover: tuple[Slot, ...]):
        self.leftover = leftover
        super().__init__(f"leftover slot choices after walk: {list(leftover)}")


# ---------------------------------------------------------------------------
# Slot cursor
# ---------------------------------------------------------------------------


class SlotStack:
    """An explicit cursor into the caller's slot choices.

    Alternatives at the same level each read from the same cursor at their
    own depth, so an alternative never sees slots consumed by its siblings.
    The cursor records the deepest level any live path consumed.
    """

    def __init__(self, slots: Iterable[Slot]):
        self._slots: tuple[Slot, ...] = tuple(slots)
        self._consumed = 0

    @property
    def slots(self) -> tuple[Slot, ...]:
        return self._slots

    @property
    def consumed(self) -> int:
        return self._consumed

    def take(self, depth: int) -> Slot:
        """Return the slot choice for nesting level ``depth``."""
        if depth >= len(self._slots):
            raise EmptyStack(depth, self._slots)
        if depth + 1 > self._consumed:
            self._consumed = depth + 1
        slot = self._slots[len(self._slots) - 1 - depth]
        logger.debug("Level %d resolved with slot %d", depth, slot)
        return slot

    def leftover(self) -> tuple[Slot, ...]:
        """Choices below the deepest level reached, in their original order."""
        return self._slots[: len(self._slots) - self._consumed]


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------


def walks(flow: Flow, slot_choices: Iterable[Slot]) -> Result[tuple[Walk, ...], WalkError]:
    """Resolve ``flow`` against ``slot_choices``.

    Returns ``Ok(walks)`` on success, ``Err(EmptyStack)`` when a split has no
    slot choice left for its level, or ``Err(LeftoverStack)`` when choices
    remain after the whole flow has been walked.
    """
    stack = SlotStack(slot_choices)
    try:
        found = flow.find_walks(stack)
    except EmptyStack as e:
        logger.debug("Walk failed: %s", e)
        return Err(e)

    leftover = stack.leftover()
    if leftover:
        logger.debug("Walk left %d slot choice(s) unconsumed", len(leftover))
        return Err(LeftoverStack(leftover))
    return Ok(tuple(found))


def resolve(flow: Flow, slot_choices: Iterable[Slot]) -> tuple[Walk, ...]:
    """Like :func:`walks`, but raises the :class:`WalkError` instead."""
    return unwrap(walks(flow, slot_choices))
