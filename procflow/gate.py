"""Gates over the slot space.

A slot is a small non-negative integer naming one concrete variant of a
procedure (e.g. 0 = default, 1 = vegan). A gate is a predicate over slots,
stored either as an allow-list or as a block-list:

  ALLOW{0, 1}  permits exactly slots 0 and 1
  BLOCK{0, 1}  permits every slot except 0 and 1

The universe of slots is unbounded, so equality is syntactic: ALLOW{0, 1, 2}
and BLOCK{3, 4, ...} never compare equal even if a caller only uses three
slots. Only the canonical zero-size forms are recognized as the extremes:

  BLOCK{}  allow-all
  ALLOW{}  block-all
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

Slot = int


class GateKind(Enum):
    ALLOW = "allow"
    BLOCK = "block"

    def invert(self) -> GateKind:
        match self:
            case GateKind.ALLOW:
                return GateKind.BLOCK
            case GateKind.BLOCK:
                return GateKind.ALLOW


def _slot_set(slots: Iterable[Slot]) -> frozenset[Slot]:
    result = frozenset(slots)
    for s in result:
        if not isinstance(s, int) or s < 0:
            raise ValueError(f"Slots must be non-negative integers, got {s!r}")
    return result


@dataclass(frozen=True)
class Gate:
    """A filter on a procedure's variant pathway.

    Example: Gate.allow([0, 2])  — active only for slots 0 and 2
    Example: Gate.block([1])     — active for every slot but 1
    """

    kind: GateKind
    slots: frozenset[Slot]

    # -- construction ------------------------------------------------------

    @classmethod
    def allow(cls, slots: Iterable[Slot]) -> Gate:
        return cls(GateKind.ALLOW, _slot_set(slots))

    @classmethod
    def block(cls, slots: Iterable[Slot]) -> Gate:
        return cls(GateKind.BLOCK, _slot_set(slots))

    @classmethod
    def allow_all(cls) -> Gate:
        """A gate that blocks no slots."""
        return cls.block(())

    @classmethod
    def block_all(cls) -> Gate:
        """A gate that allows no slots."""
        return cls.allow(())

    # -- predicates --------------------------------------------------------

    @property
    def is_allow(self) -> bool:
        return self.kind == GateKind.ALLOW

    @property
    def is_block(self) -> bool:
        return self.kind == GateKind.BLOCK

    @property
    def is_allow_all(self) -> bool:
        return self.is_block and not self.slots

    @property
    def is_block_all(self) -> bool:
        return self.is_allow and not self.slots

    def allows_slot(self, slot: Slot) -> bool:
        return (slot in self.slots) == self.is_allow

    def blocks_slot(self, slot: Slot) -> bool:
        return not self.allows_slot(slot)

    # -- algebra -----------------------------------------------------------

    def invert(self) -> Gate:
        """Allow every slot this gate blocks, and vice versa."""
        return Gate(self.kind.invert(), self.slots)

    def union(self, other: Gate) -> Gate:
        """Allow any slot allowed by either gate."""
        ls, rs = self.slots, other.slots
        match (self.kind, other.kind):
            case (GateKind.ALLOW, GateKind.ALLOW):
                return Gate(GateKind.ALLOW, ls | rs)
            case (GateKind.ALLOW, GateKind.BLOCK):
                return Gate(GateKind.BLOCK, rs - ls)
            case (GateKind.BLOCK, GateKind.ALLOW):
                return Gate(GateKind.BLOCK, ls - rs)
            case (GateKind.BLOCK, GateKind.BLOCK):
                return Gate(GateKind.BLOCK, ls & rs)
        raise TypeError(f"Unknown gate kinds: {self.kind}, {other.kind}")

    def intersection(self, other: Gate) -> Gate:
        """Allow only slots allowed by both gates."""
        ls, rs = self.slots, other.slots
        match (self.kind, other.kind):
            case (GateKind.ALLOW, GateKind.ALLOW):
                return Gate(GateKind.ALLOW, ls & rs)
            case (GateKind.ALLOW, GateKind.BLOCK):
                return Gate(GateKind.ALLOW, ls - rs)
            case (GateKind.BLOCK, GateKind.ALLOW):
                return Gate(GateKind.ALLOW, rs - ls)
            case (GateKind.BLOCK, GateKind.BLOCK):
                return Gate(GateKind.BLOCK, ls | rs)
        raise TypeError(f"Unknown gate kinds: {self.kind}, {other.kind}")

    def difference(self, other: Gate) -> Gate:
        """Allow slots allowed by this gate but not by ``other``."""
        ls, rs = self.slots, other.slots
        match (self.kind, other.kind):
            case (GateKind.ALLOW, GateKind.ALLOW):
                return Gate(GateKind.ALLOW, ls - rs)
            case (GateKind.ALLOW, GateKind.BLOCK):
                return Gate(GateKind.ALLOW, ls & rs)
            case (GateKind.BLOCK, GateKind.ALLOW):
                return Gate(GateKind.BLOCK, ls | rs)
            case (GateKind.BLOCK, GateKind.BLOCK):
                return Gate(GateKind.ALLOW, rs - ls)
        raise TypeError(f"Unknown gate kinds: {self.kind}, {other.kind}")

    def sym_difference(self, other: Gate) -> Gate:
        """Allow slots allowed by exactly one of the two gates."""
        ls, rs = self.slots, other.slots
        match (self.kind, other.kind):
            case (GateKind.ALLOW, GateKind.ALLOW):
                return Gate(GateKind.ALLOW, ls ^ rs)
            case (GateKind.ALLOW, GateKind.BLOCK):
                return Gate(GateKind.BLOCK, ls ^ rs)
            case (GateKind.BLOCK, GateKind.ALLOW):
                return Gate(GateKind.BLOCK, ls ^ rs)
            case (GateKind.BLOCK, GateKind.BLOCK):
                return Gate(GateKind.ALLOW, ls ^ rs)
        raise TypeError(f"Unknown gate kinds: {self.kind}, {other.kind}")

    __or__ = union
    __and__ = intersection
    __sub__ = difference
    __xor__ = sym_difference

    def __invert__(self) -> Gate:
        return self.invert()

    # -- ordering / display ------------------------------------------------

    @property
    def sort_key(self) -> tuple[int, tuple[Slot, ...]]:
        return (0 if self.is_allow else 1, tuple(sorted(self.slots)))

    def __str__(self) -> str:
        body = ", ".join(str(s) for s in sorted(self.slots))
        return f"{self.kind.name}{{{body}}}"
