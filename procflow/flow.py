"""Flows: every variant of a procedure as one tree.

A Flow is an ordered sequence of items, each either a Token or a SplitSet.
A SplitSet is the set of gated alternatives at one branch point; each Split
pairs a sub-flow with the gate under which it is active.

  * flour
  [ #0 * butter | #1 * margarine ]
  = bake

  Flow((Token(*flour),
        SplitSet((Split(Flow((*butter,)), ALLOW{0}),
                  Split(Flow((*margarine,)), ALLOW{1}),
                  Split(Flow(()), BLOCK{0, 1}))),
        Token(=bake)))

All nodes are immutable. Normalization builds new nodes only where it
rewrites a split set; untouched sub-flows are shared by reference.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from functools import reduce
from typing import Any

from .gate import Gate, Slot
from .tokens import Token
from .walk import SlotStack, Walk

logger = logging.getLogger(__name__)


def _item_key(item: FlowItem) -> tuple[int, Any]:
    match item:
        case Token():
            return (0, item.sort_key)
        case SplitSet():
            return (1, item.sort_key)
    raise TypeError(f"Unknown flow item type: {type(item)}")


# ---------------------------------------------------------------------------
# Flow
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Flow:
    """An ordered sequence of tokens and split sets."""

    items: tuple[FlowItem, ...] = ()

    @classmethod
    def new(cls, items: Iterable[FlowItem]) -> Flow:
        return cls(tuple(items))

    @classmethod
    def empty(cls) -> Flow:
        return cls(())

    def __iter__(self) -> Iterator[FlowItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def sort_key(self) -> tuple[tuple[int, Any], ...]:
        return tuple(_item_key(i) for i in self.items)

    def depth(self) -> int:
        """Maximum number of nested branching levels in this flow."""
        deepest = 0
        for item in self.items:
            if isinstance(item, SplitSet):
                deepest = max(deepest, 1 + max((s.flow.depth() for s in item), default=0))
        return deepest

    def tokens(self) -> Iterator[Token]:
        """Every token in the tree, depth first, across all alternatives."""
        for item in self.items:
            match item:
                case Token():
                    yield item
                case SplitSet():
                    for split in item:
                        yield from split.flow.tokens()

    def find_walks(self, stack: SlotStack, depth: int = 0) -> list[Walk]:
        """Expand this flow into every walk selected by ``stack``.

        All splits directly in this flow share one slot choice, taken from
        ``stack`` at ``depth`` when the first split is reached. Raises
        :class:`~procflow.walk.EmptyStack` if no choice remains for the level.
        """
        results: list[Walk] = [()]
        target: Slot | None = None

        for item in self.items:
            match item:
                case Token():
                    results = [walk + (item,) for walk in results]
                case SplitSet():
                    if target is None:
                        target = stack.take(depth)
                    split_walks = item.find_walks(target, stack, depth + 1)
                    results = [walk + tail for walk in results for tail in split_walks]
                case _:
                    raise TypeError(f"Unknown flow item type: {type(item)}")

        return results


# ---------------------------------------------------------------------------
# Splits
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Split:
    """A sub-flow that is active when its gate allows the current slot."""

    flow: Flow
    gate: Gate

    @property
    def sort_key(self) -> tuple[Any, ...]:
        return (self.flow.sort_key, self.gate.sort_key)

    def find_walks(self, target: Slot, stack: SlotStack, depth: int) -> list[Walk]:
        if self.gate.blocks_slot(target):
            return []
        return self.flow.find_walks(stack, depth)


@dataclass(frozen=True)
class SplitSet:
    """All alternatives at one branch point.

    ``SplitSet(splits)`` stores the splits as given; ``SplitSet.new(splits)``
    normalizes them first. Trees built through ``new`` bottom-up are fully
    normalized.
    """

    splits: tuple[Split, ...]

    @classmethod
    def new(cls, splits: Iterable[Split]) -> SplitSet:
        return cls(normalize_splits(splits))

    def __iter__(self) -> Iterator[Split]:
        return iter(self.splits)

    def __len__(self) -> int:
        return len(self.splits)

    @property
    def gates(self) -> tuple[Gate, ...]:
        return tuple(s.gate for s in self.splits)

    @property
    def union_gate(self) -> Gate:
        return reduce(Gate.union, self.gates, Gate.block_all())

    @property
    def is_normalized(self) -> bool:
        return normalize_splits(self.splits) == self.splits

    @property
    def sort_key(self) -> tuple[Any, ...]:
        return tuple(s.sort_key for s in self.splits)

    def live_splits(self, slot: Slot) -> tuple[Split, ...]:
        return tuple(s for s in self.splits if s.gate.allows_slot(slot))

    def find_walks(self, target: Slot, stack: SlotStack, depth: int) -> list[Walk]:
        """Walks of every alternative allowing ``target``, in canonical order."""
        return [
            walk for split in self.splits for walk in split.find_walks(target, stack, depth)
        ]


FlowItem = Token | SplitSet


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


def normalize_splits(splits: Iterable[Split]) -> tuple[Split, ...]:
    """Coalesce a set of alternatives into a total, minimal partition.

    1. Alternatives with a block-all gate are dropped.
    2. If the union of the remaining gates is not allow-all, an empty
       alternative gated by the inverse of that union is added, so every
       slot has at least one live alternative.
    3. Alternatives with structurally equal sub-flows are merged and their
       gates unioned.

    Nested split sets inside the sub-flows are taken as they are; trees built
    bottom-up are already normalized below this level.
    """
    live = [s for s in splits if not s.gate.is_block_all]

    union_gate = reduce(lambda acc, s: acc.union(s.gate), live, Gate.block_all())
    if not union_gate.is_allow_all:
        escape = Split(Flow.empty(), union_gate.invert())
        logger.debug("Adding escape hatch alternative gated by %s", escape.gate)
        live.append(escape)

    flow_to_gate: dict[Flow, Gate] = {}
    for split in live:
        flow_to_gate[split.flow] = flow_to_gate.get(split.flow, Gate.block_all()).union(
            split.gate
        )

    if len(flow_to_gate) < len(live):
        logger.debug("Merged %d alternatives into %d", len(live), len(flow_to_gate))

    return tuple(
        sorted(
            (Split(flow, gate) for flow, gate in flow_to_gate.items()),
            key=lambda s: s.sort_key,
        )
    )


def normalize_tree(flow: Flow) -> Flow:
    """Normalize every split set in ``flow``, innermost first.

    Returns ``flow`` itself when nothing needed rewriting.
    """
    items: list[FlowItem] = []
    changed = False

    for item in flow.items:
        match item:
            case SplitSet():
                inner = [Split(normalize_tree(s.flow), s.gate) for s in item.splits]
                rebuilt = SplitSet.new(inner)
                if rebuilt != item:
                    changed = True
                    items.append(rebuilt)
                else:
                    items.append(item)
            case _:
                items.append(item)

    return Flow.new(items) if changed else flow
