"""Tests for walk resolution: slot consumption per nesting level, errors."""

from __future__ import annotations

import pytest

from procflow import (
    EmptyStack,
    Err,
    Flow,
    LeftoverStack,
    Ok,
    Split,
    SplitSet,
    SlotStack,
    allow,
    alt,
    block,
    flow,
    ingredient,
    resolve,
    splits,
    walks,
)

A, B, C, D, E = (ingredient(n) for n in "abcde")
X, Y = ingredient("x"), ingredient("y")


def _walks_ok(f: Flow, slots: list[int]) -> tuple:
    match walks(f, slots):
        case Ok(found):
            return found
        case Err(e):
            pytest.fail(f"Expected Ok, got Err: {e}")


def _walks_err(f: Flow, slots: list[int]) -> Exception:
    match walks(f, slots):
        case Err(e):
            return e
        case Ok(found):
            pytest.fail(f"Expected Err, got Ok: {found}")


# ---------------------------------------------------------------------------
# Flat flows
# ---------------------------------------------------------------------------


def test_tokens_only() -> None:
    assert _walks_ok(flow(A), []) == ((A,),)
    assert _walks_ok(flow(A, B), []) == ((A, B),)
    assert _walks_ok(flow(), []) == ((),)


def test_find_walks_ignores_unused_choices() -> None:
    # find_walks itself never checks for leftovers; only walks() does.
    assert flow(A).find_walks(SlotStack([0])) == [(A,)]


def test_allowed_split_contributes_its_subflow() -> None:
    f = flow(A, splits(alt(allow(0), B)), C)
    assert _walks_ok(f, [0]) == ((A, B, C),)


def test_blocked_split_falls_through_escape_hatch() -> None:
    f = flow(A, splits(alt(allow(0), B)), C)
    assert _walks_ok(f, [1]) == ((A, C),)


def test_splits_at_one_level_share_one_slot() -> None:
    f = flow(
        A,
        splits(alt(allow(1), B)),
        C,
        splits(alt(allow(1), D), alt(allow(0), E)),
    )
    assert _walks_ok(f, [1]) == ((A, B, C, D),)
    assert _walks_ok(f, [0]) == ((A, C, E),)
    assert isinstance(_walks_err(f, [1, 1]), LeftoverStack)


def test_overlapping_alternatives_produce_one_walk_each() -> None:
    f = flow(A, splits(alt(block(), B), alt(allow(0), C)))
    assert _walks_ok(f, [0]) == ((A, B), (A, C))
    assert _walks_ok(f, [1]) == ((A, B),)


def test_cross_product_of_prefixes() -> None:
    f = flow(
        splits(alt(block(), A), alt(allow(0), B)),
        splits(alt(block(), C), alt(allow(0), D)),
    )
    assert _walks_ok(f, [0]) == ((A, C), (A, D), (B, C), (B, D))


def test_blocked_raw_split_contributes_no_walks() -> None:
    raw = SplitSet((Split(flow(B), allow(0)),))
    f = flow(A, raw, C)
    assert _walks_ok(f, [0]) == ((A, B, C),)
    assert _walks_ok(f, [1]) == ()


# ---------------------------------------------------------------------------
# Nesting and stack discipline
# ---------------------------------------------------------------------------


@pytest.fixture
def nested() -> Flow:
    # Slot 0 at the top level leads into a second level of branching.
    return flow(A, splits(alt(allow(0), B, splits(alt(allow(1), C)))))


def test_nested_levels_consume_one_slot_each(nested: Flow) -> None:
    assert _walks_ok(nested, [1, 0]) == ((A, B, C),)
    assert _walks_ok(nested, [0, 0]) == ((A, B),)


def test_last_choice_resolves_outermost_level() -> None:
    f = flow(splits(alt(allow(2), A, splits(alt(allow(1), B, splits(alt(allow(0), C)))))))
    assert _walks_ok(f, [0, 1, 2]) == ((A, B, C),)
    err = _walks_err(f, [2, 1, 0])
    assert isinstance(err, LeftoverStack)
    assert err.leftover == (2, 1)


def test_too_few_slots_is_empty_stack(nested: Flow) -> None:
    err = _walks_err(nested, [0])
    assert isinstance(err, EmptyStack)
    assert err.depth == 1
    assert err.slots == (0,)


def test_no_slots_for_top_level_split() -> None:
    err = _walks_err(flow(splits(alt(allow(0), A))), [])
    assert isinstance(err, EmptyStack)
    assert err.depth == 0


def test_too_many_slots_is_leftover_stack(nested: Flow) -> None:
    err = _walks_err(nested, [2, 1, 0])
    assert isinstance(err, LeftoverStack)
    assert err.leftover == (2,)
    assert "[2]" in str(err)


def test_required_slots_follow_the_chosen_path(nested: Flow) -> None:
    # Slot 1 takes the escape hatch at the top level, which has no nesting.
    assert _walks_ok(nested, [1]) == ((A,),)
    err = _walks_err(nested, [0, 1])
    assert isinstance(err, LeftoverStack)
    assert err.leftover == (0,)


def test_sibling_alternatives_share_the_next_level_slot() -> None:
    f = flow(
        splits(
            alt(block(), B, splits(alt(allow(5), X))),
            alt(allow(0), C, splits(alt(allow(5), Y))),
        )
    )
    assert _walks_ok(f, [5, 0]) == ((B, X), (C, Y))
    assert _walks_ok(f, [4, 0]) == ((B,), (C,))


def test_walks_do_not_mutate_caller_choices(nested: Flow) -> None:
    slots = [1, 0]
    _walks_ok(nested, slots)
    assert slots == [1, 0]


def test_deterministic(nested: Flow) -> None:
    assert _walks_ok(nested, [1, 0]) == _walks_ok(nested, [1, 0])


def test_resolve_raises() -> None:
    f = flow(splits(alt(allow(0), A)))
    assert resolve(f, [0]) == ((A,),)
    with pytest.raises(EmptyStack):
        resolve(f, [])
    with pytest.raises(LeftoverStack):
        resolve(f, [0, 0])


# ---------------------------------------------------------------------------
# SlotStack
# ---------------------------------------------------------------------------


def test_slot_stack_tracks_deepest_level() -> None:
    stack = SlotStack([3, 4, 5])
    assert stack.take(0) == 5
    assert stack.take(1) == 4
    assert stack.take(0) == 5
    assert stack.consumed == 2
    assert stack.leftover() == (3,)
    with pytest.raises(EmptyStack):
        stack.take(3)
