import pytest

from procflow import (
    MetaError,
    Step,
    TokenKind,
    action,
    allow,
    alt,
    annotation,
    flow,
    ingredient,
    modifier,
    parse_flow,
    process_meta,
    resolve,
    splits,
)


def test_plain_tokens_become_steps() -> None:
    steps = process_meta([ingredient("flour"), action("sift")])
    assert steps == (
        Step(TokenKind.INGREDIENT, "flour"),
        Step(TokenKind.ACTION, "sift"),
    )


def test_modifiers_and_annotations_fold_onto_previous_step() -> None:
    steps = process_meta(
        [
            ingredient("apple"),
            modifier("granny smith"),
            annotation("cored"),
            modifier("sliced"),
            action("bake"),
            annotation("until golden"),
        ]
    )
    assert steps == (
        Step(TokenKind.INGREDIENT, "apple", mods=("granny smith", "sliced"), anns=("cored",)),
        Step(TokenKind.ACTION, "bake", anns=("until golden",)),
    )


def test_no_step_is_dropped() -> None:
    # Each concrete token keeps its step even after meta tokens attach to it.
    steps = process_meta([ingredient("a"), modifier("m"), ingredient("b"), modifier("n")])
    assert [s.name for s in steps] == ["a", "b"]
    assert [s.mods for s in steps] == [("m",), ("n",)]


def test_leading_meta_token_is_an_error() -> None:
    with pytest.raises(MetaError) as info:
        process_meta([annotation("gently"), action("stir")])
    assert info.value.index == 0
    assert info.value.token == annotation("gently")


def test_empty_walk() -> None:
    assert process_meta([]) == ()


def test_modifier_inside_split_attaches_before_the_split() -> None:
    f = flow(ingredient("butter"), splits(alt(allow(0), modifier("salted"))), action("melt"))
    (walk,) = resolve(f, [0])
    assert process_meta(walk) == (
        Step(TokenKind.INGREDIENT, "butter", mods=("salted",)),
        Step(TokenKind.ACTION, "melt"),
    )


def test_parsed_text_round_trips_through_str() -> None:
    (walk,) = resolve(parse_flow("* apple , granny smith ; cored"), [])
    (step,) = process_meta(walk)
    assert str(step) == "* apple , granny smith ; cored"
