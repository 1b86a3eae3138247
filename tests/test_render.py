from pathlib import Path

from procflow import Step, TokenKind, action, ingredient, modifier
from procflow.render import make_environment, render_tokens, render_walks


def test_render_tokens() -> None:
    text = render_tokens([0], ((ingredient("flour"), modifier("sifted"), action("bake")),))
    assert text == "Variant [0]: 1 walk\n\nWalk 1\n  * flour\n  , sifted\n  = bake\n"


def test_render_walks() -> None:
    steps = (
        Step(TokenKind.INGREDIENT, "apple", mods=("granny smith", "sliced"), anns=("cored",)),
        Step(TokenKind.ACTION, "bake"),
    )
    text = render_walks([1, 2], [steps, steps[1:]])
    assert text == (
        "Variant [1, 2]: 2 walks\n"
        "\n"
        "Walk 1\n"
        "  1. ingredient: apple (granny smith, sliced) [cored]\n"
        "  2. action: bake\n"
        "\n"
        "Walk 2\n"
        "  1. action: bake\n"
    )


def test_no_walks() -> None:
    assert render_walks([], []) == "Variant []: 0 walks\n"


def test_custom_template_dir(tmp_path: Path) -> None:
    (tmp_path / "tokens.txt.j2").write_text(
        "{% for walk in walks %}{{ walk | join(' ') }}\n{% endfor %}", encoding="utf-8"
    )
    env = make_environment(tmp_path)
    assert render_tokens([0], ((ingredient("a"), action("b")),), env) == "* a = b\n"
