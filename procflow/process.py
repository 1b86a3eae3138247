"""Meta processing of resolved walks.

Modifier and annotation tokens describe the concrete token before them:

    * apple , granny smith ; cored  ->  Step(INGREDIENT, "apple",
                                             mods=("granny smith",),
                                             anns=("cored",))

Folding runs on walks rather than on the flow, since a modifier inside a
split may describe a token that precedes the split.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace

from .tokens import Token, TokenKind


class MetaError(Exception):
    """A modifier or annotation had no concrete token to attach to."""

    def __init__(self, token: Token, index: int):
        self.token = token
        self.index = index
        super().__init__(
            f"{token.kind.value} {token.text!r} at position {index} has no preceding step"
        )


@dataclass(frozen=True)
class Step:
    """A concrete token with its modifiers and annotations folded in."""

    kind: TokenKind
    name: str
    mods: tuple[str, ...] = field(default=())
    anns: tuple[str, ...] = field(default=())

    def __str__(self) -> str:
        text = f"{self.kind.sigil} {self.name}"
        for m in self.mods:
            text += f" , {m}"
        for a in self.anns:
            text += f" ; {a}"
        return text


def process_meta(tokens: Iterable[Token]) -> tuple[Step, ...]:
    """Fold modifier and annotation tokens onto the preceding concrete step."""
    steps: list[Step] = []
    for index, token in enumerate(tokens):
        match token.kind:
            case TokenKind.MODIFIER | TokenKind.ANNOTATION if not steps:
                raise MetaError(token, index)
            case TokenKind.MODIFIER:
                steps[-1] = replace(steps[-1], mods=steps[-1].mods + (token.text,))
            case TokenKind.ANNOTATION:
                steps[-1] = replace(steps[-1], anns=steps[-1].anns + (token.text,))
            case _:
                steps.append(Step(token.kind, token.text))
    return tuple(steps)
