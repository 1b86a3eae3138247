"""Domain tokens: the leaves of a procedure flow.

Each token is written in procedure text as a sigil followed by a phrase:

  * flour          ingredient
  = sift           action
  / fold together  combination
  , sifted         modifier    (attaches to the preceding concrete token)
  ; gently         annotation  (attaches to the preceding concrete token)

Flows, gates and walk resolution treat tokens as opaque ordered values.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenKind(Enum):
    INGREDIENT = "ingredient"
    ACTION = "action"
    COMBINATION = "combination"
    MODIFIER = "modifier"
    ANNOTATION = "annotation"

    @property
    def sigil(self) -> str:
        return _SIGILS[self]

    @property
    def is_meta(self) -> bool:
        return self in (TokenKind.MODIFIER, TokenKind.ANNOTATION)

    @classmethod
    def from_sigil(cls, sigil: str) -> TokenKind:
        for kind, s in _SIGILS.items():
            if s == sigil:
                return kind
        raise ValueError(f"Unknown token sigil: {sigil!r}")


_SIGILS: dict[TokenKind, str] = {
    TokenKind.INGREDIENT: "*",
    TokenKind.ACTION: "=",
    TokenKind.COMBINATION: "/",
    TokenKind.MODIFIER: ",",
    TokenKind.ANNOTATION: ";",
}


@dataclass(frozen=True)
class Token:
    """A single procedure element.

    Example: * flour  — Token(TokenKind.INGREDIENT, "flour")
    """

    kind: TokenKind
    text: str

    @property
    def is_meta(self) -> bool:
        return self.kind.is_meta

    @property
    def sort_key(self) -> tuple[str, str]:
        return (self.kind.value, self.text)

    def __lt__(self, other: Token) -> bool:
        return self.sort_key < other.sort_key

    def __str__(self) -> str:
        return f"{self.kind.sigil} {self.text}"
