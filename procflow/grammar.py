"""Procedure text grammar.

Procedure text is a sequence of sigil tokens and bracketed splits:

    * flour , sifted
    * sugar
    [ #0   * butter
    | #1,2 * margarine ; softened
    | #!0,1,2 = skip the fat
    ]
    / combine ; gently
    // comments run to the end of the line

Tokens are a sigil (``*``, ``=``, ``/``, ``,``, ``;``) followed by a phrase of
space-separated alphanumeric words on the same line. A split is
``[ alt | alt | ... ]``; each alternative may open with a gate:

    #0,1   allow slots 0 and 1
    #!0,1  block slots 0 and 1
    #      block every slot
    #!     allow every slot

An alternative without a gate is active for every slot. Split sets are built
innermost first with ``SplitSet.new``, so the resulting flow is normalized.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .flow import Flow, FlowItem, Split, SplitSet
from .gate import Gate
from .tokens import Token, TokenKind

logger = logging.getLogger(__name__)


class ParseError(Exception):
    """Malformed procedure text, with the 1-based position of the problem."""

    def __init__(self, message: str, line: int, column: int):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"line {line}, column {column}: {message}")


# ---------------------------------------------------------------------------
# Lexer
# ---------------------------------------------------------------------------

_LEXEME_RE = re.compile(
    r"""
      (?P<ws>\s+)
    | (?P<comment>//[^\n]*)
    | (?P<gate>\#(?P<negate>!)?(?:[ \t]*(?P<gate_slots>\d+(?:[ \t]*,[ \t]*\d+)*))?)
    | (?P<open>\[)
    | (?P<bar>\|)
    | (?P<close>\])
    | (?P<sigil>[*=/,;])[ \t]*(?P<phrase>[A-Za-z0-9]+(?:[ \t]+[A-Za-z0-9]+)*)?
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Lexeme:
    kind: str  # "token" | "gate" | "open" | "bar" | "close"
    line: int
    column: int
    token: Token | None = None
    gate: Gate | None = None


def _position(text: str, offset: int) -> tuple[int, int]:
    line = text.count("\n", 0, offset) + 1
    column = offset - (text.rfind("\n", 0, offset) + 1) + 1
    return line, column


def lex(text: str) -> list[Lexeme]:
    """Split procedure text into lexemes, dropping whitespace and comments."""
    lexemes: list[Lexeme] = []
    offset = 0

    while offset < len(text):
        m = _LEXEME_RE.match(text, offset)
        if m is None:
            line, column = _position(text, offset)
            raise ParseError(f"unexpected character {text[offset]!r}", line, column)

        line, column = _position(text, offset)
        match m.lastgroup:
            case "ws" | "comment":
                pass
            case "gate":
                slots = m.group("gate_slots")
                values = [int(s) for s in re.split(r"[ \t]*,[ \t]*", slots)] if slots else []
                gate = Gate.block(values) if m.group("negate") else Gate.allow(values)
                lexemes.append(Lexeme("gate", line, column, gate=gate))
            case "open" | "bar" | "close":
                lexemes.append(Lexeme(m.lastgroup, line, column))
            case "sigil" | "phrase":
                phrase = m.group("phrase")
                if phrase is None:
                    raise ParseError(
                        f"expected a phrase after {m.group('sigil')!r}", line, column
                    )
                kind = TokenKind.from_sigil(m.group("sigil"))
                lexemes.append(Lexeme("token", line, column, token=Token(kind, phrase)))
            case other:
                raise ParseError(f"unrecognized lexeme {other!r}", line, column)

        offset = m.end()

    return lexemes


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------


class _Parser:
    def __init__(self, text: str, lexemes: list[Lexeme]):
        self._lexemes = lexemes
        self._pos = 0
        self._end = _position(text, len(text))

    def _peek(self) -> Lexeme | None:
        if self._pos < len(self._lexemes):
            return self._lexemes[self._pos]
        return None

    def _next(self) -> Lexeme:
        lexeme = self._lexemes[self._pos]
        self._pos += 1
        return lexeme

    def parse_root(self) -> Flow:
        flow = self._parse_flow()
        match self._peek():
            case None:
                return flow
            case Lexeme(kind="bar", line=line, column=column):
                raise ParseError("'|' outside of a split", line, column)
            case Lexeme(kind="close", line=line, column=column):
                raise ParseError("unmatched ']'", line, column)
            case Lexeme(line=line, column=column):
                raise ParseError("unexpected input", line, column)
        raise AssertionError("unreachable")

    def _parse_flow(self) -> Flow:
        items: list[FlowItem] = []
        while True:
            match self._peek():
                case Lexeme(kind="token", token=Token() as token):
                    items.append(token)
                    self._next()
                case Lexeme(kind="open"):
                    items.append(self._parse_split())
                case Lexeme(kind="gate", line=line, column=column):
                    raise ParseError("a gate may only open a split alternative", line, column)
                case _:
                    break
        return Flow.new(items)

    def _parse_split(self) -> SplitSet:
        opening = self._next()
        splits: list[Split] = []

        while True:
            gate = Gate.allow_all()
            match self._peek():
                case Lexeme(kind="gate", gate=Gate() as opened):
                    gate = opened
                    self._next()

            splits.append(Split(self._parse_flow(), gate))

            lexeme = self._peek()
            match lexeme:
                case Lexeme(kind="bar"):
                    self._next()
                case Lexeme(kind="close"):
                    self._next()
                    break
                case None:
                    line, column = self._end
                    raise ParseError(
                        f"split opened at line {opening.line}, column "
                        f"{opening.column} is never closed",
                        line,
                        column,
                    )
                case _:
                    raise ParseError("unexpected input in split", lexeme.line, lexeme.column)

        return SplitSet.new(splits)


def parse_flow(text: str) -> Flow:
    """Parse procedure text into a normalized :class:`~procflow.flow.Flow`."""
    lexemes = lex(text)
    flow = _Parser(text, lexemes).parse_root()
    logger.debug(
        "Parsed %d lexemes into a flow of %d items (depth %d)",
        len(lexemes),
        len(flow),
        flow.depth(),
    )
    return flow
