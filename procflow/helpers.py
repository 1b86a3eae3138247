"""Builder helpers for constructing flows in code.

These are the primary public API for writing flows by hand (tests, fixtures,
callers that skip the text grammar). ``splits`` normalizes, so trees built
with these helpers bottom-up are normalized at every level.
"""

from procflow.flow import Flow, FlowItem, Split, SplitSet
from procflow.gate import Gate, Slot
from procflow.tokens import Token, TokenKind


def allow(*slots: Slot) -> Gate:
    return Gate.allow(slots)


def block(*slots: Slot) -> Gate:
    return Gate.block(slots)


def ingredient(text: str) -> Token:
    return Token(TokenKind.INGREDIENT, text)


def action(text: str) -> Token:
    return Token(TokenKind.ACTION, text)


def combination(text: str) -> Token:
    return Token(TokenKind.COMBINATION, text)


def modifier(text: str) -> Token:
    return Token(TokenKind.MODIFIER, text)


def annotation(text: str) -> Token:
    return Token(TokenKind.ANNOTATION, text)


def flow(*items: FlowItem) -> Flow:
    return Flow(tuple(items))


def alt(gate: Gate, *items: FlowItem) -> Split:
    """One gated alternative: ``alt(allow(0), ingredient("butter"))``."""
    return Split(flow=Flow(tuple(items)), gate=gate)


def splits(*alternatives: Split) -> SplitSet:
    """A normalized split set."""
    return SplitSet.new(alternatives)
