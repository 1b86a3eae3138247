"""JSON serialization for flows.

Every type serializes to a dict with a "type" discriminator field.
Round-trip: flow_from_json(flow_to_json(x)) == x for every normalized flow.
"""

from __future__ import annotations

import json
from typing import Any

from .flow import Flow, FlowItem, Split, SplitSet
from .gate import Gate, GateKind
from .tokens import Token, TokenKind


# ---------------------------------------------------------------------------
# Gates and tokens
# ---------------------------------------------------------------------------


def gate_to_json(g: Gate) -> dict[str, Any]:
    return {"type": "gate", "kind": g.kind.value, "slots": sorted(g.slots)}


def gate_from_json(d: dict[str, Any]) -> Gate:
    if d["type"] != "gate":
        raise ValueError(f"Expected gate, got: {d['type']}")
    kind = GateKind(d["kind"])
    if kind == GateKind.ALLOW:
        return Gate.allow(d["slots"])
    return Gate.block(d["slots"])


def token_to_json(t: Token) -> dict[str, Any]:
    return {"type": "token", "kind": t.kind.value, "text": t.text}


def token_from_json(d: dict[str, Any]) -> Token:
    if d["type"] != "token":
        raise ValueError(f"Expected token, got: {d['type']}")
    return Token(kind=TokenKind(d["kind"]), text=d["text"])


# ---------------------------------------------------------------------------
# Flows
# ---------------------------------------------------------------------------


def item_to_json(item: FlowItem) -> dict[str, Any]:
    if isinstance(item, Token):
        return token_to_json(item)
    elif isinstance(item, SplitSet):
        return {
            "type": "split_set",
            "splits": [
                {"flow": flow_to_json(s.flow), "gate": gate_to_json(s.gate)}
                for s in item.splits
            ],
        }
    raise TypeError(f"Unknown flow item type: {type(item)}")


def item_from_json(d: dict[str, Any], *, normalize: bool = True) -> FlowItem:
    t = d["type"]
    if t == "token":
        return token_from_json(d)
    elif t == "split_set":
        splits = [
            Split(
                flow=flow_from_json(s["flow"], normalize=normalize),
                gate=gate_from_json(s["gate"]),
            )
            for s in d["splits"]
        ]
        return SplitSet.new(splits) if normalize else SplitSet(tuple(splits))
    raise ValueError(f"Unknown flow item type: {t}")


def flow_to_json(f: Flow) -> dict[str, Any]:
    return {"type": "flow", "items": [item_to_json(i) for i in f.items]}


def flow_from_json(d: dict[str, Any], *, normalize: bool = True) -> Flow:
    if d["type"] != "flow":
        raise ValueError(f"Expected flow, got: {d['type']}")
    return Flow.new(item_from_json(i, normalize=normalize) for i in d["items"])


# ---------------------------------------------------------------------------
# Convenience: dump / load entire flows as JSON strings
# ---------------------------------------------------------------------------


def dumps(flow: Flow) -> str:
    return json.dumps(flow_to_json(flow), indent=2)


def loads(s: str, *, normalize: bool = True) -> Flow:
    """Load a flow; ``normalize=False`` keeps split sets exactly as stored."""
    return flow_from_json(json.loads(s), normalize=normalize)


def walks_to_json(slots: list[int], found: tuple[tuple[Token, ...], ...]) -> dict[str, Any]:
    return {
        "type": "walks",
        "slots": list(slots),
        "walks": [[token_to_json(t) for t in walk] for walk in found],
    }
