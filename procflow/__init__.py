"""procflow: procedures with variant pathways, resolved per slot selection."""

from .gate import Gate, GateKind, Slot
from .tokens import Token, TokenKind
from .flow import (
    Flow,
    FlowItem,
    Split,
    SplitSet,
    normalize_splits,
    normalize_tree,
)
from .walk import (
    EmptyStack,
    LeftoverStack,
    SlotStack,
    Walk,
    WalkError,
    resolve,
    walks,
)
from .grammar import ParseError, parse_flow
from .process import MetaError, Step, process_meta
from .check import CheckResult, Diagnostic, Severity, check_flow
from .serialization import dumps, loads
from .helpers import (
    action, allow, alt, annotation, block, combination, flow, ingredient, modifier, splits
)
from .result import Ok, Err, Result, unwrap

__all__ = [
    # Gates
    "Gate", "GateKind", "Slot",
    # Tokens
    "Token", "TokenKind",
    # Flows
    "Flow", "FlowItem", "Split", "SplitSet", "normalize_splits", "normalize_tree",
    # Walks
    "EmptyStack", "LeftoverStack", "SlotStack", "Walk", "WalkError", "resolve", "walks",
    # Grammar
    "ParseError", "parse_flow",
    # Meta processing
    "MetaError", "Step", "process_meta",
    # Checks
    "CheckResult", "Diagnostic", "Severity", "check_flow",
    # Serialization
    "dumps", "loads",
    # Helpers
    "action", "allow", "alt", "annotation", "block", "combination", "flow",
    "ingredient", "modifier", "splits",
    # Result
    "Ok", "Err", "Result", "unwrap",
]
