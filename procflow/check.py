from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .flow import Flow, SplitSet
from .tokens import Token


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass(frozen=True)
class Diagnostic:
    check: str
    severity: Severity
    message: str
    path: str


@dataclass(frozen=True)
class CheckResult:
    diagnostics: tuple[Diagnostic, ...]

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.ERROR)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.severity == Severity.WARNING)

    @property
    def is_well_formed(self) -> bool:
        return len(self.errors) == 0


@dataclass
class CheckContext:
    diagnostics: list[Diagnostic] = field(default_factory=list)

    def error(self, check: str, message: str, path: str) -> None:
        self.diagnostics.append(Diagnostic(check, Severity.ERROR, message, path))

    def warning(self, check: str, message: str, path: str) -> None:
        self.diagnostics.append(Diagnostic(check, Severity.WARNING, message, path))


def check_split_set(split_set: SplitSet, ctx: CheckContext, path: str) -> None:
    if len(split_set) == 0:
        ctx.error("split_empty", "Split set has no alternatives", path)
        return

    for i, split in enumerate(split_set):
        if split.gate.is_block_all:
            ctx.error(
                "split_dead",
                "Alternative has a block-all gate and can never be taken",
                f"{path}.splits[{i}]",
            )

    union = split_set.union_gate
    if not union.is_allow_all:
        ctx.error(
            "split_total",
            f"Gates union to {union}; slots allowed by {union.invert()} match no alternative",
            path,
        )

    seen: dict[Flow, int] = {}
    for i, split in enumerate(split_set):
        if split.flow in seen:
            ctx.error(
                "split_duplicate_flow",
                f"Alternatives {seen[split.flow]} and {i} share an identical sub-flow",
                f"{path}.splits[{i}]",
            )
        else:
            seen[split.flow] = i

    splits = split_set.splits
    for i in range(len(splits)):
        for j in range(i + 1, len(splits)):
            common = splits[i].gate.intersection(splits[j].gate)
            if common.is_block_all:
                continue
            ctx.warning(
                "split_overlap",
                f"Alternatives {i} and {j} are both live for {common}; "
                "those slots resolve to more than one walk",
                path,
            )

    for i, split in enumerate(split_set):
        check_items(split.flow, ctx, f"{path}.splits[{i}].flow")


def check_items(flow: Flow, ctx: CheckContext, path: str) -> None:
    for i, item in enumerate(flow.items):
        item_path = f"{path}.items[{i}]"
        match item:
            case Token():
                pass
            case SplitSet():
                check_split_set(item, ctx, item_path)
            case _:
                ctx.error(  # type: ignore[unreachable]
                    "item_type",
                    f"Expected Token or SplitSet, got {type(item).__name__}",
                    item_path,
                )


def check_flow(flow: Flow) -> CheckResult:
    """Check every split set in ``flow`` against the normalization invariants.

    Trees built with ``SplitSet.new`` (or parsed from text) are always well
    formed, though overlapping alternatives still produce warnings. The
    checks matter for trees assembled from raw ``SplitSet(...)`` nodes or
    loaded from JSON without normalization.
    """
    ctx = CheckContext()
    check_items(flow, ctx, "flow")
    return CheckResult(diagnostics=tuple(ctx.diagnostics))
