import argparse
import json
import logging
import sys
from collections.abc import Sequence

from procflow.check import Severity, check_flow
from procflow.config import Settings
from procflow.flow import Flow
from procflow.load import load_flow_from_file
from procflow.process import MetaError, process_meta
from procflow.render import make_environment, render_tokens, render_walks
from procflow.result import Err, Ok
from procflow.serialization import dumps, walks_to_json
from procflow.walk import EmptyStack, LeftoverStack, walks

logger = logging.getLogger(__name__)


def parse_slots(raw: str) -> list[int]:
    """Parse ``"0, 1,2"`` into ``[0, 1, 2]``; an empty string means no slots."""
    if not raw.strip():
        return []
    slots = []
    for part in raw.split(","):
        value = int(part.strip())
        if value < 0:
            raise ValueError(f"slots must be non-negative, got {value}")
        slots.append(value)
    return slots


def _load(path: str, *, normalize: bool = True) -> Flow | None:
    match load_flow_from_file(path, normalize=normalize):
        case Flow() as flow:
            return flow
        case str(err):
            print(f"Error loading {path}: {err}", file=sys.stderr)
            return None
    return None


def handle_walk(
    path: str, slots: list[int], *, output: str, raw: bool, settings: Settings
) -> int:
    flow = _load(path)
    if flow is None:
        return 1

    match walks(flow, slots):
        case Ok(found):
            logger.debug("Resolved %d walk(s) for slots %s", len(found), slots)
        case Err(EmptyStack() as e):
            print(
                f"Malformed variant selection {slots}: too few slot choices ({e})",
                file=sys.stderr,
            )
            return 1
        case Err(LeftoverStack() as e):
            print(
                f"Malformed variant selection {slots}: too many slot choices, "
                f"unused {list(e.leftover)}",
                file=sys.stderr,
            )
            return 1
        case Err(e):
            print(f"Malformed variant selection {slots}: {e}", file=sys.stderr)
            return 1

    if output == "json":
        print(json.dumps(walks_to_json(slots, found), indent=2))
        return 0

    env = make_environment(settings.template_dir)
    if raw:
        sys.stdout.write(render_tokens(slots, found, env))
        return 0

    try:
        processed = [process_meta(walk) for walk in found]
    except MetaError as e:
        print(f"Error processing walk: {e}", file=sys.stderr)
        return 1
    sys.stdout.write(render_walks(slots, processed, env))
    return 0


def handle_check(files: Sequence[str], *, verbose: bool) -> int:
    """Load and check a list of procedure files; exit 1 if any has errors."""
    any_failure = False

    for path in files:
        flow = _load(path, normalize=False)
        if flow is None:
            any_failure = True
            continue

        result = check_flow(flow)
        status = "ok" if result.is_well_formed else "ill-formed"
        print(
            f"{path}: {status} (depth {flow.depth()}, "
            f"{len(result.errors)} errors, {len(result.warnings)} warnings)"
        )
        if not result.is_well_formed:
            any_failure = True

        for diag in result.diagnostics:
            if diag.severity == Severity.ERROR or verbose:
                print(f"  - [{diag.check}] {diag.path}: {diag.message} ({diag.severity.name})")

    return 1 if any_failure else 0


def handle_dump(path: str) -> int:
    flow = _load(path)
    if flow is None:
        return 1
    print(dumps(flow))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procflow",
        description="Resolve procedures with variant pathways into concrete step sequences",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Log at DEBUG level regardless of PROCFLOW_LOG_LEVEL.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Command: walk
    walk_parser = subparsers.add_parser(
        "walk",
        help="Resolve a procedure file for one slot selection and print its walks.",
    )
    walk_parser.add_argument("file", metavar="FILE", help="Procedure text or .json flow.")
    walk_parser.add_argument(
        "--slots",
        "-s",
        type=str,
        default="",
        help="Comma-separated slot choices, popped from the end: the last entry "
        "resolves the outermost level (e.g. 1,0).",
    )
    walk_parser.add_argument(
        "--json",
        action="store_true",
        default=False,
        help="Print walks as JSON (default output is set by PROCFLOW_OUTPUT).",
    )
    walk_parser.add_argument(
        "--raw",
        action="store_true",
        default=False,
        help="Print tokens as resolved, without folding modifiers and annotations.",
    )

    # Command: check
    check_parser = subparsers.add_parser(
        "check",
        help="Check procedure files against the split set invariants.",
    )
    check_parser.add_argument("files", nargs="+", metavar="FILE")
    check_parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Also print warnings.",
    )

    # Command: dump
    dump_parser = subparsers.add_parser(
        "dump", help="Print the normalized flow of a procedure file as JSON."
    )
    dump_parser.add_argument("file", metavar="FILE")

    return parser


def run(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    match Settings.from_env():
        case Ok(settings):
            pass
        case Err(e):
            print(f"Invalid configuration: {e}", file=sys.stderr)
            return 2

    logging.basicConfig(
        level=logging.DEBUG if args.debug else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    match args.command:
        case "walk":
            try:
                slots = parse_slots(args.slots)
            except ValueError as e:
                print(f"Invalid --slots {args.slots!r}: {e}", file=sys.stderr)
                return 2
            return handle_walk(
                args.file,
                slots,
                output="json" if args.json else settings.output,
                raw=args.raw,
                settings=settings,
            )
        case "check":
            return handle_check(args.files, verbose=args.verbose)
        case "dump":
            return handle_dump(args.file)
        case None:
            parser.print_help()
            return 1
        case _:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            parser.print_help()
            return 1


def main() -> int:
    """Entry point for the console script."""
    try:
        return run()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
