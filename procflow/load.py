from __future__ import annotations

from pathlib import Path

from procflow.flow import Flow
from procflow.grammar import ParseError, parse_flow
from procflow.serialization import loads


def load_flow_from_file(path: str, *, normalize: bool = True) -> Flow | str:
    """Read a procedure file and return its Flow.

    ``.json`` files are read as serialized flows (see
    :mod:`procflow.serialization`), normalized unless ``normalize`` is false;
    anything else is parsed as procedure text, which is always normalized.

    Returns the :class:`~procflow.flow.Flow` on success, or an error string on
    any failure.
    """
    try:
        source = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return f"Could not read file: {e}"

    if path.endswith(".json"):
        try:
            return loads(source, normalize=normalize)
        except (ValueError, KeyError, TypeError) as e:
            return f"Invalid flow JSON: {e}"

    try:
        return parse_flow(source)
    except ParseError as e:
        return f"{path}:{e.line}:{e.column}: {e.message}"
