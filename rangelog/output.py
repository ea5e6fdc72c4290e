"""
Machine-readable output for rangelog commands.

``--json`` output is JSONL: one object per line so it pipes into jq.
Failures under ``--json`` become a single object on stderr, leaving
stdout parseable.

    from rangelog.output import emit, emit_error

    emit(releases)
    emit_error("Invalid Version: 1", type="invalid_version", context={"tag": "1"})
"""

import json
import sys
from typing import Iterable, Any, Dict, Optional, TextIO


def _to_data(item: Any) -> Dict[str, Any]:
    if hasattr(item, 'to_dict'):
        return item.to_dict()
    if isinstance(item, dict):
        return item
    return {'value': str(item)}


def _write_line(obj: Dict[str, Any], stream: TextIO) -> None:
    stream.write(json.dumps(obj, ensure_ascii=False) + "\n")
    stream.flush()


def emit(items: Iterable[Any], err: bool = False) -> None:
    """Write each item as a JSON line; objects with ``to_dict()`` are converted first.

    Plain values are wrapped as ``{"value": ...}``. ``err=True`` sends
    the lines to stderr.
    """
    stream = sys.stderr if err else sys.stdout
    for item in items:
        _write_line(_to_data(item), stream)


def emit_error(
    error: str,
    type: str = "error",
    context: Optional[Dict[str, Any]] = None
) -> None:
    """Report a failure as ``{"error", "type"[, "context"]}`` on stderr."""
    payload: Dict[str, Any] = {'error': error, 'type': type}
    if context:
        payload['context'] = context
    _write_line(payload, sys.stderr)
