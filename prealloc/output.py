"""Render hints for the terminal or for machines."""

from __future__ import annotations

import json
from collections.abc import Sequence

from prealloc.engine.hints import Hint


def hint_payload(hint: Hint) -> dict:
    return {
        "file": hint.position.filename,
        "line": hint.position.line,
        "column": hint.position.column,
        "offset": hint.position.offset,
        "name": hint.declared_slice_name,
        "message": hint.message,
    }


def render_text(hints: Sequence[Hint]) -> str:
    return "".join(f"{hint}\n" for hint in hints)


def render_json(hints: Sequence[Hint]) -> str:
    payload = {"hints": [hint_payload(hint) for hint in hints], "count": len(hints)}
    return json.dumps(payload, indent=2) + "\n"


RENDERERS = {"text": render_text, "json": render_json}


__all__ = ["RENDERERS", "hint_payload", "render_json", "render_text"]
