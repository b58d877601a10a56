"""Conversion between a cell's logical text and its on-disk ``source`` field.

Notebook files store source either as one string or as a list of line
fragments. Both decode to the same text; this engine always writes the list
form, split after each ``\\n`` so that joining the fragments restores the
original characters exactly.
"""

from __future__ import annotations

from typing import Any


def decode_source(value: Any) -> str:
    """Return the logical text of a ``source`` field."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list) and all(isinstance(fragment, str) for fragment in value):
        return "".join(value)
    raise TypeError(f"source must be a string or a list of strings, got {type(value).__name__}")


def encode_source(text: str) -> list[str]:
    """Split ``text`` into line fragments that keep their ``\\n`` terminators."""
    if not text:
        return []
    lines = [line + "\n" for line in text.split("\n")]
    # the piece after the last "\n" has no terminator of its own
    lines[-1] = lines[-1][:-1]
    if not lines[-1]:
        lines.pop()
    return lines
