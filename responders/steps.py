"""
Splits a generated answer into walkthrough steps.
"""
from __future__ import annotations

import re

STEP_MARKER_RE = re.compile(r"\[STEP_(\d+)\](.*?)(?=\[STEP_\d+\]|\Z)", re.DOTALL)
HAS_NEXT_STEPS = "[HAS_NEXT_STEPS]"
BLANK_LINE_RE = re.compile(r"\n[ \t]*\n")


def parse_steps(text: str) -> list[str]:
    """
    Split text into an ordered, non-empty list of steps.

    `[STEP_n]` markers win; steps are ordered by n and indices may be sparse
    (a repeated n keeps the later text). Without markers, a `[HAS_NEXT_STEPS]`
    sentinel splits the text on blank lines. Otherwise the whole text is one step.
    """
    text = text or ""

    numbered: dict[int, str] = {}
    for match in STEP_MARKER_RE.finditer(text):
        body = match.group(2).replace(HAS_NEXT_STEPS, "").strip()
        if body:
            numbered[int(match.group(1))] = body
    if numbered:
        return [numbered[n] for n in sorted(numbered)]

    if HAS_NEXT_STEPS in text:
        cleaned = text.replace(HAS_NEXT_STEPS, "").strip()
        parts = [part.strip() for part in BLANK_LINE_RE.split(cleaned)]
        parts = [part for part in parts if part]
        if len(parts) > 1:
            return parts
        return [cleaned]

    return [text.strip()]
