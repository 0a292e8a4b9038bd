# hintrating/tree/diff.py
from __future__ import annotations

import difflib
import html
from enum import Enum
from typing import List, Optional, Tuple


class ColorStyle(str, Enum):
    """How changed lines are highlighted in rendered diffs."""
    NONE = "none"
    ANSI = "ansi"
    HTML = "html"


_ANSI = {"+": "\x1b[32m", "-": "\x1b[31m"}
_ANSI_RESET = "\x1b[0m"
_HTML = {"+": "green", "-": "red"}


def _diff_lines(a: str, b: str) -> List[Tuple[str, str]]:
    a_lines = a.splitlines()
    b_lines = b.splitlines()
    out: List[Tuple[str, str]] = []
    matcher = difflib.SequenceMatcher(None, a_lines, b_lines, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            out.extend((" ", line) for line in a_lines[i1:i2])
            continue
        out.extend(("-", line) for line in a_lines[i1:i2])
        out.extend(("+", line) for line in b_lines[j1:j2])
    return out


def _in_context(lines: List[Tuple[str, str]], context: int) -> List[Optional[int]]:
    """Indices of lines within `context` lines of a change; None marks a gap."""
    changed = [i for i, (op, _) in enumerate(lines) if op != " "]
    keep = set()
    for i in changed:
        keep.update(range(max(0, i - context), min(len(lines), i + context + 1)))
    out: List[Optional[int]] = []
    last = -1
    for i in sorted(keep):
        if last >= 0 and i > last + 1:
            out.append(None)
        out.append(i)
        last = i
    return out


def _render(op: str, line: str, style: ColorStyle) -> str:
    text = f"{op} {line}"
    if op == " " or style == ColorStyle.NONE:
        return text
    if style == ColorStyle.ANSI:
        return f"{_ANSI[op]}{text}{_ANSI_RESET}"
    return f'<span style="color: {_HTML[op]}">{html.escape(text)}</span>'


def diff(a: str, b: str, context: Optional[int] = None,
         style: ColorStyle = ColorStyle.NONE) -> str:
    """
    Line diff of two rendered texts.

    Unchanged lines are prefixed with two spaces, removed lines with "- " and
    added lines with "+ ". With `context` set, only lines that many lines
    around a change are kept and skipped runs are shown as "...".
    """
    lines = _diff_lines(a, b)
    if context is None:
        indices: List[Optional[int]] = list(range(len(lines)))
    else:
        indices = _in_context(lines, context)
    rendered = []
    for i in indices:
        if i is None:
            rendered.append("...")
            continue
        op, line = lines[i]
        if style == ColorStyle.HTML and op == " ":
            line = html.escape(line)
        rendered.append(_render(op, line, style))
    separator = "<br />\n" if style == ColorStyle.HTML else "\n"
    return separator.join(rendered)
