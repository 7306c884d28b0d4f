from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

_INDENT_RE = re.compile(r"^(?:( )+|\t+)")

SPACE = "space"
TAB = "tab"


@dataclass
class Indent:
    """Dominant indentation of a text.

    type is "space", "tab" or None when no indentation was found, in which
    case amount is 0 and indent is the empty string.
    """

    amount: int
    type: Optional[str]
    indent: str


def _indents_map(text: str, ignore_single_spaces: bool) -> Dict[Tuple[str, int], list]:
    """Count indentation deltas between consecutive indented lines.

    Each entry maps (type, delta) to [times used, weight], where weight counts
    the lines that repeated the previous indentation unchanged.
    """
    indents: Dict[Tuple[str, int], list] = {}
    previous_size = 0
    previous_type = ""
    key: Optional[Tuple[str, int]] = None

    for line in text.split("\n"):
        if not line:
            continue
        m = _INDENT_RE.match(line)
        if m is None:
            previous_size = 0
            previous_type = ""
            continue

        size = len(m.group(0))
        indent_type = SPACE if m.group(1) else TAB
        if ignore_single_spaces and indent_type == SPACE and size == 1:
            continue
        if indent_type != previous_type:
            previous_size = 0
        previous_type = indent_type

        weight = 0
        delta = size - previous_size
        previous_size = size
        if delta == 0:
            weight += 1
        else:
            key = (indent_type, abs(delta))

        entry = indents.get(key)  # type: ignore[arg-type]
        if entry is None:
            entry = [1, 0]
        else:
            entry = [entry[0] + 1, entry[1] + weight]
        indents[key] = entry  # type: ignore[index]
    return indents


def _most_used_key(indents: Dict[Tuple[str, int], list]) -> Optional[Tuple[str, int]]:
    best = None
    best_used = 0
    best_weight = 0
    for key, (used, weight) in indents.items():
        if used > best_used or (used == best_used and weight > best_weight):
            best = key
            best_used = used
            best_weight = weight
    return best


def detect_indent(text: str) -> Indent:
    indents = _indents_map(text, ignore_single_spaces=True)
    if not indents:
        indents = _indents_map(text, ignore_single_spaces=False)
    key = _most_used_key(indents)
    if key is None:
        return Indent(amount=0, type=None, indent="")
    indent_type, amount = key
    char = " " if indent_type == SPACE else "\t"
    return Indent(amount=amount, type=indent_type, indent=char * amount)
