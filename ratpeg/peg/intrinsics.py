# ratpeg/peg/intrinsics.py
from __future__ import annotations
import regex as re
from typing import Callable, Dict, Optional

from .cursor import Cursor

# Built-in character classes:
#   <digit>      --> one 0-9                    value: the digit
#   <hex>        --> one 0-9a-fA-F              value: numeric value ("15" for 'f')
#   <character>  --> anything
#   <alpha>      --> Unicode Alphabetic
#   <punct>      --> Unicode punctuation + all ASCII punctuation
#   <ws>         --> Unicode White_Space
#   <sep>        --> horizontal whitespace
#   <eol>        --> vertical whitespace
#   <word>       --> longest run of non-<ws>, non-<punct>
#   <token>      --> longest run of non-<ws>

_PUNCT = r"\p{P}!-/:-@\[-`{-~"
_WS    = r"\p{White_Space}"
_SEP   = r"\t\p{Zs}"
_EOL   = r"\n\x0b\x0c\r\x85\u2028\u2029"

_PATTERNS = {
    "<alpha>": re.compile(r"\p{Alphabetic}"),
    "<punct>": re.compile(f"[{_PUNCT}]"),
    "<ws>":    re.compile(f"[{_WS}]"),
    "<sep>":   re.compile(f"[{_SEP}]"),
    "<eol>":   re.compile(f"[{_EOL}]"),
    "<word>":  re.compile(f"[^{_WS}{_PUNCT}]+"),
    "<token>": re.compile(f"[^{_WS}]+"),
}


def _pattern(name: str) -> Callable[[Cursor], Optional[str]]:
    rx = _PATTERNS[name]

    def match(cur: Cursor) -> Optional[str]:
        m = rx.match(cur.text, cur.pos)
        if not m:
            return None
        cur.restore(m.end())
        return m.group(0)

    return match


def _digit(cur: Cursor) -> Optional[str]:
    d = cur.get_digit()
    return None if d is None else str(d)


def _hex(cur: Cursor) -> Optional[str]:
    d = cur.get_hex_digit()
    return None if d is None else str(d)


def _character(cur: Cursor) -> Optional[str]:
    return cur.get_character()


# intrinsic -> matcher(cursor) -> value | None (cursor unchanged on None)
CLASSES: Dict[str, Callable[[Cursor], Optional[str]]] = {
    "<digit>":     _digit,
    "<hex>":       _hex,
    "<character>": _character,
}
CLASSES.update({name: _pattern(name) for name in _PATTERNS})
