# ratpeg/peg/cursor.py
from __future__ import annotations
from typing import Optional

# Positional scanner over the input text.
# - `pos` is a plain int and serves as the checkpoint value.
# - Every get_*/skip* either consumes and returns a truthy value, or leaves
#   the position untouched.

_HEX = "0123456789abcdefABCDEF"


class Cursor:
    def __init__(self, text: str):
        self.text = text
        self.n = len(text)
        self.pos = 0

    # ---- checkpoint / restore ----
    def restore(self, pos: int) -> None:
        self.pos = pos

    def eos(self) -> bool:
        return self.pos >= self.n

    def peek(self, k: int = 0) -> str:
        j = self.pos + k
        if j >= self.n:
            return ""
        return self.text[j]

    def remainder(self) -> str:
        return self.text[self.pos:]

    def substr(self, start: int, end: Optional[int] = None) -> str:
        return self.text[start:self.pos if end is None else end]

    # ---- consumption ----
    def skip(self, ch: str) -> bool:
        if ch and self.peek() == ch:
            self.pos += 1
            return True
        return False

    def skip_n(self, count: int = 1) -> bool:
        if self.pos + count > self.n:
            return False
        self.pos += count
        return True

    def skip_literal(self, literal: str) -> bool:
        if self.text.startswith(literal, self.pos):
            self.pos += len(literal)
            return True
        return False

    def get_character(self) -> Optional[str]:
        if self.eos():
            return None
        c = self.text[self.pos]
        self.pos += 1
        return c

    def get_digit(self) -> Optional[int]:
        c = self.peek()
        if c and "0" <= c <= "9":
            self.pos += 1
            return ord(c) - ord("0")
        return None

    def get_hex_digit(self) -> Optional[int]:
        c = self.peek()
        if c and c in _HEX:
            self.pos += 1
            return int(c, 16)
        return None

    def get_digits(self, count: int) -> Optional[int]:
        """Exactly `count` consecutive decimal digits, as a number."""
        chunk = self.text[self.pos:self.pos + count]
        if len(chunk) != count or not all("0" <= c <= "9" for c in chunk):
            return None
        self.pos += count
        return int(chunk)

    def dump(self) -> str:
        return f"≪{self.text[:self.pos]}┃{self.text[self.pos:]}≫ {self.pos}/{self.n}"
