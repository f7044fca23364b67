# tests/conftest.py
"""Shared grammar sources and fixtures."""

import pytest

from pathlib import Path


# ---------------------------------------------------------------------------
# Grammar sources
# ---------------------------------------------------------------------------

VALID_PEG = "this: that+\nthat: other?\nother: a* a &a a !a\na: 'a'"

INTRINSIC_PEG = "thing: <character> <digit>"

ALTERNATES_PEG = (
    "thing: <punct>\n"
    "       <sep>\n"
    "       <eol>\n"
)

WS_ALPHA_PEG = (
    "thing: <ws>\n"
    "       <alpha>\n"
)

POSITIVE_PEG = "thing: a &b b\na: 'a'\nb: 'b'"

NEGATIVE_PEG = "thing: a !b c\na: 'a'\nb: 'b'\nc: 'c'"

STAR_PEG = "thing: item*\nitem: 'a'"

QUESTION_PEG = "thing: item?\nitem: 'a'"

PLUS_PEG = "thing: item+\nitem: 'a'"

ENTITY_PEG = "thing: <entity:foo> <digit>"

EXTERNAL_PEG = "thing: <external:foo> <digit>"

DATE_PEG = """\
# ISO-ish calendar date
date:     year '-' month '-' day

year:     <digit> <digit> <digit> <digit>

month:    '0' <digit>
          '1' month_hi

month_hi: '0'
          '1'
          '2'

day:      <digit> <digit>
"""


@pytest.fixture
def write(tmp_path):
    """write("sub/x.peg", text) -> Path under tmp_path."""
    def _write(relpath: str, text: str) -> Path:
        p = tmp_path / relpath
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        return p
    return _write
