# ratpeg/peg/__init__.py
"""Packrat matching engine for ratpeg grammars.

This package provides:
- a text Cursor with checkpoint/restore
- the parse Tree
- the built-in intrinsic character classes
- the Packrat engine and the PegProgram/PegRunner runtime

The grammar model it interprets lives in ratpeg.grammar.
"""

from .cursor import Cursor
from .tree import Tree
from .engine import Packrat
from .runtime import PegProgram, PegRunner, ExternalParser, parse
