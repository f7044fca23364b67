# ratpeg/grammar/__init__.py
from .ast import (
    Token, Production, Rule, Grammar,
    Quantifier, Lookahead, Tag,
)
from .parser import parse_grammar, parse_token, remove_comment
from .loader import load_grammar, load_grammar_file, resolve_import
from .validate import validate_grammar, INTRINSICS
