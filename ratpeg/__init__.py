# ratpeg/__init__.py
"""ratpeg – PEG grammar loader, validator and packrat matcher.

    >>> from ratpeg import load_grammar, parse
    >>> g = load_grammar("thing: <character> <digit>")
    >>> tree = parse(g, "12")
    >>> [b.attribute("value") for b in tree.branches]
    ['1', '2']
"""

from .errors import (
    RatpegError, GrammarLoadError, GrammarValidationError,
    ParseError, ExternalConflictError,
)
from .grammar import (
    Token, Production, Rule, Grammar, Quantifier, Lookahead, Tag,
    load_grammar, load_grammar_file, validate_grammar,
)
from .peg import Cursor, Tree, Packrat, PegProgram, PegRunner, parse

__version__ = "0.1.0"
