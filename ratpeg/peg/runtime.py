# ratpeg/peg/runtime.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..errors import ExternalConflictError
from ..grammar.ast import Grammar
from ..grammar.loader import load_grammar, load_grammar_file
from .cursor import Cursor
from .engine import Packrat, MAX_DEPTH
from .tree import Tree

ExternalParser = Callable[[Cursor, Tree], bool]


@dataclass
class PegProgram:
    """Validated grammar plus its entity and external tables.

    Configure entities/externals first; after that the program is only
    read during matching and may be shared between parses.
    """
    grammar: Grammar
    entities: Dict[str, List[str]] = field(default_factory=dict)
    externals: Dict[str, ExternalParser] = field(default_factory=dict)
    minimum_match_length: int = 3

    @classmethod
    def from_source(cls, src: str, **kw) -> "PegProgram":
        return cls(load_grammar(src, **kw))

    @classmethod
    def from_file(cls, path: str, **kw) -> "PegProgram":
        return cls(load_grammar_file(path, **kw))

    # ---- configuration ----
    def register_entity(self, category: str, literal: str) -> None:
        values = self.entities.setdefault(category, [])
        if literal not in values:
            values.append(literal)

    def register_external(self, rule: str, fn: ExternalParser) -> None:
        if rule in self.externals:
            raise ExternalConflictError(rule)
        self.externals[rule] = fn

    def entity_values(self, category: str) -> List[str]:
        """Longest first, so 'bar' wins over 'ba'; ties keep registration order."""
        return sorted(self.entities.get(category, ()), key=len, reverse=True)

    def canonicalize(self, category: str, value: str) -> Optional[str]:
        """Exact entity, or the only entity `value` abbreviates."""
        options = self.entities.get(category, [])
        if value in options:
            return value
        if len(value) < self.minimum_match_length:
            return None
        matches = [o for o in options if o.startswith(value)]
        return matches[0] if len(matches) == 1 else None


class PegRunner:
    """Execute a PEG program on input text."""
    def __init__(self, program: PegProgram, trace: int = 0, max_depth: int = MAX_DEPTH):
        self.program = program
        self.trace = trace
        self.max_depth = max_depth
        self.last: Optional[Packrat] = None

    def run(self, text: str) -> Tree:
        # fresh engine per call: no state leaks between parses
        self.last = Packrat(self.program, trace=self.trace, max_depth=self.max_depth)
        return self.last.parse(text)


def parse(grammar: Union[Grammar, PegProgram],
          text: str,
          entities: Optional[Union[Mapping[str, Iterable[str]], Sequence[Tuple[str, str]]]] = None,
          externals: Optional[Mapping[str, ExternalParser]] = None,
          trace: int = 0) -> Tree:
    """Match the start rule against the whole of `text`.

    `entities` is either a mapping category -> literals or a sequence of
    (category, literal) pairs. Raises ParseError on failure.
    """
    if isinstance(grammar, PegProgram):
        program = PegProgram(
            grammar.grammar,
            {k: list(v) for k, v in grammar.entities.items()},
            dict(grammar.externals),
            grammar.minimum_match_length,
        )
    else:
        program = PegProgram(grammar)

    if entities:
        pairs = entities.items() if isinstance(entities, Mapping) else [(c, [v]) for c, v in entities]
        for category, values in pairs:
            if isinstance(values, str):
                values = [values]
            for v in values:
                program.register_entity(category, v)

    for rule, fn in (externals or {}).items():
        program.register_external(rule, fn)

    return PegRunner(program, trace=trace).run(text)
