# ratpeg/grammar/ast.py
"""Grammar model
- Token      : 프로덕션 안의 기호 하나 (규칙 이름 / 리터럴 / intrinsic)
- Production : Token 시퀀스 (대안 하나)
- Rule       : Production 리스트 (선언 순서대로 시도, 먼저 맞는 쪽이 이김)
- Grammar    : 규칙 이름 -> Rule, 시작 규칙, import 목록
"""

from __future__     import annotations
from dataclasses    import dataclass, field
from typing         import List, Dict, FrozenSet, Optional

from ..errors import GrammarValidationError

_BLUE  = "\033[34m"
_RESET = "\033[0m"


class Quantifier:
    ONE          = "one"
    ZERO_OR_ONE  = "zero_or_one"
    ONE_OR_MORE  = "one_or_more"
    ZERO_OR_MORE = "zero_or_more"

# 토큰 접미사 -> 수량자
SUFFIXES: Dict[str, str] = {
    "?": Quantifier.ZERO_OR_ONE,
    "+": Quantifier.ONE_OR_MORE,
    "*": Quantifier.ZERO_OR_MORE,
}


class Lookahead:
    NONE     = "none"
    POSITIVE = "positive"
    NEGATIVE = "negative"

PREFIXES: Dict[str, str] = {
    "&": Lookahead.POSITIVE,
    "!": Lookahead.NEGATIVE,
}


class Tag:
    LITERAL   = "literal"
    CHARACTER = "character"
    STRING    = "string"
    INTRINSIC = "intrinsic"
    ENTITY    = "entity"
    EXTERNAL  = "external"


ENTITY_PREFIX   = "<entity:"
EXTERNAL_PREFIX = "<external:"


@dataclass(frozen=True)
class Token:
    text: str
    quantifier: str = Quantifier.ONE
    lookahead: str = Lookahead.NONE
    tags: FrozenSet[str] = frozenset()
    value: str = ""     # 리터럴의 이스케이프 해석된 내용 (따옴표 제외)

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    @property
    def is_literal(self) -> bool:
        return Tag.LITERAL in self.tags

    @property
    def is_intrinsic(self) -> bool:
        return Tag.INTRINSIC in self.tags

    @property
    def argument(self) -> str:
        """`<entity:color>` -> 'color', `<external:date>` -> 'date'."""
        if self.text.startswith(ENTITY_PREFIX):
            return self.text[len(ENTITY_PREFIX):-1]
        if self.text.startswith(EXTERNAL_PREFIX):
            return self.text[len(EXTERNAL_PREFIX):-1]
        return ""

    def dump(self, color: bool = True) -> str:
        def paint(s: str) -> str:
            return f"{_BLUE}{s}{_RESET}" if color else s

        prefix = {v: k for k, v in PREFIXES.items()}.get(self.lookahead, "")
        suffix = {v: k for k, v in SUFFIXES.items()}.get(self.quantifier, "")
        out = (paint(prefix) if prefix else "") + self.text + (paint(suffix) if suffix else "")
        for tag in sorted(self.tags):
            out += " " + paint(tag)
        return out


@dataclass
class Production:
    tokens: List[Token] = field(default_factory=list)

    def __iter__(self):
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def __getitem__(self, i: int) -> Token:
        return self.tokens[i]


@dataclass
class Rule:
    name: str
    productions: List[Production] = field(default_factory=list)

    def __iter__(self):
        return iter(self.productions)

    def __len__(self) -> int:
        return len(self.productions)

    def __getitem__(self, i: int) -> Production:
        return self.productions[i]


@dataclass
class Grammar:
    rules: Dict[str, Rule] = field(default_factory=dict)
    start: Optional[str] = None
    imports: List[str] = field(default_factory=list)
    strict: bool = False

    def require_rule(self, name: str) -> Rule:
        try:
            return self.rules[name]
        except KeyError:
            raise GrammarValidationError(
                GrammarValidationError.UNDEFINED,
                f"Definition '{name}' referenced, but not defined.",
                name,
            )

    def tokens(self):
        """(rule, production, token) 전체 순회."""
        for rule in self.rules.values():
            for production in rule:
                for token in production:
                    yield rule, production, token

    def dump(self, color: bool = True) -> str:
        out = ["PEG"]
        if self.imports:
            for path in self.imports:
                out.append(f"  import {path}")
            out.append("")

        longest = max((len(name) for name in self.rules), default=0)
        for name, rule in self.rules.items():
            marker = "▶" if name == self.start else " "
            head = f"  {marker} {name}:" + " " * (1 + longest - len(name))
            if not rule.productions:
                out.append(head)
            for i, production in enumerate(rule):
                lead = head if i == 0 else " " * (6 + longest)
                out.append(lead + " ".join(t.dump(color) for t in production))
            out.append("")
        return "\n".join(out) + "\n"
