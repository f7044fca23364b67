"""ratpeg 문법 DSL 파서
- 규칙 선언: 줄의 첫 토큰이 ':' 로 끝나면 새 규칙 (예: `thing: a !b c`)
- 프로덕션: 비어 있지 않은 줄 하나 = 프로덕션 하나, 공백으로 토큰 구분
- 빈 줄은 현재 규칙의 프로덕션 블록을 끝낸다
- 토큰 장식: 앞 `&`/`!` (lookahead), 뒤 `?`/`+`/`*` (수량자)
- 리터럴: 'c' (문자), "str" (문자열), 내부에 공백/이스케이프 허용
- intrinsic: <digit>, <entity:name>, <external:name> ...
- 주석: 따옴표 밖의 '#' 부터 줄 끝까지

import 줄은 여기서 다루지 않는다. loader가 미리 펼쳐서 넘겨준다.
"""

from __future__ import annotations
import regex as re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from ..errors import GrammarLoadError
from .ast import (
    Grammar, Rule, Production, Token, Tag,
    SUFFIXES, PREFIXES, Quantifier, Lookahead,
    ENTITY_PREFIX, EXTERNAL_PREFIX,
)

# 토큰 = (따옴표 구간 | 공백/따옴표가 아닌 문자)의 연속
_TOKEN_RE = re.compile(
    r"""(?:'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|[^\s'"])+""",
)
_WS_RE = re.compile(r"\s+")


@dataclass
class SourceLine:
    text: str
    path: Optional[str] = None   # None = 문자열에서 로드
    lineno: int = 0              # 1-based

    def where(self) -> str:
        return f"{self.path or '<string>'}:{self.lineno}"


def split_lines(src: str, path: Optional[str] = None) -> List[SourceLine]:
    src = src.replace("\r\n", "\n").replace("\r", "\n")
    return [SourceLine(text, path, i + 1) for i, text in enumerate(src.split("\n"))]


# ---------- error handling utils ----------
def _snippet_caret_at(text: str, col: int) -> str:
    """col(0-based) 위치에 캐럿"""
    return f"{text}\n{' ' * col}^"

def _err(line: SourceLine, col: int, msg: str) -> GrammarLoadError:
    return GrammarLoadError(
        f"{msg} at {line.where()}:{col + 1}\n{_snippet_caret_at(line.text, col)}",
        path=line.path,
        line=line.lineno,
    )


def remove_comment(line: str) -> str:
    """따옴표 밖, 이스케이프 되지 않은 첫 '#' 이후를 잘라낸다."""
    quote = None
    previous = ""
    for i, ch in enumerate(line):
        if quote is not None:
            if ch == quote and previous != "\\":
                quote = None
        elif ch in "'\"" and previous != "\\":
            quote = ch
        elif ch == "#" and previous != "\\":
            return line[:i]
        # "\\\\" 다음 문자는 이스케이프 되지 않는다
        previous = "" if (previous == "\\" and ch == "\\") else ch
    return line


def unescape(body: str) -> str:
    """리터럴 본문의 이스케이프 해석: \\n \\r \\t \\\\ \\' \\" \\xHH \\uXXXX"""
    if "\\" not in body:
        return body
    out: List[str] = []
    i, n = 0, len(body)
    while i < n:
        c = body[i]
        if c != "\\" or i + 1 >= n:
            out.append(c)
            i += 1
            continue
        e = body[i + 1]
        i += 2
        if e == "n":   out.append("\n")
        elif e == "r": out.append("\r")
        elif e == "t": out.append("\t")
        elif e in ("x", "u"):
            width = 2 if e == "x" else 4
            digits = body[i:i + width]
            try:
                out.append(chr(int(digits, 16)))
            except ValueError:
                raise ValueError(f"invalid \\{e} escape {digits!r}")
            if len(digits) != width:
                raise ValueError(f"invalid \\{e} escape {digits!r}")
            i += width
        else:
            # fallback: literal next char (\\, \', \", ...)
            out.append(e)
    return "".join(out)


def _scan(line: SourceLine, text: str) -> List[Tuple[str, int]]:
    """(token, col) 목록. 따옴표가 닫히지 않으면 GrammarLoadError."""
    toks: List[Tuple[str, int]] = []
    i = 0
    while i < len(text):
        m = _WS_RE.match(text, i)
        if m:
            i = m.end()
            continue
        m = _TOKEN_RE.match(text, i)
        if not m:
            raise _err(line, i, f"Unterminated quote {text[i]!r}")
        # 토큰 뒤에 닫히지 않은 따옴표가 바로 붙은 경우
        if m.end() < len(text) and text[m.end()] in "'\"":
            raise _err(line, m.end(), f"Unterminated quote {text[m.end()]!r}")
        toks.append((m.group(0), i))
        i = m.end()
    return toks


def parse_token(raw: str, line: Optional[SourceLine] = None, col: int = 0) -> Token:
    """장식/분류를 해석해 Token 하나를 만든다."""
    line = line or SourceLine(raw)
    body = raw
    quantifier = Quantifier.ONE
    lookahead = Lookahead.NONE

    if len(body) > 1 and body[-1] in SUFFIXES:
        quantifier = SUFFIXES[body[-1]]
        body = body[:-1]
    if len(body) > 1 and body[0] in PREFIXES:
        lookahead = PREFIXES[body[0]]
        body = body[1:]

    if not body:
        raise _err(line, col, f"Malformed token {raw!r}")

    tags = set()
    value = ""
    if body[0] in "'\"":
        if len(body) < 2 or body[-1] != body[0]:
            raise _err(line, col, f"Malformed literal {raw!r}")
        try:
            value = unescape(body[1:-1])
        except ValueError as e:
            raise _err(line, col, str(e))
        if not value:
            raise _err(line, col, f"Empty literal {raw!r}")
        tags.add(Tag.LITERAL)
        # 작은따옴표 + 정확히 한 글자만 문자 리터럴
        if body[0] == "'" and len(value) == 1:
            tags.add(Tag.CHARACTER)
        else:
            tags.add(Tag.STRING)
    elif body[0] == "<" and body[-1] == ">":
        tags.add(Tag.INTRINSIC)
        if body.startswith(ENTITY_PREFIX):
            tags.add(Tag.ENTITY)
        if body.startswith(EXTERNAL_PREFIX):
            tags.add(Tag.EXTERNAL)

    return Token(body, quantifier, lookahead, frozenset(tags), value)


def parse_grammar(lines: Iterable[SourceLine], grammar: Optional[Grammar] = None) -> Grammar:
    """import가 펼쳐진 줄들을 읽어 Grammar를 채운다 (상태 기계)."""
    g = grammar if grammar is not None else Grammar()
    rule: Optional[Rule] = None

    for line in lines:
        # 칼럼이 원문과 맞도록 오른쪽만 자른다
        text = remove_comment(line.text).rstrip()

        # 빈 줄은 현재 규칙을 끝낸다
        if not text.strip():
            rule = None
            continue

        toks = _scan(line, text)
        raw, col = toks[0]
        if raw.endswith(":"):
            name = raw[:-1]
            if not name:
                raise _err(line, col, "Missing rule name")
            if name in g.rules:
                raise _err(line, col, f"Duplicate rule '{name}'")
            rule = Rule(name)
            g.rules[name] = rule
            # 시작 규칙 = import 가 펼쳐진 뒤 처음 만나는 규칙
            if g.start is None:
                g.start = name
            toks = toks[1:]
            if not toks:
                continue

        if rule is None:
            raise _err(line, toks[0][1], "Production outside of a rule definition")

        production = Production()
        for raw, col in toks:
            if raw.endswith(":"):
                raise _err(line, col, f"Unexpected rule declaration {raw!r}")
            production.tokens.append(parse_token(raw, line, col))
        rule.productions.append(production)

    return g
