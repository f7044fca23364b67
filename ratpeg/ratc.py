# ratpeg/ratc.py
"""ratc – ratpeg CLI

사용 예)
    $ python -m ratpeg.ratc check tests/grammars/date.peg --strict
    $ python -m ratpeg.ratc dump  tests/grammars/date.peg
    $ python -m ratpeg.ratc parse tests/grammars/date.peg --text "2024-01-31" -D
    $ python -m ratpeg.ratc parse color.peg --text "red3" --entity color=red --entity color=blue

기능
----
- check : 문법을 읽어 import 해석과 정적 검증을 수행하고 요약 출력
- dump  : 문법(규칙/프로덕션/토큰 장식)을 정렬된 형태로 출력
- parse : 입력을 문법의 시작 규칙으로 매칭하고 파스 트리를 출력

디버그 모드(-D/--debug)를 켜면 로딩 과정과 매칭 trace를 stderr로 출력합니다.
-D 한 번: 성공한 토큰마다 커서 상태, 두 번 이상: 모든 match 호출.
"""

from __future__ import annotations
import argparse
import logging
import sys
from typing import List, Optional

_handler: Optional[logging.Handler] = None

# ------------------------------
# 헬퍼
# ------------------------------

def _eprint(*args, **kw) -> None:
    print(*args, file=sys.stderr, **kw)


def _configure_logging(debug: int) -> None:
    """-D 횟수에 따라 ratpeg 로거 레벨을 정한다 (0 → WARNING, 1+ → DEBUG)."""
    global _handler
    root = logging.getLogger("ratpeg")
    if _handler is not None:
        root.removeHandler(_handler)
    _handler = logging.StreamHandler(sys.stderr)
    _handler.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
    root.setLevel(logging.DEBUG if debug else logging.WARNING)
    root.addHandler(_handler)


def _parse_entities(pairs: List[str]) -> List[tuple]:
    out = []
    for item in pairs:
        category, sep, value = item.partition("=")
        if not sep or not category or not value:
            raise ValueError(f"--entity expects CATEGORY=VALUE, got {item!r}")
        out.append((category, value))
    return out

# ------------------------------
# 문법 로딩
# ------------------------------

def _load(args, strict: bool = False):
    from .grammar.loader import load_grammar_file

    g = load_grammar_file(args.file, search_paths=args.include, strict=strict)
    if args.debug:
        _eprint("[DEBUG] grammar ready | rules=%d start=%s imports=%d" %
                (len(g.rules), g.start, len(g.imports)))
    return g

# ------------------------------
# 커맨드 구현
# ------------------------------

def cmd_check(args) -> int:
    try:
        g = _load(args, strict=args.strict)
    except SyntaxError as e:
        _eprint("[GRAMMAR ERROR]")
        _eprint(str(e))
        return 2

    if args.debug:
        _eprint(g.dump(color=not args.no_color))

    print(f"[CHECK OK] rules={len(g.rules)} start={g.start} imports={len(g.imports)}")
    return 0


def cmd_dump(args) -> int:
    try:
        g = _load(args)
    except SyntaxError as e:
        _eprint("[GRAMMAR ERROR]")
        _eprint(str(e))
        return 2

    print(g.dump(color=not args.no_color), end="")
    return 0


def cmd_parse(args) -> int:
    from .errors import ParseError
    from .peg.runtime import PegProgram, PegRunner

    try:
        g = _load(args)
    except SyntaxError as e:
        _eprint("[GRAMMAR ERROR]")
        _eprint(str(e))
        return 2

    try:
        program = PegProgram(g)
        for category, value in _parse_entities(args.entity):
            program.register_entity(category, value)

        if args.text is not None:
            text = args.text
        else:
            with open(args.input, "r", encoding="utf-8") as f:
                text = f.read()
    except (OSError, ValueError) as e:
        _eprint("[ERROR]", type(e).__name__, str(e))
        return 2

    runner = PegRunner(program, trace=args.debug)
    try:
        tree = runner.run(text)
    except ParseError as e:
        _eprint("[PARSE ERROR]", str(e))
        if e.position is not None:
            _eprint(text[:e.position] + "┃" + text[e.position:])
        return 1

    print(runner.last.dump(color=not args.no_color), end="")
    if args.debug:
        _eprint(f"[DEBUG] nodes={tree.count()}")
    return 0


# ------------------------------
# 엔트리포인트
# ------------------------------

def main(argv: Optional[list[str]] = None) -> int:
    ap = argparse.ArgumentParser(prog="ratc", description="ratpeg PEG grammar CLI")
    sub = ap.add_subparsers(dest="cmd", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("file", help=".peg 문법 파일")
    common.add_argument("-I", "--include", action="append", default=[], metavar="DIR",
                        help="import 탐색 경로 추가 (여러 번 지정 가능)")
    common.add_argument("-D", "--debug", action="count", default=0, help="디버그 정보를 상세 출력")
    common.add_argument("--no-color", action="store_true", help="ANSI 색상 없이 출력")

    p_check = sub.add_parser("check", parents=[common], help="문법을 읽고 정적 검증을 수행합니다")
    p_check.add_argument("-s", "--strict", action="store_true",
                         help="참조되지 않는 규칙을 경고 대신 오류로 처리")
    p_check.set_defaults(func=cmd_check)

    p_dump = sub.add_parser("dump", parents=[common], help="해석된 문법을 출력합니다")
    p_dump.set_defaults(func=cmd_dump)

    p_parse = sub.add_parser("parse", parents=[common], help="입력 텍스트를 파싱해 트리를 출력합니다")
    src_group = p_parse.add_mutually_exclusive_group(required=True)
    src_group.add_argument("--text", help="직접 입력 텍스트")
    src_group.add_argument("--input", help="입력 텍스트 파일 경로")
    p_parse.add_argument("--entity", action="append", default=[], metavar="CATEGORY=VALUE",
                         help="<entity:CATEGORY> 에 매칭될 리터럴 등록 (여러 번 지정 가능)")
    p_parse.set_defaults(func=cmd_parse)

    args = ap.parse_args(argv)
    _configure_logging(args.debug)
    try:
        return int(args.func(args))
    finally:
        logging.getLogger("ratpeg").removeHandler(_handler)

if __name__ == "__main__":
    sys.exit(main())
