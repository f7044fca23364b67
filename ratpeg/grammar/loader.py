"""문법 파일 로더 + import 해석

`import <path>` 줄은 그 자리에 대상 파일의 줄들로 치환된다(재귀).
이미 import 된 파일은 다시 읽지 않는다.

경로 탐색 순서:
  1) 현재 작업 디렉터리
  2) import 하는 파일의 디렉터리
  3) 호출자가 넘긴 search_paths
  4) 환경변수 RATPEG_PATH (os.pathsep 구분)
"""

from __future__ import annotations
import logging
import os
from pathlib    import Path
from typing     import Iterable, List, Optional, Sequence, Set

from ..errors   import GrammarLoadError
from .ast       import Grammar
from .parser    import SourceLine, split_lines, remove_comment, parse_grammar
from .validate  import validate_grammar

logger = logging.getLogger(__name__)

ENV_SEARCH_PATH = "RATPEG_PATH"
_IMPORT = "import "


def load_grammar_text(path: str) -> str:
    """
    Load Grammar Text
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        raise GrammarLoadError(f"PEG file '{path}' not found.", path=str(path))
    except (OSError, UnicodeDecodeError) as e:
        raise GrammarLoadError(f"Cannot read '{path}': {e}", path=str(path))
    return text.replace("\r\n", "\n").replace("\r", "\n")


def env_search_paths() -> List[str]:
    raw = os.environ.get(ENV_SEARCH_PATH, "")
    return [p for p in raw.split(os.pathsep) if p]


def resolve_import(name: str,
                   base_dir: Optional[str] = None,
                   search_paths: Sequence[str] = ()) -> Optional[Path]:
    """탐색 순서대로 처음 발견되는 읽을 수 있는 파일."""
    target = Path(name).expanduser()
    if target.is_absolute():
        candidates = [target]
    else:
        dirs: List[Path] = [Path.cwd()]
        if base_dir is not None:
            dirs.append(Path(base_dir))
        dirs.extend(Path(p) for p in search_paths)
        dirs.extend(Path(p) for p in env_search_paths())
        candidates = [d / target for d in dirs]

    for cand in candidates:
        if cand.is_file() and os.access(cand, os.R_OK):
            return cand.resolve()
    return None


def expand_imports(lines: Iterable[SourceLine],
                   grammar: Grammar,
                   base_dir: Optional[str] = None,
                   search_paths: Sequence[str] = (),
                   seen: Optional[Set[str]] = None) -> List[SourceLine]:
    """import 줄을 대상 파일 내용으로 치환한 줄 목록."""
    seen = seen if seen is not None else set()
    resolved: List[SourceLine] = []

    for line in lines:
        text = remove_comment(line.text).strip()
        if not text.startswith(_IMPORT):
            resolved.append(line)
            continue

        name = text[len(_IMPORT):].strip()
        path = resolve_import(name, base_dir, search_paths)
        if path is None:
            raise GrammarLoadError(
                f"Cannot import '{name}' ({line.where()})",
                path=name,
                line=line.lineno,
            )

        key = str(path)
        if key in seen:
            logger.debug("import %s skipped (already imported)", key)
            continue
        seen.add(key)
        grammar.imports.append(key)
        logger.debug("import %s", key)

        imported = split_lines(load_grammar_text(key), key)
        resolved.extend(expand_imports(imported, grammar, str(path.parent), search_paths, seen))

    return resolved


def load_grammar(src: str,
                 base_dir: Optional[str] = None,
                 search_paths: Sequence[str] = (),
                 strict: bool = False,
                 validate: bool = True,
                 path: Optional[str] = None,
                 _seen: Optional[Set[str]] = None) -> Grammar:
    """문법 원문 -> (import 해석) -> Grammar -> (검증)"""
    g = Grammar(strict=strict)
    lines = expand_imports(split_lines(src, path), g, base_dir, search_paths, _seen)
    parse_grammar(lines, g)
    if validate:
        validate_grammar(g)
    return g


def load_grammar_file(path: str,
                      search_paths: Sequence[str] = (),
                      strict: bool = False,
                      validate: bool = True) -> Grammar:
    p = Path(path)
    src = load_grammar_text(str(p))
    root = str(p.resolve())
    return load_grammar(
        src,
        base_dir=str(p.resolve().parent),
        search_paths=search_paths,
        strict=strict,
        validate=validate,
        path=str(p),
        _seen={root},
    )
