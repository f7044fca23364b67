# ratpeg/errors.py
"""ratpeg 예외 계층.

모든 사용자 대상 오류는 ``SyntaxError``의 하위 클래스다. CLI는
``except SyntaxError``로 한 번에 잡아 친절한 메시지만 출력한다.

- GrammarLoadError       : 파일/import 누락, 잘못된 줄, 따옴표 미종결, 중복 규칙
- GrammarValidationError : 정적 검사 실패 (kind 로 구분)
- ParseError             : 입력이 문법에 맞지 않음 (position = 멈춘 위치)
- ExternalConflictError  : 같은 규칙에 external 파서를 두 번 등록
"""

from __future__ import annotations
from typing import Optional


class RatpegError(SyntaxError):
    """Base class for every ratpeg failure."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class GrammarLoadError(RatpegError):
    def __init__(self, message: str, path: Optional[str] = None, line: Optional[int] = None):
        super().__init__(message)
        self.path = path
        self.line = line


class GrammarValidationError(RatpegError):
    # kind values
    NO_RULES = "no_rules"
    UNDEFINED = "undefined"
    LEFT_RECURSIVE = "left_recursive"
    INTRINSIC_REDEFINED = "intrinsic_redefined"
    LITERAL_REDEFINED = "literal_redefined"
    UNREFERENCED = "unreferenced"
    UNSUPPORTED_INTRINSIC = "unsupported_intrinsic"

    def __init__(self, kind: str, message: str, name: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.name = name


class ParseError(RatpegError):
    def __init__(self, message: str, position: Optional[int] = None):
        super().__init__(message)
        self.position = position


class ExternalConflictError(RatpegError):
    def __init__(self, rule: str):
        super().__init__(f"There is already an external parser defined for rule '{rule}'.")
        self.rule = rule
