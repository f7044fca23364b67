# ratpeg/grammar/validate.py
"""Static checks over a loaded Grammar.

Checks run in a fixed order and the first violation raises
GrammarValidationError with a `kind` naming the condition:

    no_rules, undefined, left_recursive, intrinsic_redefined,
    literal_redefined, unreferenced (strict only), unsupported_intrinsic

Unreferenced rules outside strict mode are only warned about; the
warnings are logged and returned to the caller.
"""

from __future__ import annotations
import logging
from typing import List, Optional

from ..errors import GrammarValidationError as VE
from .ast import Grammar, Tag, ENTITY_PREFIX, EXTERNAL_PREFIX

logger = logging.getLogger(__name__)

INTRINSICS = frozenset({
    "<digit>",
    "<hex>",
    "<character>",
    "<punct>",
    "<alpha>",
    "<ws>",
    "<sep>",
    "<eol>",
    "<word>",
    "<token>",
})


def is_supported_intrinsic(text: str) -> bool:
    if text in INTRINSICS:
        return True
    for prefix in (ENTITY_PREFIX, EXTERNAL_PREFIX):
        if text.startswith(prefix) and text.endswith(">") and len(text) > len(prefix) + 1:
            return True
    return False


def validate_grammar(g: Grammar, strict: Optional[bool] = None) -> List[str]:
    """Raise on the first structural problem; return non-fatal warnings."""
    strict = g.strict if strict is None else strict

    if g.start is None or not g.rules:
        raise VE(VE.NO_RULES, "There are no rules defined.")

    referenced: List[str] = []
    externals: List[str] = []
    intrinsics: List[str] = []
    left_recursive: List[str] = []

    for rule, production, token in g.tokens():
        if token.has_tag(Tag.INTRINSIC):
            intrinsics.append(token.text)
            if token.has_tag(Tag.EXTERNAL):
                externals.append(token.argument)
        elif not token.has_tag(Tag.LITERAL):
            referenced.append(token.text)

    for rule in g.rules.values():
        for production in rule:
            if len(production) == 1 and production[0].text == rule.name:
                left_recursive.append(rule.name)

    # referenced, but not defined
    for name in referenced:
        if name not in g.rules and name not in externals:
            raise VE(VE.UNDEFINED, f"Definition '{name}' referenced, but not defined.", name)

    if left_recursive:
        name = left_recursive[0]
        raise VE(VE.LEFT_RECURSIVE, f"Definition '{name}' is left recursive.", name)

    for name in g.rules:
        if name.startswith("<"):
            raise VE(VE.INTRINSIC_REDEFINED, f"Definition '{name}' may not redefine an intrinsic.", name)
        if name[0] in "'\"":
            raise VE(VE.LITERAL_REDEFINED, f"Definition '{name}' may not be a literal.", name)

    warnings: List[str] = []
    used = set(referenced) | set(externals)
    for name in g.rules:
        if name == g.start or name in used:
            continue
        msg = f"Definition '{name}' is defined, but not referenced."
        if strict:
            raise VE(VE.UNREFERENCED, msg, name)
        logger.warning(msg)
        warnings.append(msg)

    for text in intrinsics:
        if not is_supported_intrinsic(text):
            raise VE(VE.UNSUPPORTED_INTRINSIC, f"Specified intrinsic '{text}' is not supported.", text)

    return warnings
