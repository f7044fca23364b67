# ratpeg/peg/engine.py
from __future__ import annotations
import logging
import sys
from typing import TYPE_CHECKING

from ..errors import ParseError
from ..grammar.ast import Token, Production, Tag, Quantifier, Lookahead
from .cursor import Cursor
from .intrinsics import CLASSES
from .tree import Tree

if TYPE_CHECKING:
    from .runtime import PegProgram

logger = logging.getLogger(__name__)

# Packrat engine:
# - Plain recursive descent with ordered choice; no memo table.
# - Every match_* either succeeds (cursor advanced, nodes attached to
#   `parent`) or fails (cursor restored, `parent` untouched).
# - Sub-trees are built in scratch nodes and only moved into the parent
#   once the owning production has fully matched.
# - Greedy repetition stops at the first failure or the first iteration
#   that does not advance the cursor.
# - Left recursion is not supported (typical PEG restriction).
# - `depth` counts nested match_* calls (about one frame each). Past
#   `max_depth` the parse fails with ParseError instead of RecursionError.

MAX_DEPTH = 5000


class Packrat:
    def __init__(self, program: "PegProgram", trace: int = 0, max_depth: int = MAX_DEPTH):
        self.program = program
        self.grammar = program.grammar
        self.trace = trace
        self.max_depth = max_depth
        self.tree = Tree(self.grammar.start or "Unknown")
        self.furthest = 0

    # ---- Public entrypoint ----
    def parse(self, text: str) -> Tree:
        cur = Cursor(text)
        self.tree = Tree(self.grammar.start or "Unknown")
        self.furthest = 0
        if self.trace:
            logger.debug("trace %s", cur.dump())

        # room for max_depth frames on top of the caller's stack
        limit = sys.getrecursionlimit()
        sys.setrecursionlimit(limit + self.max_depth)
        try:
            # Only the first rule sits at the top. Recursion does the rest.
            ok = self.match_rule(self.tree.name, cur, self.tree, 0)
        except RecursionError:
            raise ParseError("Parse failed - input nests too deeply.", self.furthest) from None
        finally:
            sys.setrecursionlimit(limit)

        if not ok:
            raise ParseError("Parse failed.", self.furthest)

        if not cur.eos():
            raise ParseError(f"Parse failed - extra character at position {cur.pos}.", cur.pos)

        return self.tree

    # ---- tracing ----
    def _enter(self, depth: int, what: str, token: Token = None) -> None:
        if self.trace > 1:
            suffix = f" {token.dump(color=False)}" if token is not None else ""
            logger.debug("trace %s%s%s", " " * depth, what, suffix)

    def _matched(self, cur: Cursor, token: Token, depth: int, value: str = None) -> None:
        if cur.pos > self.furthest:
            self.furthest = cur.pos
        if self.trace > 1 and value is not None:
            logger.debug("trace %smatch %s", " " * depth, value)
        if self.trace:
            logger.debug("trace %s %s", cur.dump(), token.dump(color=False))

    def _failed(self, token: Token, depth: int) -> None:
        if self.trace > 1:
            logger.debug("trace %sfail %s", " " * depth, token.text)

    # ---- Rule / production ----
    def match_rule(self, name: str, cur: Cursor, parent: Tree, depth: int) -> bool:
        self._enter(depth, f"match_rule {name}")
        if depth > self.max_depth:
            raise RecursionError(f"rule '{name}' nested deeper than {self.max_depth}")
        checkpoint = cur.pos

        for production in self.grammar.require_rule(name):
            if self.match_production(production, cur, parent, depth + 1):
                return True

        cur.restore(checkpoint)
        return False

    def match_production(self, production: Production, cur: Cursor, parent: Tree, depth: int) -> bool:
        self._enter(depth, "match_production")
        checkpoint = cur.pos

        collector = Tree()
        for token in production:
            b = Tree()
            if not self.match_token_quant(token, cur, b, depth + 1):
                cur.restore(checkpoint)
                return False
            collector.adopt(b)

        # Success: transfer all branches, in order.
        parent.adopt(collector)
        return True

    # ---- Quantifier ----
    def match_token_quant(self, token: Token, cur: Cursor, parent: Tree, depth: int) -> bool:
        self._enter(depth, "match_token_quant", token)
        q = token.quantifier

        if q == Quantifier.ONE:
            return self.match_token_lookahead(token, cur, parent, depth + 1)

        if q == Quantifier.ZERO_OR_ONE:
            # on failure the cursor is already back where it was
            self.match_token_lookahead(token, cur, parent, depth + 1)
            return True

        if q == Quantifier.ONE_OR_MORE:
            if not self.match_token_lookahead(token, cur, parent, depth + 1):
                return False
            self._repeat(token, cur, parent, depth)
            return True

        if q == Quantifier.ZERO_OR_MORE:
            self._repeat(token, cur, parent, depth)
            return True

        raise AssertionError(f"unknown quantifier {q!r}")

    def _repeat(self, token: Token, cur: Cursor, parent: Tree, depth: int) -> None:
        while True:
            before = cur.pos
            if not self.match_token_lookahead(token, cur, parent, depth + 1):
                break
            if cur.pos == before:
                break

    # ---- Lookahead ----
    def match_token_lookahead(self, token: Token, cur: Cursor, parent: Tree, depth: int) -> bool:
        self._enter(depth, "match_token_lookahead", token)
        la = token.lookahead

        if la == Lookahead.NONE:
            return self.match_token(token, cur, parent, depth + 1)

        if la in (Lookahead.POSITIVE, Lookahead.NEGATIVE):
            # zero-width: nothing is consumed, nothing is attached
            checkpoint = cur.pos
            ok = self.match_token(token, cur, Tree(), depth + 1)
            cur.restore(checkpoint)
            return ok if la == Lookahead.POSITIVE else not ok

        raise AssertionError(f"unknown lookahead {la!r}")

    # ---- Token dispatch ----
    def match_token(self, token: Token, cur: Cursor, parent: Tree, depth: int) -> bool:
        self._enter(depth, "match_token", token)

        if token.has_tag(Tag.INTRINSIC):
            return self.match_intrinsic(token, cur, parent, depth + 1)

        if token.text in self.grammar.rules:
            b = Tree(token.text)
            if self.match_rule(token.text, cur, b, depth + 1):
                # the only case that adds a named sub-tree
                parent.add_branch(b)
                return True
            return False

        if token.has_tag(Tag.LITERAL) and token.has_tag(Tag.CHARACTER):
            return self.match_char_literal(token, cur, parent, depth + 1)

        if token.has_tag(Tag.LITERAL) and token.has_tag(Tag.STRING):
            return self.match_string_literal(token, cur, parent, depth + 1)

        # plain name with no rule: an external parser may stand in for it
        if token.text in self.program.externals:
            return self._match_external(token, token.text, cur, parent, depth + 1)

        raise AssertionError(f"token {token.text!r} is neither a rule, a literal nor an intrinsic")

    # ---- Terminals ----
    def _leaf(self, name: str, token: Token, value: str, *tags: str) -> Tree:
        b = Tree(name)
        for t in tags:
            b.tag(t)
        b.set_attribute("expected", token.text)
        b.set_attribute("value", value)
        return b

    def match_intrinsic(self, token: Token, cur: Cursor, parent: Tree, depth: int) -> bool:
        self._enter(depth, "match_intrinsic", token)
        checkpoint = cur.pos

        if token.has_tag(Tag.ENTITY):
            for literal in self.program.entity_values(token.argument):
                if cur.skip_literal(literal):
                    parent.add_branch(self._leaf("intrinsic", token, literal, Tag.INTRINSIC, Tag.ENTITY))
                    self._matched(cur, token, depth, literal)
                    return True

        elif token.has_tag(Tag.EXTERNAL):
            return self._match_external(token, token.argument, cur, parent, depth)

        else:
            matcher = CLASSES.get(token.text)
            if matcher is None:
                raise AssertionError(f"unsupported intrinsic {token.text!r}")
            value = matcher(cur)
            if value is not None:
                parent.add_branch(self._leaf("intrinsic", token, value, Tag.INTRINSIC))
                self._matched(cur, token, depth, value)
                return True

        self._failed(token, depth)
        cur.restore(checkpoint)
        return False

    def _match_external(self, token: Token, rule: str, cur: Cursor, parent: Tree, depth: int) -> bool:
        fn = self.program.externals.get(rule)
        checkpoint = cur.pos
        if fn is not None:
            # pre-populated branch, attached on success only
            b = Tree("intrinsic")
            b.tag(Tag.INTRINSIC)
            b.tag(Tag.EXTERNAL)
            b.set_attribute("expected", token.text)
            if fn(cur, b):
                word = cur.substr(checkpoint)
                b.set_attribute("value", word)
                parent.add_branch(b)
                self._matched(cur, token, depth, word)
                return True

        self._failed(token, depth)
        cur.restore(checkpoint)
        return False

    def match_char_literal(self, token: Token, cur: Cursor, parent: Tree, depth: int) -> bool:
        self._enter(depth, "match_char_literal", token)
        if cur.skip(token.value):
            parent.add_branch(self._leaf("charLiteral", token, token.value))
            self._matched(cur, token, depth, token.text)
            return True

        self._failed(token, depth)
        return False

    def match_string_literal(self, token: Token, cur: Cursor, parent: Tree, depth: int) -> bool:
        self._enter(depth, "match_string_literal", token)
        if cur.skip_literal(token.value):
            parent.add_branch(self._leaf("stringLiteral", token, token.value))
            self._matched(cur, token, depth, token.value)
            return True

        self._failed(token, depth)
        return False

    def dump(self, color: bool = True) -> str:
        out = ["Packrat Parse " + self.tree.dump(color).rstrip("\n")]
        if self.program.entities:
            out.append("  Entities")
            for category, values in self.program.entities.items():
                for value in values:
                    out.append(f"    {category}:{value}")
        if self.program.externals:
            out.append("  Externals")
            for rule in self.program.externals:
                out.append(f"    {rule}")
        return "\n".join(out) + "\n"
