# ratpeg/peg/tree.py
"""Parse tree node.

- A node owns its branches; a node may be attached to one parent only,
  so the tree never shares or cycles.
- Branch order is preserved.
- enumerate() returns a snapshot and is invalidated by modification.
"""

from __future__ import annotations
from typing import Dict, List, Optional, Union

_BOLD   = "\033[1m"
_YELLOW = "\033[33m"
_GREEN  = "\033[32m"
_RESET  = "\033[0m"


class Tree:
    __slots__ = ("name", "branches", "attributes", "tags", "parent")

    def __init__(self, name: str = "Unknown"):
        self.name = name
        self.branches: List[Tree] = []
        self.attributes: Dict[str, str] = {}
        self.tags: List[str] = []
        self.parent: Optional[Tree] = None

    def __repr__(self) -> str:
        return f"Tree({self.name!r}, branches={len(self.branches)})"

    # ---- branches ----
    def add_branch(self, branch: "Tree") -> None:
        if branch is None:
            raise ValueError("Cannot add an empty branch to a parse tree.")
        if branch.parent is not None:
            raise ValueError(f"Branch '{branch.name}' already belongs to '{branch.parent.name}'.")
        branch.parent = self
        self.branches.append(branch)

    def remove_branch(self, branch: "Tree") -> None:
        for i, b in enumerate(self.branches):
            if b is branch:
                del self.branches[i]
                branch.parent = None
                return

    def remove_all_branches(self) -> None:
        for b in self.branches:
            b.parent = None
        self.branches = []

    def replace_branch(self, old: "Tree", new: "Tree") -> None:
        if new is None:
            raise ValueError("Cannot add an empty branch to a parse tree.")
        for i, b in enumerate(self.branches):
            if b is old:
                if new.parent is not None:
                    raise ValueError(f"Branch '{new.name}' already belongs to '{new.parent.name}'.")
                old.parent = None
                new.parent = self
                self.branches[i] = new
                return

    def adopt(self, other: "Tree") -> None:
        """Move every branch of `other` under this node, in order."""
        moved = other.branches
        other.branches = []
        for b in moved:
            b.parent = None
            self.add_branch(b)

    # ---- attributes ----
    def attribute(self, name: str) -> str:
        # no autovivification
        return self.attributes.get(name, "")

    def set_attribute(self, name: str, value: Union[str, int, float]) -> None:
        if isinstance(value, bool):
            value = str(value).lower()
        elif isinstance(value, float):
            value = f"{value:.8f}".rstrip("0").rstrip(".")
        self.attributes[name] = str(value)

    def remove_attribute(self, name: str) -> None:
        self.attributes.pop(name, None)

    # ---- tags ----
    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def tag(self, tag: str) -> None:
        if tag not in self.tags:
            self.tags.append(tag)

    def untag(self, tag: str) -> None:
        if tag in self.tags:
            self.tags.remove(tag)

    def count_tags(self) -> int:
        return len(self.tags)

    # ---- navigation ----
    def count(self) -> int:
        return 1 + sum(b.count() for b in self.branches)

    def enumerate(self) -> List["Tree"]:
        """Left to right, depth first, children before their parent.

        Deleting nodes while walking this list never touches a node after
        its own subtree has been visited.
        """
        out: List[Tree] = []
        for b in self.branches:
            out.extend(b.enumerate())
            out.append(b)
        return out

    def find(self, path: str) -> Optional["Tree"]:
        elements = path.split("/")
        if elements[0] != self.name:
            return None

        cursor = self
        for name in elements[1:]:
            for b in cursor.branches:
                if b.name == name:
                    cursor = b
                    break
            else:
                return None
        return cursor

    # ---- rendering ----
    def _dump_node(self, depth: int, color: bool) -> List[str]:
        def paint(code: str, s: str) -> str:
            return f"{code}{s}{_RESET}" if color else s

        parts = ["  " * depth + paint(_BOLD, self.name)]
        atts = " ".join(f"{k}='{paint(_YELLOW, v)}'" for k, v in sorted(self.attributes.items()))
        if atts:
            parts.append(atts)
        tags = " ".join(paint(_GREEN, t) for t in self.tags)
        if tags:
            parts.append(tags)

        lines = [" ".join(parts)]
        for b in self.branches:
            lines.extend(b._dump_node(depth + 1, color))
        return lines

    def dump(self, color: bool = True) -> str:
        lines = [f"Tree ({self.count()} nodes)"] + self._dump_node(1, color)
        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict:
        """Plain structure (name/attributes/tags/branches) for comparison and JSON."""
        return {
            "name": self.name,
            "attributes": dict(self.attributes),
            "tags": list(self.tags),
            "branches": [b.to_dict() for b in self.branches],
        }
