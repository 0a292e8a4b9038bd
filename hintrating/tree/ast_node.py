# hintrating/tree/ast_node.py
from __future__ import annotations

import itertools
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Union

from hintrating.errors import TreeParseError
from hintrating.tree.diff import ColorStyle, diff as text_diff

log = logging.getLogger(__name__)

# Placeholder type used for explicit JSON null children
EMPTY_TYPE = "null"


class ASTNode:
    """
    A node of a program-state tree.

    Children are ordered and each one is stored under a relation label that is
    unique within its parent. Equality and hashing are structural over the
    type, value, id, children and relation labels, so two trees parsed from
    different sources compare equal when they match at every level.
    """

    __slots__ = ("type", "value", "id", "_parent", "_children", "_relations")

    def __init__(self, type: str, value: Optional[str] = None, id: Optional[str] = None):
        if type is None:
            raise ValueError("'type' cannot be None")
        self.type = type
        self.value = value
        self.id = id
        self._parent: Optional[ASTNode] = None
        self._children: List[Optional[ASTNode]] = []
        self._relations: List[str] = []

    # ---------- structure ----------

    @property
    def parent(self) -> Optional[ASTNode]:
        return self._parent

    @property
    def children(self) -> tuple:
        return tuple(self._children)

    @property
    def relations(self) -> tuple:
        return tuple(self._relations)

    def child(self, relation: str) -> Optional[ASTNode]:
        try:
            return self._children[self._relations.index(relation)]
        except ValueError:
            return None

    def add_child(self, child: Optional[ASTNode], relation: Optional[str] = None,
                  index: Optional[int] = None) -> bool:
        """
        Insert `child` at `index` (default: the end) under `relation`.

        Without a relation one is synthesized from the child count, skipping
        labels already in use. Returns False, without changing anything, if
        the relation is already taken.
        """
        if relation is None:
            i = len(self._children)
            while str(i) in self._relations:
                i += 1
            relation = str(i)
        if relation in self._relations:
            return False
        if index is None:
            index = len(self._children)
        self._children.insert(index, child)
        self._relations.insert(index, relation)
        if child is not None:
            child._parent = self
        return True

    def remove_child(self, index: int) -> Optional[ASTNode]:
        child = self._children.pop(index)
        self._relations.pop(index)
        if child is not None:
            child._parent = None
        return child

    def clear_children(self):
        for child in self._children:
            if child is not None:
                child._parent = None
        self._children.clear()
        self._relations.clear()

    def index(self) -> int:
        """Position of this node among its parent's children, or -1 for a root."""
        if self._parent is None:
            return -1
        for i, sibling in enumerate(self._parent._children):
            if sibling is self:
                return i
        return -1

    def relation(self) -> Optional[str]:
        i = self.index()
        return None if i < 0 else self._parent._relations[i]

    def depth(self) -> int:
        depth = 0
        node = self._parent
        while node is not None:
            depth += 1
            node = node._parent
        return depth

    def root(self) -> ASTNode:
        node = self
        while node._parent is not None:
            node = node._parent
        return node

    def has_type(self, *types: str) -> bool:
        return self.type in types

    # ---------- copying / ids ----------

    def shallow_copy(self) -> ASTNode:
        return ASTNode(self.type, self.value, self.id)

    def copy(self) -> ASTNode:
        copy = self.shallow_copy()
        for relation, child in zip(self._relations, self._children):
            copy.add_child(None if child is None else child.copy(), relation)
        return copy

    def auto_id(self, prefix: str):
        """Give every node lacking an id the id `prefix + n`, numbered in pre-order."""
        counter = itertools.count()

        def assign(node: ASTNode):
            if node.id is None:
                node.id = f"{prefix}{next(counter)}"

        self.recurse(assign)

    # ---------- traversal ----------

    def recurse(self, action: Callable[[ASTNode], Any]):
        """Depth-first, pre-order. None placeholder children are skipped."""
        action(self)
        for child in self._children:
            if child is not None:
                child.recurse(action)

    def nodes(self) -> List[ASTNode]:
        out: List[ASTNode] = []
        self.recurse(out.append)
        return out

    # ---------- equality ----------

    def __eq__(self, other):
        if other is self:
            return True
        if other is None or other.__class__ is not self.__class__:
            return False
        return (
            self.type == other.type
            and self.value == other.value
            and self.id == other.id
            and self._relations == other._relations
            and self._children == other._children
        )

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((
            "ASTNode",
            self.type,
            self.value,
            self.id,
            tuple(self._children),
            tuple(self._relations),
        ))

    def __repr__(self):
        return f"ASTNode(type={self.type!r}, value={self.value!r}, id={self.id!r}, children={len(self._children)})"

    # ---------- serialization ----------

    @classmethod
    def parse(cls, source: Union[str, Dict[str, Any]]) -> ASTNode:
        """Parse a tree from its JSON string or the already-decoded object."""
        if isinstance(source, str):
            try:
                obj = json.loads(source)
            except json.JSONDecodeError as e:
                log.error("Error parsing JSON tree: %s", e)
                raise TreeParseError(f"Error parsing JSON tree: {e}", source) from e
        else:
            obj = source
        if not isinstance(obj, dict):
            raise TreeParseError("Tree JSON must be an object", source)
        try:
            return cls._from_object(obj)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise TreeParseError(f"Malformed tree JSON: {e!r}", source) from e

    @classmethod
    def _from_object(cls, obj: Dict[str, Any]) -> ASTNode:
        type = obj["type"]
        if type is None:
            raise ValueError("node type is null")
        value = obj.get("value")
        id = obj.get("id")
        node = cls(
            str(type),
            None if value is None else str(value),
            None if id is None else str(id),
        )
        children = obj.get("children")
        if children:
            order = obj.get("childrenOrder")
            if order is None:
                # No explicit order: fall back to the mapping's own key order
                order = list(children.keys())
            for relation in order:
                relation = str(relation)
                child = children[relation]
                if child is None:
                    node.add_child(cls(EMPTY_TYPE), relation)
                    continue
                node.add_child(cls._from_object(child), relation)
        return node

    def to_json(self) -> Dict[str, Any]:
        obj: Dict[str, Any] = {"type": self.type}
        if self.value is not None:
            obj["value"] = self.value
        if self.id is not None:
            obj["id"] = self.id
        if self._children:
            obj["children"] = {
                relation: None if child is None else child.to_json()
                for relation, child in zip(self._relations, self._children)
            }
            obj["childrenOrder"] = list(self._relations)
        return obj

    def to_json_string(self) -> str:
        return json.dumps(self.to_json(), separators=(",", ":"))

    # ---------- diagnostics ----------

    def pretty_print(self, show_values: bool = True,
                     is_body_type: Optional[Callable[[str], bool]] = None) -> str:
        """
        Render the tree for people.

        Children of body types (scripts, blocks of statements) go one per
        line, indented; all other children are rendered inline in parentheses.
        """
        return "\n".join(self._pretty_lines(show_values, is_body_type or (lambda t: False)))

    def _label(self, show_values: bool) -> str:
        if show_values and self.value is not None:
            return f"{self.type}[{self.value}]"
        return self.type

    def _pretty_lines(self, show_values: bool, is_body_type: Callable[[str], bool]) -> List[str]:
        label = self._label(show_values)
        children = [c for c in self._children if c is not None]
        if not children:
            return [label]
        if is_body_type(self.type):
            lines = [f"{label}:"]
            for child in children:
                lines.extend(f"  {line}" for line in child._pretty_lines(show_values, is_body_type))
            return lines
        parts = [child._pretty_lines(show_values, is_body_type) for child in children]
        if all(len(p) == 1 for p in parts):
            return [f"{label}({', '.join(p[0] for p in parts)})"]
        lines = [f"{label}("]
        for p in parts:
            lines.extend(f"  {line}" for line in p)
        lines.append(")")
        return lines

    @staticmethod
    def diff(a: ASTNode, b: ASTNode, config=None, context: Optional[int] = None,
             style: ColorStyle = ColorStyle.NONE) -> str:
        """Line diff of two pretty-printed trees, using `config` for body types."""
        is_body_type = config.is_body_type if config is not None else None
        return text_diff(
            a.pretty_print(True, is_body_type),
            b.pretty_print(True, is_body_type),
            context=context,
            style=style,
        )
