# hintrating/rating/edit_extractor.py
from __future__ import annotations

import bisect
import difflib
import logging
from collections import Counter
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Optional, Set, Tuple

from hintrating.tree.ast_node import ASTNode

log = logging.getLogger(__name__)

# A node key identifies a node independently of the tree object it lives in:
#   ("id", <id>)                      node of `from` with a unique id
#   ("path", rel, rel, ...)           node of `from` without one, by relation path
#   ("new", parent_key, rel, type, value, after)
#                                     node that only exists in `to`; `after` is
#                                     the key of its preceding sibling, or None
Key = Tuple


@dataclass(frozen=True)
class Edit:
    """An atomic structural change. Compared by value, so edit sets intersect."""

    def is_deletion(self) -> bool:
        return False


@dataclass(frozen=True)
class Insertion(Edit):
    parent: Key
    relation: str
    type: str
    value: Optional[str]
    # Key of the `from` node this insertion moves, if any
    source: Optional[Key] = None
    # Key of the preceding sibling in `to`, None when inserted first
    after: Optional[Key] = None
    id: Optional[str] = None

    def __str__(self):
        moved = f" (moved from {_key_str(self.source)})" if self.source is not None else ""
        after = f" after {_key_str(self.after)}" if self.after is not None else ""
        return (f"Insert {_label(self.type, self.value)} at {_key_str(self.parent)}/{self.relation}"
                f"{after}{moved}")


@dataclass(frozen=True)
class Deletion(Edit):
    key: Key
    type: str
    value: Optional[str]

    def is_deletion(self) -> bool:
        return True

    def __str__(self):
        return f"Delete {_label(self.type, self.value)} {_key_str(self.key)}"


@dataclass(frozen=True)
class Rename(Edit):
    key: Key
    old_type: str
    old_value: Optional[str]
    new_type: str
    new_value: Optional[str]
    # Only set when the id changed
    old_id: Optional[str] = None
    new_id: Optional[str] = None

    def __str__(self):
        ids = f" (id {self.old_id} -> {self.new_id})" if self.old_id != self.new_id else ""
        return (f"Rename {_key_str(self.key)}: {_label(self.old_type, self.old_value)}"
                f" -> {_label(self.new_type, self.new_value)}{ids}")


def _label(type: str, value: Optional[str]) -> str:
    return type if value is None else f"{type}[{value}]"


def _key_str(key: Optional[Key]) -> str:
    if key is None:
        return "?"
    kind = key[0]
    if kind == "id":
        return f"#{key[1]}"
    if kind == "path":
        return "/" + "/".join(key[1:])
    _, parent, relation, type, value, _after = key
    return f"{_key_str(parent)}/{relation}:{_label(type, value)}"


def _longest_increasing(seq: List[int]) -> Set[int]:
    """Positions in `seq` forming one longest strictly increasing subsequence."""
    if not seq:
        return set()
    tails: List[int] = []
    tail_pos: List[int] = []
    prev = [-1] * len(seq)
    for i, x in enumerate(seq):
        j = bisect.bisect_left(tails, x)
        if j == len(tails):
            tails.append(x)
            tail_pos.append(i)
        else:
            tails[j] = x
            tail_pos[j] = i
        prev[i] = tail_pos[j - 1] if j > 0 else -1
    out = set()
    i = tail_pos[-1]
    while i >= 0:
        out.add(i)
        i = prev[i]
    return out


class _Correspondence:
    """
    Node correspondence between a `from` tree and a `to` tree.

    Nodes are first paired by unique ids. Children of paired parents that are
    still unpaired are then aligned on (type, value) in order; equal-length
    runs that differ are paired positionally as renames. A paired node whose
    parent is not paired with its old parent, or that no longer keeps its
    order among its kept siblings, is moved.
    """

    def __init__(self, from_node: ASTNode, to_node: ASTNode):
        self.from_node = from_node
        self.to_node = to_node
        self.from_nodes = from_node.nodes()
        self.to_nodes = to_node.nodes()
        # id(to-node) -> from-node
        self.matches: Dict[int, ASTNode] = {}
        self._matched_from: Set[int] = set()
        self.moved: Set[int] = set()
        self._from_keys: Dict[int, Key] = {}
        self._to_keys: Dict[int, Key] = {}

        self._match_roots()
        self._match_ids()
        self._match_structure()
        self._find_moves()
        self._assign_from_keys()
        # Pre-order, so parent and preceding sibling keys are cached first
        for node in self.to_nodes:
            self.to_key(node)

    def _pair(self, to: ASTNode, frm: ASTNode):
        self.matches[id(to)] = frm
        self._matched_from.add(id(frm))

    def _match_roots(self):
        self._pair(self.to_node, self.from_node)

    def _match_ids(self):
        from_counts = Counter(n.id for n in self.from_nodes if n.id is not None)
        to_counts = Counter(n.id for n in self.to_nodes if n.id is not None)
        from_by_id = {n.id: n for n in self.from_nodes if n.id is not None and from_counts[n.id] == 1}
        for node in self.to_nodes[1:]:
            if node.id is None or to_counts[node.id] != 1:
                continue
            frm = from_by_id.get(node.id)
            if frm is not None and id(frm) not in self._matched_from:
                self._pair(node, frm)

    def _match_structure(self):
        # Pre-order, so a parent is always resolved before its children
        for node in self.to_nodes:
            frm = self.matches.get(id(node))
            if frm is None:
                continue
            to_kids = [c for c in node.children if c is not None and id(c) not in self.matches]
            from_kids = [c for c in frm.children if c is not None and id(c) not in self._matched_from]
            if not to_kids or not from_kids:
                continue
            matcher = difflib.SequenceMatcher(
                None,
                [(c.type, c.value) for c in from_kids],
                [(c.type, c.value) for c in to_kids],
                autojunk=False,
            )
            for tag, i1, i2, j1, j2 in matcher.get_opcodes():
                if tag == "equal":
                    for a, b in zip(from_kids[i1:i2], to_kids[j1:j2]):
                        self._pair(b, a)
                elif tag == "replace":
                    same_length = (i2 - i1) == (j2 - j1)
                    for a, b in zip(from_kids[i1:i2], to_kids[j1:j2]):
                        if same_length or a.type == b.type:
                            self._pair(b, a)

    def _find_moves(self):
        for node in self.to_nodes[1:]:
            frm = self.matches.get(id(node))
            if frm is None:
                continue
            parent_match = self.matches.get(id(node.parent))
            if parent_match is None or parent_match is not frm.parent:
                self.moved.add(id(node))

        # Kept siblings that changed order are moves too
        for node in self.to_nodes:
            frm = self.matches.get(id(node))
            if frm is None:
                continue
            kept = [c for c in node.children
                    if c is not None and id(c) in self.matches and id(c) not in self.moved]
            if len(kept) < 2:
                continue
            from_index = {id(c): i for i, c in enumerate(frm.children) if c is not None}
            order = [from_index[id(self.matches[id(c)])] for c in kept]
            in_order = _longest_increasing(order)
            for i, c in enumerate(kept):
                if i not in in_order:
                    self.moved.add(id(c))

    def _assign_from_keys(self):
        from_counts = Counter(n.id for n in self.from_nodes if n.id is not None)

        def visit(node: ASTNode, path: Tuple[str, ...]):
            if node.id is not None and from_counts[node.id] == 1:
                self._from_keys[id(node)] = ("id", node.id)
            else:
                self._from_keys[id(node)] = ("path",) + path
            for relation, child in zip(node.relations, node.children):
                if child is not None:
                    visit(child, path + (relation,))

        visit(self.from_node, ())

    def from_key(self, node: ASTNode) -> Key:
        return self._from_keys[id(node)]

    def to_key(self, node: ASTNode) -> Key:
        key = self._to_keys.get(id(node))
        if key is not None:
            return key
        frm = self.matches.get(id(node))
        if frm is not None:
            key = self.from_key(frm)
        else:
            parent_key = self.to_key(node.parent) if node.parent is not None else None
            key = ("new", parent_key, node.relation(), node.type, node.value, self.after_key(node))
        self._to_keys[id(node)] = key
        return key

    def after_key(self, node: ASTNode) -> Optional[Key]:
        """Key of the closest preceding non-empty sibling of `node` in `to`."""
        if node.parent is None:
            return None
        siblings = node.parent.children
        for i in range(node.index() - 1, -1, -1):
            if siblings[i] is not None:
                return self.to_key(siblings[i])
        return None

    def is_matched_from(self, node: ASTNode) -> bool:
        return id(node) in self._matched_from


class EditExtractor:
    """
    Extracts the set of edits that turn a `from` tree into a `to` tree.

    Correspondence is id based with an order-preserving structural fallback;
    there is no minimum-cost search. Moves are reported as a Deletion of the
    old place plus an Insertion that names its source.
    """

    def get_edits(self, from_node: ASTNode, to_node: ASTNode) -> FrozenSet[Edit]:
        c = _Correspondence(from_node, to_node)
        edits: Set[Edit] = set()

        for node in c.from_nodes:
            if not c.is_matched_from(node):
                edits.add(Deletion(c.from_key(node), node.type, node.value))

        for node in c.to_nodes:
            frm = c.matches.get(id(node))
            if frm is None or id(node) in c.moved:
                parent_key = c.to_key(node.parent) if node.parent is not None else None
                source = c.from_key(frm) if frm is not None else None
                if source is not None:
                    edits.add(Deletion(source, frm.type, frm.value))
                edits.add(Insertion(parent_key, node.relation(), node.type, node.value, source,
                                    c.after_key(node), node.id))
            elif frm.type != node.type or frm.value != node.value or frm.id != node.id:
                ids = (frm.id, node.id) if frm.id != node.id else (None, None)
                edits.add(Rename(c.from_key(frm), frm.type, frm.value, node.type, node.value, *ids))

        return frozenset(edits)

    @staticmethod
    def get_correspondence(from_node: ASTNode, to_node: ASTNode
                           ) -> List[Tuple[ASTNode, Optional[ASTNode]]]:
        """Every node of `to` in pre-order, paired with its `from` node or None if new."""
        c = _Correspondence(from_node, to_node)
        return [(node, c.matches.get(id(node))) for node in c.to_nodes]

    @staticmethod
    def get_inserted_and_renamed_nodes(from_node: ASTNode, to_node: ASTNode) -> List[ASTNode]:
        """Nodes of `to` (live references) that are new, moved or changed."""
        c = _Correspondence(from_node, to_node)
        out = []
        for node in c.to_nodes:
            frm = c.matches.get(id(node))
            if (frm is None or id(node) in c.moved
                    or frm.type != node.type or frm.value != node.value):
                out.append(node)
        return out

    @staticmethod
    def print_edits_comparison(a: Iterable[Edit], b: Iterable[Edit],
                               label_a: str = "A", label_b: str = "B") -> str:
        a, b = set(a), set(b)
        lines = []
        for title, edits in (
            ("Both", a & b),
            (f"Only {label_a}", a - b),
            (f"Only {label_b}", b - a),
        ):
            lines.append(f"{title}:")
            for edit in sorted(edits, key=str):
                lines.append(f"  {edit}")
        return "\n".join(lines)
