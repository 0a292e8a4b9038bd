# hintrating/rating/normalize.py
"""
Canonicalization of hint outcome trees.

Two independently produced hints for the same request rarely agree on the
arbitrary parts of an edit: the name picked for a new variable, the id a new
block was given, an empty script left behind or the default literal the
editor attaches to a freshly created block. The transforms here remove those
differences relative to the request ("from") tree, so that equal results mean
equal hints.
"""
from __future__ import annotations

import logging
from typing import Callable

from hintrating.rating.edit_extractor import EditExtractor
from hintrating.tree.ast_node import EMPTY_TYPE, ASTNode

log = logging.getLogger(__name__)


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def normalize_new_values_to(from_node: ASTNode, to_node: ASTNode, config) -> ASTNode:
    """
    Return a copy of `to_node` with every value not used anywhere in
    `from_node` replaced by None (new numeric literals are kept when the
    config asks for specific numeric literals). The root is left untouched.

    Ids are canonicalized too: a node that corresponds to a node of
    `from_node` takes that node's id, and a new node gets none, so hints that
    differ only in the ids a tool assigned compare equal.
    """
    to_node = to_node.copy()

    # Values are not told apart by type, since several types share values
    # (e.g. variable declarations and variable references)
    used_values = {node.value for node in from_node.nodes()}

    # Snapshot first, since nodes get replaced while iterating
    for node in to_node.nodes():
        parent = node.parent
        if parent is None:
            continue

        if node.value is None or node.value in used_values:
            continue
        if config.use_specific_numeric_literals() and _is_number(node.value):
            continue

        replacement = ASTNode(node.type, None, node.id)
        index = node.index()
        relation = node.relation()
        parent.remove_child(index)
        parent.add_child(replacement, relation, index)
        children = list(zip(node.relations, node.children))
        node.clear_children()
        for child_relation, child in children:
            replacement.add_child(child, child_relation)

    # After the values, so the correspondence is the one edits are taken from
    for node, original in EditExtractor.get_correspondence(from_node, to_node):
        if node.parent is not None:
            node.id = original.id if original is not None else None

    return to_node


def _prune_immediate_children(node: ASTNode, condition: Callable[[str], bool]) -> ASTNode:
    i = 0
    while i < len(node.children):
        child = node.children[i]
        if child is not None and condition(child.type) and not child.children:
            node.remove_child(i)
            continue
        i += 1
    return node


def prune_new_nodes_to(from_node: ASTNode, to_node: ASTNode, config):
    """
    Prune nodes from `to_node` in place, according to the config.

    Note: this modifies the given tree rather than returning a copy.
    """
    # Reverse pre-order, so children are pruned before their parents
    for node in reversed(to_node.nodes()):
        if node.parent is None:
            continue
        # Placeholders carry nothing, and some types mean nothing without
        # children (e.g. an empty script)
        if node.has_type(EMPTY_TYPE) or (
                not node.children and config.trim_if_childless(node.type)):
            node.parent.remove_child(node.index())

    # Deepest first, so children are pruned before parents
    added = EditExtractor.get_inserted_and_renamed_nodes(from_node, to_node)
    added.sort(key=lambda node: -node.depth())
    for node in added:
        if node.parent is None:
            continue
        # Literal slots and similar children are attached automatically when
        # the editor creates a block, so they carry no intent
        _prune_immediate_children(node, config.trim_if_parent_is_added)


def normalize_and_prune(from_node: ASTNode, to_node: ASTNode, config) -> ASTNode:
    """Normalized and pruned copy of `to_node`, the form used for full matches."""
    node = normalize_new_values_to(from_node, to_node, config)
    prune_new_nodes_to(from_node, node, config)
    return node
