from conftest import COMMENT, MOVE, block_with, tree
from hintrating.config.schema import RatingConfig
from hintrating.rating.edit_extractor import EditExtractor
from hintrating.rating.normalize import (normalize_and_prune, normalize_new_values_to,
                                         prune_new_nodes_to)
from hintrating.tree.ast_node import EMPTY_TYPE, ASTNode


def test_new_values_are_nulled(from_tree, config):
    to = block_with(MOVE)
    normalized = normalize_new_values_to(from_tree, to, config)
    block = normalized.children[0]
    assert block.children[0].value == "say"
    assert block.children[1].value is None
    # The input is left alone
    assert to.children[0].children[1].value == "move"


def test_different_new_names_normalize_equal(from_tree, config):
    x = block_with({"type": "var", "value": "x"})
    y = block_with({"type": "var", "value": "y"})
    assert x != y
    assert normalize_new_values_to(from_tree, x, config) == normalize_new_values_to(from_tree, y, config)


def test_numeric_literals_kept_when_configured(from_tree):
    to = block_with({"type": "literal", "value": "10"}, {"type": "literal", "value": "ten"})
    keep = normalize_new_values_to(from_tree, to, RatingConfig(specific_numeric_literals=True))
    assert [c.value for c in keep.children[0].children[1:]] == ["10", None]
    drop = normalize_new_values_to(from_tree, to, RatingConfig())
    assert [c.value for c in drop.children[0].children[1:]] == [None, None]


def test_nulled_node_keeps_children_and_place(from_tree, config):
    to = block_with(
        {"type": "Call", "value": "move",
         "children": {"steps": {"type": "literal", "value": "say"}}},
        {"type": "Call", "value": "say"},
    )
    normalized = normalize_new_values_to(from_tree, to, config)
    block = normalized.children[0]
    replaced = block.children[1]
    assert replaced.value is None
    assert replaced.relations == ("steps",)
    assert replaced.children[0].parent is replaced
    assert replaced.children[0].value == "say"
    assert block.relations == ("0", "1", "2")
    assert block.children[2].value == "say"


def test_new_ids_are_dropped(from_tree, config):
    to = block_with({"type": "Call", "value": "say", "id": "generated-17"})
    normalized = normalize_new_values_to(from_tree, to, config)
    assert normalized.children[0].children[1].id is None
    assert normalized.children[0].id == "b"


def test_normalization_is_idempotent(from_tree, snap_config):
    to = block_with(MOVE, COMMENT, {"type": "literal", "value": "3.5"})
    once = normalize_new_values_to(from_tree, to, snap_config)
    twice = normalize_new_values_to(from_tree, once, snap_config)
    assert once == twice


def test_prune_removes_placeholders_and_childless_trim_types(from_tree):
    config = RatingConfig(trim_if_childless_types=["script", "Block"])
    to = tree({
        "type": "Script", "id": "s",
        "children": {
            "0": {"type": "Block", "id": "b", "children": {"0": None}},
            "1": {"type": "script"},
            "2": {"type": "Comment"},
        },
        "childrenOrder": ["0", "1", "2"],
    })
    prune_new_nodes_to(from_tree, to, config)
    # The placeholder goes first, which leaves the Block childless too
    assert [c.type for c in to.children] == ["Comment"]


def test_prune_keeps_trim_types_with_children(from_tree):
    config = RatingConfig(trim_if_childless_types=["Block"])
    to = from_tree.copy()
    prune_new_nodes_to(from_tree, to, config)
    assert to == from_tree


def test_prune_auto_children_of_added_nodes(from_tree, snap_config):
    to = block_with({
        "type": "Call", "value": "move",
        "children": {"0": {"type": "literal", "value": "10"}},
    })
    prune_new_nodes_to(from_tree, to, snap_config)
    added = to.children[0].children[1]
    assert added.children == ()


def test_prune_keeps_auto_children_of_existing_nodes(snap_config):
    from_node = tree({
        "type": "Script", "id": "s",
        "children": {"0": {"type": "Call", "value": "move", "id": "m"}},
    })
    to = tree({
        "type": "Script", "id": "s",
        "children": {"0": {"type": "Call", "value": "move", "id": "m",
                           "children": {"0": {"type": "literal", "value": "10"}}}},
    })
    prune_new_nodes_to(from_node, to, snap_config)
    assert len(to.children[0].children) == 1


def test_prune_never_grows_tree_or_drops_parents(from_tree, snap_config):
    to = block_with(
        MOVE,
        {"type": "script"},
        {"type": "Call", "value": "turn", "children": {"0": {"type": "literal"}, "1": {"type": "var"}}},
    )
    before = len(to.nodes())
    normalized = normalize_and_prune(from_tree, to, snap_config)
    assert len(normalized.nodes()) <= before
    types = [n.type for n in normalized.nodes()]
    assert "var" in types
    assert "script" not in types
    assert EMPTY_TYPE not in types


def test_equal_normal_forms_have_equal_edits(from_tree, snap_config):
    t1 = block_with({"type": "Call", "value": "move",
                     "children": {"0": {"type": "literal", "value": "5"}}})
    t2 = block_with({"type": "Call", "value": "go",
                     "children": {"0": {"type": "literal", "value": "7"}}})
    assert normalize_and_prune(from_tree, t1, snap_config) == normalize_and_prune(from_tree, t2, snap_config)
    extractor = EditExtractor()
    e1 = extractor.get_edits(from_tree, normalize_new_values_to(from_tree, t1, snap_config))
    e2 = extractor.get_edits(from_tree, normalize_new_values_to(from_tree, t2, snap_config))
    assert e1 == e2


def test_equal_raw_trees_normalize_equal(from_tree, snap_config):
    t1 = block_with(MOVE, COMMENT)
    t2 = block_with(MOVE, COMMENT)
    assert normalize_and_prune(from_tree, t1, snap_config) == normalize_and_prune(from_tree, t2, snap_config)


def test_root_is_never_normalized(config):
    from_node = ASTNode("Script")
    to = ASTNode("Script", "brand-new")
    assert normalize_new_values_to(from_node, to, config).value == "brand-new"


def test_kept_nodes_take_their_original_ids(from_tree, config):
    to = tree({"type": "Script", "id": "s", "children": {
        "0": {"type": "Block", "id": "tmp-1", "children": {"0": {"type": "Call", "value": "say"}}},
    }})
    normalized = normalize_new_values_to(from_tree, to, config)
    assert [n.id for n in normalized.nodes()] == ["s", "b", "c1"]
    assert normalized == from_tree
    assert to.children[0].id == "tmp-1"
