from conftest import COMMENT, FROM_JSON, MOVE, block_of, block_with, tree
from hintrating.rating.edit_extractor import Deletion, EditExtractor, Insertion, Rename

extractor = EditExtractor()


def test_no_edits_for_equal_trees(from_tree):
    assert extractor.get_edits(from_tree, from_tree.copy()) == frozenset()


def test_insertion(from_tree):
    edits = extractor.get_edits(from_tree, block_with(MOVE))
    assert edits == {Insertion(("id", "b"), "1", "Call", "move", after=("id", "c1"))}


def test_nested_insertions_reference_new_parent(from_tree):
    to = block_with({"type": "Call", "value": "move", "children": {"0": {"type": "literal"}}})
    edits = extractor.get_edits(from_tree, to)
    parent_key = ("new", ("id", "b"), "1", "Call", "move", ("id", "c1"))
    assert Insertion(parent_key, "0", "literal", None) in edits
    assert len(edits) == 2


def test_deletion(from_tree):
    edits = extractor.get_edits(from_tree, block_of())
    assert edits == {Deletion(("id", "c1"), "Call", "say")}
    assert all(edit.is_deletion() for edit in edits)


def test_rename(from_tree):
    to = block_of({"type": "Call", "value": "think", "id": "c1"})
    edits = extractor.get_edits(from_tree, to)
    assert edits == {Rename(("id", "c1"), "Call", "say", "Call", "think")}


def test_nodes_without_ids_align_structurally():
    from_node = tree({"type": "Block", "children": {
        "0": {"type": "Call", "value": "say"},
        "1": {"type": "Call", "value": "move"},
    }})
    to = tree({"type": "Block", "children": {
        "0": {"type": "Call", "value": "turn"},
        "1": {"type": "Call", "value": "say"},
        "2": {"type": "Call", "value": "move"},
    }})
    edits = extractor.get_edits(from_node, to)
    assert edits == {Insertion(("path",), "0", "Call", "turn")}


def test_same_length_replacement_is_a_rename():
    from_node = tree({"type": "Block", "children": {"0": {"type": "Call", "value": "say"}}})
    to = tree({"type": "Block", "children": {"0": {"type": "Call", "value": "think"}}})
    assert extractor.get_edits(from_node, to) == {Rename(("path", "0"), "Call", "say", "Call", "think")}


def test_reorder_is_a_move():
    from_node = tree({"type": "Block", "id": "b", "children": {
        "0": {"type": "A", "id": "a"},
        "1": {"type": "B", "id": "x"},
    }})
    to = tree({"type": "Block", "id": "b", "children": {
        "0": {"type": "B", "id": "x"},
        "1": {"type": "A", "id": "a"},
    }})
    edits = extractor.get_edits(from_node, to)
    assert len(edits) == 2
    assert Deletion(("id", "x"), "B", None) in edits
    assert Insertion(("id", "b"), "0", "B", None, ("id", "x"), id="x") in edits


def test_move_to_new_parent_keeps_children():
    from_node = tree({"type": "Script", "id": "s", "children": {
        "0": {"type": "Call", "value": "say", "id": "c",
              "children": {"0": {"type": "literal", "value": "hi", "id": "l"}}},
    }})
    to = tree({"type": "Script", "id": "s", "children": {
        "0": {"type": "Repeat", "children": {
            "0": {"type": "Call", "value": "say", "id": "c",
                  "children": {"0": {"type": "literal", "value": "hi", "id": "l"}}},
        }},
    }})
    edits = extractor.get_edits(from_node, to)
    repeat_key = ("new", ("id", "s"), "0", "Repeat", None, None)
    assert edits == {
        Insertion(("id", "s"), "0", "Repeat", None),
        Deletion(("id", "c"), "Call", "say"),
        Insertion(repeat_key, "0", "Call", "say", ("id", "c"), id="c"),
    }


def test_edit_sets_intersect_by_value(from_tree):
    a = extractor.get_edits(from_tree, block_with(MOVE))
    b = extractor.get_edits(tree(FROM_JSON), block_with(MOVE, COMMENT))
    assert a & b == a
    assert len(b - a) == 1


def test_inserted_and_renamed_nodes_are_live(from_tree):
    to = block_of({"type": "Call", "value": "think", "id": "c1"}, MOVE)
    nodes = EditExtractor.get_inserted_and_renamed_nodes(from_tree, to)
    assert [n.value for n in nodes] == ["think", "move"]
    assert all(n.root() is to for n in nodes)


def test_print_edits_comparison(from_tree):
    a = extractor.get_edits(from_tree, block_with(MOVE))
    b = extractor.get_edits(from_tree, block_with(MOVE, COMMENT))
    text = EditExtractor.print_edits_comparison(a, b, "Tutor", "Alg")
    assert "Only Alg:" in text
    assert "Insert Comment[hello] at #b/2" in text


TURN = {"type": "Call", "value": "turn"}


def test_insertion_order_among_new_siblings_matters(from_tree):
    in_order = block_with(MOVE, TURN)
    obj = in_order.to_json()
    obj["children"]["0"]["childrenOrder"] = ["0", "2", "1"]
    swapped = tree(obj)
    assert [c.value for c in swapped.children[0].children] == ["say", "turn", "move"]
    assert extractor.get_edits(from_tree, in_order) != extractor.get_edits(from_tree, swapped)


def test_repeated_new_siblings_are_counted(from_tree):
    once = extractor.get_edits(from_tree, block_with(MOVE))
    twice = extractor.get_edits(from_tree, block_with(MOVE, MOVE))
    assert len(twice) == 2
    assert once < twice


def test_dropped_id_is_an_edit(from_tree):
    to = block_of({"type": "Call", "value": "say"})
    edits = extractor.get_edits(from_tree, to)
    assert edits == {Rename(("id", "c1"), "Call", "say", "Call", "say", "c1", None)}
    assert "(id c1 -> None)" in str(next(iter(edits)))


def test_correspondence_pairs_every_node(from_tree):
    to = block_of({"type": "Call", "value": "say"}, MOVE)
    pairs = EditExtractor.get_correspondence(from_tree, to)
    assert [n.type for n, _ in pairs] == ["Script", "Block", "Call", "Call"]
    assert [None if f is None else f.id for _, f in pairs] == ["s", "b", "c1", None]
