# tests/conftest.py
import copy

import pytest

from hintrating.config.schema import RatingConfig
from hintrating.rating.hint_outcome import HintOutcome
from hintrating.rating.tutor_hint import Priority, TutorHint, Validity
from hintrating.tree.ast_node import ASTNode

FROM_JSON = {
    "type": "Script",
    "id": "s",
    "children": {
        "0": {
            "type": "Block",
            "id": "b",
            "children": {
                "0": {"type": "Call", "value": "say", "id": "c1"},
            },
        },
    },
}


def tree(obj) -> ASTNode:
    return ASTNode.parse(obj)


def block_with(*children) -> ASTNode:
    """The request tree with extra children appended to its Block."""
    obj = copy.deepcopy(FROM_JSON)
    block = obj["children"]["0"]["children"]
    for child in children:
        block[str(len(block))] = child
    return tree(obj)


def block_of(*children) -> ASTNode:
    """The request tree with its Block children replaced."""
    obj = copy.deepcopy(FROM_JSON)
    obj["children"]["0"]["children"] = {str(i): child for i, child in enumerate(children)}
    return tree(obj)


def tutor_hint(to_node, hint_id=1, validity=Validity.MultipleTutors,
               priority=Priority.High, from_node=None, request_id="r1"):
    return TutorHint(
        hint_id=hint_id,
        request_id=request_id,
        tutor="consensus",
        assignment_id="a1",
        year="2017",
        from_node=from_node if from_node is not None else tree(FROM_JSON),
        to_node=to_node,
        validity=validity,
        priority=priority,
    )


def outcome(result, weight=1.0, request_id="r1", id=None):
    kwargs = {} if id is None else {"id": id}
    return HintOutcome(result, "a1", request_id, weight, **kwargs)


@pytest.fixture
def from_tree():
    return tree(FROM_JSON)


@pytest.fixture
def config():
    return RatingConfig()


@pytest.fixture
def snap_config():
    return RatingConfig(
        name="snap",
        trim_if_childless_types=["script"],
        trim_if_parent_is_added_types=["literal"],
        body_types=["Script", "Block"],
    )


MOVE = {"type": "Call", "value": "move"}
COMMENT = {"type": "Comment", "value": "hello"}
