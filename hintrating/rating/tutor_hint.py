# hintrating/rating/tutor_hint.py
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional

from hintrating.tree.ast_node import ASTNode
from hintrating.tree.diff import ColorStyle


class Validity(IntEnum):
    """
    How many tutors endorsed a hint.

    Order is meaningful (NoTutors < OneTutor < MultipleTutors < Consensus)
    and used for threshold checks.
    """
    NoTutors = 0
    OneTutor = 1
    MultipleTutors = 2
    Consensus = 3

    @classmethod
    def from_int(cls, value: int) -> "Validity":
        return cls(int(value))

    def is_at_least(self, other: "Validity") -> bool:
        return self >= other


class Priority(IntEnum):
    """How urgently tutors would show a hint. TooSoon means not yet."""
    Highest = 1
    High = 2
    Normal = 3
    TooSoon = 4

    @classmethod
    def from_int(cls, value: int) -> "Priority":
        return cls(int(value))

    def points(self) -> float:
        return {
            Priority.Highest: 3.0,
            Priority.High: 2.0,
            Priority.Normal: 1.0,
            Priority.TooSoon: 0.0,
        }[self]


@dataclass(frozen=True, eq=False)
class TutorHint:
    """A tutor-authored transition from the request state to a better one."""
    hint_id: int
    request_id: str
    tutor: str
    assignment_id: str
    year: str
    from_node: ASTNode
    to_node: ASTNode
    validity: Validity = Validity.NoTutors
    priority: Optional[Priority] = None

    def sort_key(self) -> tuple:
        """Ascending key: highest priority first, then highest validity."""
        if self.priority is None:
            # Unprioritized hints rank below Normal but above TooSoon
            rank = Priority.Normal + 0.5
        else:
            rank = float(self.priority)
        return (rank, -int(self.validity))

    def is_too_soon(self) -> bool:
        return self.priority == Priority.TooSoon

    def to_diff(self, config=None, style: ColorStyle = ColorStyle.NONE) -> str:
        return ASTNode.diff(self.from_node, self.to_node, config, style=style)

    def __repr__(self):
        priority = self.priority.name if self.priority is not None else None
        return (f"TutorHint({self.assignment_id}/{self.request_id}#{self.hint_id}, "
                f"validity={self.validity.name}, priority={priority})")
