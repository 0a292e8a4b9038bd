# hintrating/rating/ratings.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from hintrating.rating.hint_outcome import HintOutcome
from hintrating.rating.tutor_hint import Priority, TutorHint, Validity
from hintrating.tree.ast_node import ASTNode
from hintrating.tree.diff import ColorStyle

log = logging.getLogger(__name__)

# Tiers that are scored; NoTutors is never a positive outcome
SCORED_VALIDITIES = [v for v in Validity if v != Validity.NoTutors]


class MatchType(Enum):
    """How closely a generated hint matches a tutor hint. Ordered."""
    None_ = 0
    Partial = 1
    Full = 2

    def is_at_least(self, other: "MatchType") -> bool:
        return self.value >= other.value

    def label(self) -> str:
        return "None" if self is MatchType.None_ else self.name


SCORED_MATCH_TYPES = [MatchType.Full, MatchType.Partial]


@dataclass(frozen=True, eq=False)
class HintRating:
    """The verdict for one hint outcome."""
    outcome: HintOutcome
    match: Optional[TutorHint] = None
    match_type: MatchType = MatchType.None_

    def validity(self) -> Validity:
        return Validity.NoTutors if self.match is None else self.match.validity

    def priority(self) -> Optional[Priority]:
        return None if self.match is None else self.match.priority

    def is_too_soon(self) -> bool:
        return self.match is not None and self.match.is_too_soon()

    def to_row(self, order: int, total_weight: float, request_node: Optional[ASTNode],
               config=None, style: ColorStyle = ColorStyle.HTML) -> Dict[str, Any]:
        outcome = self.outcome
        match_id = validity = priority = None
        if self.match is not None:
            match_id = self.match.hint_id
            validity = int(self.match.validity)
            priority = None if self.match.priority is None else int(self.match.priority)
        row: Dict[str, Any] = {
            "assignmentID": outcome.assignment_id,
            "requestID": outcome.request_id,
            "hintID": outcome.id,
            "order": order,
            "weight": outcome.weight,
            "weightNorm": outcome.weight / total_weight if total_weight else 0.0,
            "matchID": match_id,
            "validity": validity,
            "priority": priority,
            "type": self.match_type.label(),
            "outcome": "" if outcome.result is None else outcome.result.to_json_string(),
            "diff": "" if outcome.result is None or request_node is None
            else ASTNode.diff(request_node, outcome.result, config, style=style),
        }
        for key, value in outcome.debugging_properties().items():
            row[f"p_{key}"] = value
        return row

    def __str__(self):
        return (f"{self.outcome.assignment_id} / {self.outcome.request_id}: "
                f"{self.outcome.weight} - {self.match_type.label()}")


class RequestRating(list):
    """The ratings of all outcomes an algorithm generated for one request."""

    def __init__(self, request_id: str, assignment_id: str, request_node: ASTNode, config,
                 ratings: Optional[List[HintRating]] = None):
        super().__init__(ratings or [])
        self.request_id = request_id
        self.assignment_id = assignment_id
        self.request_node = request_node
        self.config = config

    def sort(self):
        # Matched ratings by tutor hint priority; unmatched ones keep their order, last
        super().sort(key=lambda r: r.match.sort_key() if r.match is not None else (float("inf"),))

    def total_weight(self) -> float:
        return float(sum(r.outcome.weight for r in self))

    def validity_weight(self, min_match_type: MatchType, min_validity: Validity,
                        use_weights: bool = True) -> float:
        """Weight (or count) of outcomes matched at least this well, too-soon matches excluded."""
        return float(sum(
            (r.outcome.weight if use_weights else 1)
            for r in self
            if r.match_type.is_at_least(min_match_type)
            and r.validity().is_at_least(min_validity)
            and not r.is_too_soon()
        ))

    def validity_array(self) -> np.ndarray:
        """
        Weighted coverage per scored validity tier (rows) for Full and
        Full-or-Partial matches (columns), as fractions of the total weight.
        """
        out = np.zeros((len(SCORED_VALIDITIES), len(SCORED_MATCH_TYPES)), dtype=float)
        total = self.total_weight()
        if not self or total == 0:
            return out
        for i, validity in enumerate(SCORED_VALIDITIES):
            for j, match_type in enumerate(SCORED_MATCH_TYPES):
                out[i, j] = self.validity_weight(match_type, validity, True)
        return out / total

    def priority_score(self, count_partial: bool) -> float:
        total = self.total_weight()
        if not self or total == 0:
            return 0.0
        score = sum(
            r.outcome.weight * r.priority().points()
            for r in self
            if r.priority() is not None
            and (count_partial or r.match_type == MatchType.Full)
        )
        return float(score / total)

    def summary(self) -> str:
        return (f"{self.request_id}: {validity_array_to_string(self.validity_array(), 2)}"
                f" / {self.priority_score(False):.02f} ({self.priority_score(True):.02f})p")

    def to_hint_rows(self, style: ColorStyle = ColorStyle.HTML) -> List[Dict[str, Any]]:
        total = self.total_weight()
        rows = [r.to_row(i, total, self.request_node, self.config, style)
                for i, r in enumerate(self)]
        if not rows:
            # Keep a row for requests the algorithm had nothing for
            placeholder = HintOutcome(None, self.assignment_id, self.request_id, 1.0, id=-1)
            rows.append(HintRating(placeholder).to_row(0, 1.0, self.request_node, self.config, style))
        return rows

    def to_rating_row(self) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "assignmentID": self.assignment_id,
            "requestID": self.request_id,
        }
        weight = self.total_weight()
        for validity in SCORED_VALIDITIES:
            for match_type in SCORED_MATCH_TYPES:
                column = f"{validity.name}_{match_type.label()}"
                valid_weight = self.validity_weight(match_type, validity, True)
                row[column] = valid_weight / weight if weight else 0.0
                row[f"{column}_validWeight"] = valid_weight
                row[f"{column}_validCount"] = self.validity_weight(match_type, validity, False)
        row["totalWeight"] = weight
        row["totalCount"] = len(self)
        return row

    def ratings_report(self, valid_hints: List[TutorHint]) -> str:
        """Outcomes grouped by match type, too-soon matches last, for debugging."""
        if not self:
            return ""
        lines = [f"+====+ {self.assignment_id} / {self.request_id} +====+"]
        lines.append(self.request_node.pretty_print(True, self.config.is_body_type))
        groups = [(t.label(), [r for r in self if r.match_type == t and not r.is_too_soon()])
                  for t in reversed(list(MatchType))]
        groups.append(("Too Soon", [r for r in self if r.is_too_soon()]))
        missed = [h for h in valid_hints
                  if h.validity.is_at_least(Validity.MultipleTutors) and not h.is_too_soon()]
        for label, ratings in groups:
            if not ratings:
                continue
            lines.append(f"               === {label} ===")
            for rating in ratings:
                lines.append(f"Hint ID: {rating.outcome.id}")
                lines.append(f"Weight: {rating.outcome.weight}")
                lines.append(rating.outcome.result_string(self.request_node, self.config))
                lines.append("-------")
                missed = [h for h in missed if h is not rating.match]
        if missed:
            lines.append(f"Missed tutor hints: {', '.join(str(h.hint_id) for h in missed)}")
        return "\n".join(lines)


class HintRatingSet(list):
    """All request ratings of one algorithm."""

    def __init__(self, name: str, ratings: Optional[List[RequestRating]] = None):
        super().__init__(ratings or [])
        self.name = name

    def for_assignment(self, assignment_id: str) -> List[RequestRating]:
        return [r for r in self if r.assignment_id == assignment_id]

    def assignment_ids(self) -> List[str]:
        return sorted({r.assignment_id for r in self})

    def validity_means(self, assignment_id: str) -> np.ndarray:
        ratings = self.for_assignment(assignment_id)
        if not ratings:
            return np.zeros((len(SCORED_VALIDITIES), len(SCORED_MATCH_TYPES)), dtype=float)
        return np.mean([r.validity_array() for r in ratings], axis=0)

    def priority_means(self, assignment_id: str) -> tuple[float, float]:
        ratings = self.for_assignment(assignment_id)
        if not ratings:
            return 0.0, 0.0
        full = float(np.mean([r.priority_score(False) for r in ratings]))
        partial = float(np.mean([r.priority_score(True) for r in ratings]))
        return full, partial

    def summary(self, assignment_id: str) -> Optional[str]:
        if not self.for_assignment(assignment_id):
            return None
        full, partial = self.priority_means(assignment_id)
        return (f"TOTAL: {validity_array_to_string(self.validity_means(assignment_id), 3)}"
                f" / {full:.03f} ({partial:.03f})p")

    def all_hints_frame(self, style: ColorStyle = ColorStyle.HTML) -> pd.DataFrame:
        frame = pd.DataFrame([row for r in self for row in r.to_hint_rows(style)])
        # Unmatched rows leave these empty, which would otherwise turn them into floats
        for column in ("matchID", "validity", "priority"):
            if column in frame:
                frame[column] = frame[column].astype("Int64")
        return frame

    def all_ratings_frame(self) -> pd.DataFrame:
        return pd.DataFrame([r.to_rating_row() for r in self])

    def write_all_hints(self, path: str):
        self.all_hints_frame().to_csv(path, index=False)
        log.info("Wrote %d hint rows for %s to %s", sum(max(1, len(r)) for r in self), self.name, path)

    def write_all_ratings(self, path: str):
        self.all_ratings_frame().to_csv(path, index=False)


def validity_array_to_string(array: np.ndarray, digits: int) -> str:
    parts = [f"{row[0]:.{digits}f} ({row[1]:.{digits}f})" for row in array]
    return f"[{', '.join(parts)}]v"
