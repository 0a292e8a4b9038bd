# hintrating/rating/hint_outcome.py
from __future__ import annotations

import itertools
import json
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from hintrating.errors import TreeParseError
from hintrating.tree.ast_node import ASTNode
from hintrating.tree.diff import ColorStyle

log = logging.getLogger(__name__)

_outcome_ids = itertools.count()


@dataclass(frozen=True, eq=False)
class HintOutcome:
    """One algorithm-generated candidate: the state the hint would lead to."""
    result: Optional[ASTNode]
    assignment_id: str
    request_id: str
    weight: float = 1.0
    id: int = field(default_factory=lambda: next(_outcome_ids))
    properties: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.weight < 0:
            raise ValueError(f"Outcome weight must be non-negative, got {self.weight}")

    def result_string(self, from_node: ASTNode, config=None,
                      style: ColorStyle = ColorStyle.NONE) -> str:
        if self.result is None:
            return ""
        return ASTNode.diff(from_node, self.result, config, style=style)

    def debugging_properties(self) -> Dict[str, str]:
        return dict(self.properties)

    @classmethod
    def from_dict(cls, data: dict) -> "HintOutcome":
        kwargs = {}
        if data.get("id") is not None:
            kwargs["id"] = data["id"]
        return cls(
            result=ASTNode.parse(data["result"]),
            assignment_id=str(data["assignmentID"]),
            request_id=str(data["requestID"]),
            weight=float(data.get("weight", 1.0)),
            properties={str(k): str(v) for k, v in (data.get("properties") or {}).items()},
            **kwargs,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "assignmentID": self.assignment_id,
            "requestID": self.request_id,
            "weight": self.weight,
            "properties": dict(self.properties),
            "result": None if self.result is None else self.result.to_json(),
        }


class HintSet:
    """The hint outcomes one algorithm generated, grouped by request."""

    def __init__(self, name: str, config):
        self.name = name
        self.config = config
        self._outcomes: Dict[str, List[HintOutcome]] = defaultdict(list)

    def add(self, outcome: HintOutcome):
        self._outcomes[outcome.request_id].append(outcome)

    def add_all(self, outcomes):
        for outcome in outcomes:
            self.add(outcome)
        return self

    def outcomes(self, request_id: str) -> List[HintOutcome]:
        return list(self._outcomes.get(request_id, []))

    def request_ids(self) -> List[str]:
        return sorted(self._outcomes)

    def __len__(self):
        return sum(len(v) for v in self._outcomes.values())

    @classmethod
    def from_folder(cls, name: str, config, path: str | Path) -> "HintSet":
        """
        Load every `*.json` outcome under `path/<assignmentID>/`.

        Each file holds one outcome object with `assignmentID`, `requestID`,
        `weight`, `result` and optionally `id` and `properties`.
        """
        hint_set = cls(name, config)
        root = Path(path)
        if not root.is_dir():
            raise FileNotFoundError(f"Missing hint folder: {root}")
        for file in sorted(root.glob("*/*.json")):
            text = file.read_text(encoding="utf-8")
            try:
                data = json.loads(text)
            except json.JSONDecodeError as e:
                raise TreeParseError(f"Error parsing hint outcome {file}: {e}", text) from e
            hint_set.add(HintOutcome.from_dict(data))
        log.info("Loaded %d outcomes for %s from %s", len(hint_set), name, root)
        return hint_set
