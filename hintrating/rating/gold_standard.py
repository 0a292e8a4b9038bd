# hintrating/rating/gold_standard.py
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional

import pandas as pd

from hintrating.errors import MissingColumnError, TreeParseError
from hintrating.rating.tutor_hint import Priority, TutorHint, Validity
from hintrating.tree.ast_node import ASTNode

log = logging.getLogger(__name__)

TRUE = "TRUE"
FALSE = "FALSE"

REQUIRED_COLUMNS = [
    "assignmentID", "requestID", "year", "hintID", "priority", "from", "to",
] + [v.name for v in Validity if v != Validity.NoTutors]


def _is_true(value: str) -> bool:
    return str(value).strip().upper() in (TRUE, "1")


class GoldStandard:
    """Tutor hints by assignment, then by request, in request id order."""

    def __init__(self, hints: Iterable[TutorHint]):
        grouped: Dict[str, Dict[str, List[TutorHint]]] = defaultdict(lambda: defaultdict(list))
        for hint in hints:
            grouped[hint.assignment_id][hint.request_id].append(hint)
        self._map: Dict[str, Dict[str, List[TutorHint]]] = {
            assignment_id: {request_id: requests[request_id] for request_id in sorted(requests)}
            for assignment_id, requests in grouped.items()
        }

    def assignment_ids(self) -> List[str]:
        return sorted(self._map)

    def request_ids(self, assignment_id: str) -> List[str]:
        return list(self._map.get(assignment_id, {}))

    def valid_hints(self, assignment_id: str, request_id: str) -> List[TutorHint]:
        """A fresh list of the request's tutor hints, in spreadsheet order."""
        return list(self._map.get(assignment_id, {}).get(request_id, []))

    def hint_request_node(self, assignment_id: str, request_id: str) -> Optional[ASTNode]:
        hints = self.valid_hints(assignment_id, request_id)
        if not hints:
            return None
        return hints[0].from_node

    def all_hints(self) -> List[TutorHint]:
        return [hint
                for assignment_id in self.assignment_ids()
                for request_id in self.request_ids(assignment_id)
                for hint in self._map[assignment_id][request_id]]

    def __len__(self):
        return len(self.all_hints())

    @classmethod
    def merge(cls, *standards: "GoldStandard") -> "GoldStandard":
        return cls(hint for standard in standards for hint in standard.all_hints())

    def filter_for_assignment(self, assignment_id: str) -> "GoldStandard":
        return GoldStandard(hint for hint in self.all_hints() if hint.assignment_id == assignment_id)

    # ---------- spreadsheets ----------

    def to_frame(self) -> pd.DataFrame:
        rows = []
        for assignment_id in self.assignment_ids():
            for request_id in self.request_ids(assignment_id):
                for i, hint in enumerate(self._map[assignment_id][request_id]):
                    row = {
                        "assignmentID": assignment_id,
                        "requestID": request_id,
                        "year": hint.year,
                        "hintID": hint.hint_id,
                    }
                    for v in Validity:
                        if v == Validity.NoTutors:
                            flag = hint.validity == Validity.NoTutors
                        else:
                            flag = hint.validity.is_at_least(v)
                        row[v.name] = TRUE if flag else FALSE
                    row["priority"] = "" if hint.priority is None else int(hint.priority)
                    # The request tree is only written once per request
                    row["from"] = hint.from_node.to_json_string() if i == 0 else ""
                    row["to"] = hint.to_node.to_json_string()
                    rows.append(row)
        return pd.DataFrame(rows, columns=[
            "assignmentID", "requestID", "year", "hintID",
            *[v.name for v in Validity], "priority", "from", "to",
        ])

    def write_spreadsheet(self, path: str):
        self.to_frame().to_csv(path, index=False)
        log.info("Wrote %d tutor hints to %s", len(self), path)

    @classmethod
    def parse_spreadsheet(cls, path: str) -> "GoldStandard":
        """
        Read a gold standard CSV. A blank `from` cell reuses the request tree
        of the previous row.
        """
        df = pd.read_csv(path, dtype=str, keep_default_na=False)
        for column in REQUIRED_COLUMNS:
            if column not in df.columns:
                raise MissingColumnError(column, path)

        hints: List[TutorHint] = []
        last_from: Optional[ASTNode] = None
        for record in df.to_dict(orient="records"):
            if record["from"].strip():
                last_from = ASTNode.parse(record["from"])
            if last_from is None:
                raise TreeParseError("First gold standard row has no 'from' tree", str(record))

            validity = Validity.NoTutors
            for v in Validity:
                if v.name in record and _is_true(record[v.name]):
                    validity = max(validity, v)

            priority_string = record["priority"].strip()
            priority = None if not priority_string else Priority.from_int(int(float(priority_string)))

            hints.append(TutorHint(
                hint_id=int(float(record["hintID"])),
                request_id=record["requestID"],
                tutor="consensus",
                assignment_id=record["assignmentID"],
                year=record["year"],
                from_node=last_from,
                to_node=ASTNode.parse(record["to"]),
                validity=validity,
                priority=priority,
            ))
        log.info("Parsed %d tutor hints from %s", len(hints), path)
        return cls(hints)

    def request_nodes_report(self, config=None) -> str:
        is_body_type = config.is_body_type if config is not None else None
        lines = []
        for assignment_id in self.assignment_ids():
            lines.append(f" ============= {assignment_id} ============= ")
            for request_id in self.request_ids(assignment_id):
                from_node = self.hint_request_node(assignment_id, request_id)
                if from_node is None:
                    continue
                lines.append(request_id)
                lines.append(from_node.pretty_print(True, is_body_type))
                lines.append("----------------")
        return "\n".join(lines)
