# hintrating/rating/matching.py
from __future__ import annotations

import logging
from typing import List, Optional

from hintrating.errors import RatingConsistencyError
from hintrating.rating.edit_extractor import EditExtractor
from hintrating.rating.hint_outcome import HintOutcome
from hintrating.rating.normalize import normalize_and_prune, normalize_new_values_to
from hintrating.rating.ratings import HintRating, MatchType
from hintrating.rating.tutor_hint import TutorHint
from hintrating.tree.ast_node import ASTNode
from hintrating.tree.diff import ColorStyle

log = logging.getLogger(__name__)


def sort_hints(valid_hints: List[TutorHint]) -> List[TutorHint]:
    """Highest priority first, ties broken by the highest validity. Stable."""
    return sorted(valid_hints, key=lambda hint: hint.sort_key())


def find_matching_edit(valid_hints: List[TutorHint], outcome: HintOutcome, config,
                       style: ColorStyle = ColorStyle.NONE) -> Optional[HintRating]:
    """
    Full match: the first tutor hint, in priority order, whose normalized and
    pruned result equals the outcome's. Returns None when there is none.
    """
    if not valid_hints:
        return HintRating(outcome)

    from_node = valid_hints[0].from_node
    outcome_node = normalize_and_prune(from_node, outcome.result, config)
    for tutor_hint in sort_hints(valid_hints):
        tutor_node = normalize_and_prune(from_node, tutor_hint.to_node, config)
        if outcome_node == tutor_node:
            return HintRating(outcome, tutor_hint, MatchType.Full)

        if outcome.result == tutor_hint.to_node:
            raise RatingConsistencyError("\n".join([
                "Normalized nodes should be equal if nodes are equal!",
                "Matching hint:",
                ASTNode.diff(tutor_hint.from_node, outcome.result, config, style=style),
                "Difference in normalized nodes:",
                ASTNode.diff(tutor_node, outcome_node, config, 2, style),
                "Tutor normalizing:",
                ASTNode.diff(tutor_hint.to_node, tutor_node, config, 2, style),
                "Outcome normalizing:",
                ASTNode.diff(outcome.result, outcome_node, config, 2, style),
            ]))
    return None


def find_partially_matching_edit(valid_hints: List[TutorHint], outcome: HintOutcome, config,
                                 extractor: EditExtractor,
                                 style: ColorStyle = ColorStyle.NONE) -> HintRating:
    """
    Partial match: the first tutor hint, in priority order, whose edits
    include all of the outcome's edits.

    Only one kind of partial match is detected here. An outcome that has the
    essence of a tutor hint but misses required parts of the tree is treated
    as a full match by pruning. Several outcomes that only together cover a
    tutor hint are not combined, since hints are rated independently. What
    remains is an outcome that does part of a tutor hint, e.g. one insertion
    of several; it counts as long as that part is meaningful, which here
    means not only deletions.
    """
    if not valid_hints:
        return HintRating(outcome)
    from_node = valid_hints[0].from_node

    # Normalized again, but left unpruned
    outcome_node = normalize_new_values_to(from_node, outcome.result, config)
    outcome_edits = extractor.get_edits(from_node, outcome_node)
    if not outcome_edits:
        return HintRating(outcome)

    for tutor_hint in sort_hints(valid_hints):
        tutor_node = normalize_new_values_to(from_node, tutor_hint.to_node, config)
        tutor_edits = extractor.get_edits(from_node, tutor_node)
        if not tutor_edits:
            continue
        overlap = tutor_edits & outcome_edits
        if len(overlap) != len(outcome_edits):
            continue
        if len(overlap) == len(tutor_edits):
            raise RatingConsistencyError("\n".join([
                "Edits should not match if hint outcomes did not!",
                "Tutor hint:",
                ASTNode.diff(from_node, tutor_node, config, style=style),
                "Alg hint:",
                ASTNode.diff(from_node, outcome_node, config, style=style),
                extractor.print_edits_comparison(tutor_edits, outcome_edits, "Tutor Hint", "Alg Hint"),
            ]))
        if all(edit.is_deletion() for edit in overlap):
            log.debug("Deletion-only overlap for outcome %s with tutor hint %s",
                      outcome.id, tutor_hint.hint_id)
            return HintRating(outcome)
        return HintRating(outcome, tutor_hint, MatchType.Partial)
    return HintRating(outcome)
