# hintrating/rating/rate_hints.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, List, Optional

from hintrating.rating.edit_extractor import EditExtractor
from hintrating.rating.gold_standard import GoldStandard
from hintrating.rating.hint_outcome import HintOutcome, HintSet
from hintrating.rating.matching import find_matching_edit, find_partially_matching_edit
from hintrating.rating.ratings import HintRatingSet, RequestRating
from hintrating.rating.tutor_hint import TutorHint

log = logging.getLogger(__name__)

GS_SPREADSHEET = "gold-standard.csv"
ALGORITHMS_DIR = "algorithms"


def rate_request(assignment_id: str, request_id: str, valid_hints: List[TutorHint],
                 outcomes: List[HintOutcome], config,
                 extractor: Optional[EditExtractor] = None) -> Optional[RequestRating]:
    """
    Rate the outcomes generated for one request, or return None when no tutor
    hint for it meets the required validity.

    All full matches are settled before any partial match is tried, so an
    outcome cannot take a tutor hint by partial overlap when another outcome
    matches that hint exactly.
    """
    required = config.highest_required_validity()
    if not any(hint.validity.is_at_least(required) for hint in valid_hints):
        return None
    extractor = extractor or EditExtractor()

    request_rating = RequestRating(request_id, assignment_id, valid_hints[0].from_node, config)
    unmatched = list(outcomes)
    if not unmatched:
        log.warning("No hints generated for request %s/%s.", assignment_id, request_id)

    still_unmatched = []
    for outcome in unmatched:
        rating = find_matching_edit(valid_hints, outcome, config)
        if rating is not None:
            request_rating.append(rating)
        else:
            still_unmatched.append(outcome)

    for outcome in still_unmatched:
        request_rating.append(find_partially_matching_edit(valid_hints, outcome, config, extractor))

    request_rating.sort()
    return request_rating


def rate(standard: GoldStandard, hint_set: HintSet, debug: bool = False,
         logger=None) -> HintRatingSet:
    """Rate every request of the gold standard against one algorithm's hints."""
    config = hint_set.config
    rating_set = HintRatingSet(hint_set.name)
    extractor = EditExtractor()
    events = logger.bind(algorithm=hint_set.name) if logger else None
    for assignment_id in standard.assignment_ids():
        log.info("----- %s -----", assignment_id)
        if events:
            events.log("AssignmentStarted", {"assignment_id": assignment_id})

        for request_id in standard.request_ids(assignment_id):
            valid_hints = standard.valid_hints(assignment_id, request_id)
            outcomes = hint_set.outcomes(request_id)
            request_rating = rate_request(
                assignment_id, request_id, valid_hints, outcomes, config, extractor,
            )
            if request_rating is None:
                log.debug("Skipping %s/%s: no tutor hint is valid enough", assignment_id, request_id)
                if events:
                    events.log("RequestSkipped", {"assignment_id": assignment_id,
                                                  "request_id": request_id})
                continue
            if not outcomes and events:
                events.log("NoHintsGenerated", {"assignment_id": assignment_id,
                                                "request_id": request_id})

            if debug:
                log.info("\n%s", request_rating.ratings_report(valid_hints))
            rating_set.append(request_rating)
            log.info(request_rating.summary())
            if events:
                events.log("RequestRated", {
                    "assignment_id": assignment_id,
                    "request_id": request_id,
                    "outcomes": len(request_rating),
                    "validity": request_rating.validity_array().tolist(),
                    "priority_full": request_rating.priority_score(False),
                    "priority_partial": request_rating.priority_score(True),
                })

        summary = rating_set.summary(assignment_id)
        if summary is not None:
            log.info(summary)
            if events:
                full, partial = rating_set.priority_means(assignment_id)
                events.log("AssignmentSummary", {
                    "assignment_id": assignment_id,
                    "validity": rating_set.validity_means(assignment_id).tolist(),
                    "priority_full": full,
                    "priority_partial": partial,
                })
    return rating_set


def rate_dir(path: str | Path, config, write: bool = True,
             logger=None, debug: bool = False) -> Dict[str, HintRatingSet]:
    """
    Rate every algorithm folder under `path/algorithms/` against
    `path/gold-standard.csv`, writing `path/algorithms/<name>.csv`.
    With `debug`, each request's ratings are logged grouped by match type.
    """
    root = Path(path)
    standard = GoldStandard.parse_spreadsheet(str(root / GS_SPREADSHEET))
    if logger:
        logger.log("GoldStandardLoaded", {"path": str(root / GS_SPREADSHEET), "hints": len(standard)})
    algorithms_folder = root / ALGORITHMS_DIR
    if not algorithms_folder.is_dir():
        raise FileNotFoundError(f"Missing algorithms folder: {algorithms_folder}")

    results: Dict[str, HintRatingSet] = {}
    for algorithm_folder in sorted(p for p in algorithms_folder.iterdir() if p.is_dir()):
        hint_set = HintSet.from_folder(algorithm_folder.name, config, algorithm_folder)
        log.info(hint_set.name)
        if logger:
            logger.log("HintSetLoaded", {"algorithm": hint_set.name, "outcomes": len(hint_set)})
        ratings = rate(standard, hint_set, debug=debug, logger=logger)
        results[hint_set.name] = ratings
        if write:
            out_path = algorithms_folder / f"{algorithm_folder.name}.csv"
            ratings.write_all_hints(str(out_path))
            if logger:
                logger.log("ResultsWritten", {"algorithm": hint_set.name, "path": str(out_path)})
    return results
