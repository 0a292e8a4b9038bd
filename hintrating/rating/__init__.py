# hintrating/rating/__init__.py
from __future__ import annotations

from .edit_extractor import Deletion, Edit, EditExtractor, Insertion, Rename
from .gold_standard import GoldStandard
from .hint_outcome import HintOutcome, HintSet
from .matching import find_matching_edit, find_partially_matching_edit, sort_hints
from .normalize import normalize_and_prune, normalize_new_values_to, prune_new_nodes_to
from .rate_hints import rate, rate_dir, rate_request
from .ratings import HintRating, HintRatingSet, MatchType, RequestRating
from .tutor_hint import Priority, TutorHint, Validity
