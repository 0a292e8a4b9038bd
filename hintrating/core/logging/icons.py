# hintrating/core/logging/icons.py
def get_event_icon(event_type: str) -> str:
    """Get the icon associated with a specific event type."""
    return EVENT_ICONS.get(event_type, "❓")  # Default: question mark

# ========================
# SYSTEM & INITIALIZATION
# ========================
SYSTEM_INIT = {
    "ConfigLoaded": "⚙️",  # Rating config resolved
    "RatingRunStarted": "▶️",  # rate_dir started
    "RatingRunCompleted": "✅",  # rate_dir finished
}

# ==============
# DATA LOADING
# ==============
DATA_EVENTS = {
    "GoldStandardLoaded": "📚✅",  # Gold standard spreadsheet parsed
    "HintSetLoaded": "📂",  # Algorithm hint folder loaded
    "ResultsWritten": "💾",  # Rating spreadsheet written
}

# ===========
# RATING
# ===========
RATING = {
    "AssignmentStarted": "📝",  # Assignment rating started
    "RequestRated": "📊",  # One request rated
    "RequestSkipped": "⏭️",  # No tutor hint meets the required validity
    "NoHintsGenerated": "🈳",  # Algorithm produced nothing for a request
    "AssignmentSummary": "📈",  # Mean scores for an assignment
}

# ==============
# ERROR STATES
# ==============
ERROR_STATES = {
    "warning": "⚠️",
    "exception": "🔥",
    "info": "ℹ️",
}

# Combine all categories into a single dictionary
EVENT_ICONS = {
    **SYSTEM_INIT,
    **DATA_EVENTS,
    **RATING,
    **ERROR_STATES,
}
