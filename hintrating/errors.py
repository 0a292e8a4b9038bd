# hintrating/errors.py
class HintRatingError(Exception):
    """Base exception for all hint rating errors."""
    pass

class TreeParseError(HintRatingError):
    """Raised when a serialized tree cannot be parsed. Carries the raw input."""

    def __init__(self, message: str, source=None):
        self.source = source
        if source is not None:
            message = f"{message}\n{source}"
        super().__init__(message)

class MissingColumnError(HintRatingError):
    """Raised when a spreadsheet lacks a required column."""

    def __init__(self, column: str, path=None):
        self.column = column
        self.path = path
        where = f" in {path}" if path else ""
        super().__init__(f"Missing required column '{column}'{where}")

class RatingConsistencyError(HintRatingError):
    """Raised when the matching logic contradicts itself. Never recoverable."""
    pass
