# hintrating/__init__.py
"""
hintrating: evaluates generated "next edit" programming hints against a gold
standard of human-tutor hints.

Generated hint outcomes and tutor hints are both program-state trees. After
normalizing fresh literal values and pruning incidental nodes, each outcome is
rated as a Full, Partial or no match for the tutor hints of its request, and
the verdicts are aggregated into weighted validity and priority scores.
"""

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
