"""
Domain: Name Matching

Levenshtein-based similarity and the confidence/threshold policy that
turns a returned identity record into an accept, review or reject decision.
"""

from .string_similarity import similarity, levenshtein
from .name_matcher import NameMatcher, MatchThresholds, normalize_name

__all__ = [
    "similarity",
    "levenshtein",
    "NameMatcher",
    "MatchThresholds",
    "normalize_name",
]
