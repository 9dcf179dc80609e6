"""
Domain Service: Name Matcher

Normalizes claimed and returned names, scores them with Levenshtein
similarity and maps the resulting confidence onto a verification decision.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .string_similarity import similarity as raw_similarity
from ..verification.entities import VerificationStatus

_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: Optional[str]) -> str:
    """Trim, lowercase and collapse internal whitespace runs to one space."""
    if not name:
        return ""
    return _WHITESPACE.sub(" ", name.strip().lower())


@dataclass(frozen=True)
class MatchThresholds:
    """
    Decision thresholds on the 0-100 confidence scale.

    confidence >= accept           -> VERIFIED
    review <= confidence < accept  -> NEEDS_REVIEW
    confidence < review            -> REJECTED
    """

    accept: int = 90
    review: int = 70

    def __post_init__(self):
        if not 0 <= self.review <= self.accept <= 100:
            raise ValueError(
                f"Thresholds must satisfy 0 <= review <= accept <= 100, "
                f"got review={self.review}, accept={self.accept}"
            )

    @classmethod
    def from_config(cls, policy_config: Dict[str, Any]) -> "MatchThresholds":
        return cls(
            accept=int(policy_config.get("accept_threshold", cls.accept)),
            review=int(policy_config.get("review_threshold", cls.review)),
        )

    def decide(self, confidence: int) -> VerificationStatus:
        if confidence >= self.accept:
            return VerificationStatus.VERIFIED
        if confidence >= self.review:
            return VerificationStatus.NEEDS_REVIEW
        return VerificationStatus.REJECTED


class NameMatcher:
    """
    Domain service for claimed-versus-returned name comparison.

    No transliteration or phonetic matching is applied: two names are
    equal only if every character matches after normalization.
    """

    def __init__(self, thresholds: Optional[MatchThresholds] = None):
        self.thresholds = thresholds or MatchThresholds()

    @staticmethod
    def full_name(first_name: Optional[str], last_name: Optional[str]) -> str:
        return f"{first_name or ''} {last_name or ''}"

    def similarity(self, a: str, b: str) -> float:
        return raw_similarity(normalize_name(a), normalize_name(b))

    def confidence(self, claimed_full_name: str, returned_full_name: str) -> int:
        """
        Integer confidence that two full names refer to the same person.

        Rounded half-up so near-exact matches are not under-scored.
        """
        return int(self.similarity(claimed_full_name, returned_full_name) + 0.5)

    def score(
        self,
        claimed_first_name: Optional[str],
        claimed_last_name: Optional[str],
        returned_first_name: Optional[str],
        returned_last_name: Optional[str],
    ) -> int:
        return self.confidence(
            self.full_name(claimed_first_name, claimed_last_name),
            self.full_name(returned_first_name, returned_last_name),
        )

    def decide(self, confidence: int) -> VerificationStatus:
        return self.thresholds.decide(confidence)

    @staticmethod
    def is_exact(confidence: int) -> bool:
        return confidence == 100
