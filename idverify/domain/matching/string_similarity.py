"""
Domain Service: String Similarity

Edit-distance similarity between two already-normalized strings.
"""

from Levenshtein import distance as levenshtein_distance


def levenshtein(a: str, b: str) -> int:
    """Minimum number of single-character insertions, deletions or substitutions."""
    return levenshtein_distance(a, b)


def similarity(a: str, b: str) -> float:
    """
    Percentage similarity derived from Levenshtein distance.

    similarity = 100 * (max_len - distance) / max_len, clamped to [0, 100].
    Two empty strings are identical and score 100.

    Args:
        a: First string (compared as-is)
        b: Second string (compared as-is)

    Returns:
        Similarity in the closed range [0.0, 100.0]
    """
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 100.0

    score = 100.0 * (max_len - levenshtein(a, b)) / max_len
    return max(0.0, min(100.0, score))
