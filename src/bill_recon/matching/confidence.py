"""Score to confidence tier mapping."""

from ..models.transaction import Confidence

HIGH_CONFIDENCE_SCORE = 70
MEDIUM_CONFIDENCE_SCORE = 50


def classify(score: float) -> Confidence:
    """Map a match score to its confidence tier."""
    if score >= HIGH_CONFIDENCE_SCORE:
        return Confidence.HIGH
    if score >= MEDIUM_CONFIDENCE_SCORE:
        return Confidence.MEDIUM
    # Only reachable when min_match_score is lowered below the medium floor
    return Confidence.LOW
