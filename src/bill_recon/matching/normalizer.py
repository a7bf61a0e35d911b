"""Free-text normalization and string comparison helpers."""

import re

_WHITESPACE = re.compile(r"\s+")


def normalize(text: str) -> str:
    """Lower-case, trim and collapse whitespace runs to single spaces."""
    return _WHITESPACE.sub(" ", text.lower().strip())


def string_matches(first: str, second: str) -> tuple[bool, bool]:
    """
    Compare two strings after normalization.

    Returns:
        Tuple of (exact, partial) where partial means either string
        contains the other. Strings that normalize to nothing never match.
    """
    a = normalize(first)
    b = normalize(second)
    if not a or not b:
        return False, False
    return a == b, a in b or b in a


def token_overlap(first: str, second: str) -> float:
    """
    Share of whitespace tokens the two strings have in common.

    Common distinct tokens divided by the larger distinct-token count,
    so 1.0 means both strings use exactly the same words.
    """
    tokens_a = set(normalize(first).split())
    tokens_b = set(normalize(second).split())
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / max(len(tokens_a), len(tokens_b))
