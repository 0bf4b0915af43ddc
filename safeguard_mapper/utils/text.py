"""
Keyword matching helpers shared by the rule engines.
All matching is case-insensitive substring matching.
"""

from __future__ import annotations

from typing import Iterable


def matched_terms(text: str, terms: Iterable[str]) -> list[str]:
    """Return the terms that occur in text, in the order given."""
    text_lower = text.lower()
    return [t for t in terms if t.lower() in text_lower]


def coverage_ratio(text: str, terms: Iterable[str]) -> float:
    """Fraction of terms present in text (0.0 for an empty term list)."""
    terms = list(terms)
    if not terms:
        return 0.0
    return len(matched_terms(text, terms)) / len(terms)
