"""Fuzzy header matching for exported files."""
from typing import Dict, List, Optional, Sequence

from rapidfuzz import fuzz


def _normalize(header: str) -> str:
    return str(header).strip().upper().replace(" ", "_").replace("-", "_")


def find_header_match(
    aliases: Sequence[str],
    candidate_headers: List[str],
    threshold: float = 80.0
) -> Optional[str]:
    """
    Find the header that best matches any of the accepted aliases.

    Args:
        aliases: Accepted names for one field, preferred name first
        candidate_headers: Header names from the file
        threshold: Minimum similarity score (0-100)

    Returns:
        Best matching header name or None if below threshold
    """
    best_match = None
    best_score = 0.0

    for header in candidate_headers:
        for alias in aliases:
            score = fuzz.ratio(_normalize(alias), _normalize(header))
            if score > best_score:
                best_score = score
                best_match = header

    if best_score >= threshold:
        return best_match
    return None


def map_headers(
    expected_headers: Dict[str, Sequence[str]],
    actual_headers: List[str],
    threshold: float = 80.0
) -> Dict[str, Optional[str]]:
    """
    Map canonical field names to the headers actually present in a file.

    Exact (normalized) matches are claimed first so a fuzzy match can never
    steal a header that another field names exactly.

    Args:
        expected_headers: Canonical name -> accepted header aliases
        actual_headers: Header names from the file
        threshold: Minimum similarity score for fuzzy matching

    Returns:
        Canonical name -> actual header (None when not found)
    """
    mapping: Dict[str, Optional[str]] = {}
    used_headers = set()

    # First pass: exact matches after normalization
    for canonical, aliases in expected_headers.items():
        wanted = {_normalize(alias) for alias in aliases}
        for actual in actual_headers:
            if _normalize(actual) in wanted and actual not in used_headers:
                mapping[canonical] = actual
                used_headers.add(actual)
                break

    # Second pass: fuzzy matches against the headers nobody claimed
    for canonical, aliases in expected_headers.items():
        if canonical in mapping:
            continue
        remaining = [h for h in actual_headers if h not in used_headers]
        match = find_header_match(aliases, remaining, threshold)
        mapping[canonical] = match
        if match:
            used_headers.add(match)

    return mapping
