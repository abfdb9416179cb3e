"""
Item code matching — widens a lot search beyond exact identity.

A demand for "P030105" must also find lots stored as "P030105_B" (a
revision suffix), but a short code like "P0301" must not swallow every
"P0301xx" lot. The rule:

    - exact match (after trim + upper) → match
    - one code is a prefix of the other AND the shorter one has at least
      MIN_PREFIX_MATCH_LENGTH characters → match
    - otherwise → no match

Allocation and the stock-sufficiency checks both go through this module.
"""

from lotman.conf import lotman_settings


def normalize_code(code: str | None) -> str:
    """Trim and upper-case an item code."""
    return (code or '').strip().upper()


def codes_match(demand_code: str | None, lot_code: str | None,
                min_prefix: int | None = None) -> bool:
    """Fuzzy equality between a demand item code and a lot's item code."""
    demand = normalize_code(demand_code)
    stored = normalize_code(lot_code)

    if not demand or not stored:
        return False
    if demand == stored:
        return True

    if min_prefix is None:
        min_prefix = lotman_settings.MIN_PREFIX_MATCH_LENGTH

    shorter, longer = sorted((demand, stored), key=len)
    return len(shorter) >= min_prefix and longer.startswith(shorter)


def search_prefix(code: str | None, min_prefix: int | None = None) -> tuple[str, bool]:
    """
    Store-side narrowing for a code.

    Returns (value, is_prefix): every lot that can match `code` has an
    item code starting with `value` when is_prefix is True, or equal to
    `value` otherwise. Callers refine candidates with codes_match().
    """
    if min_prefix is None:
        min_prefix = lotman_settings.MIN_PREFIX_MATCH_LENGTH

    normalized = normalize_code(code)
    if len(normalized) >= min_prefix:
        return normalized[:min_prefix], True
    return normalized, False
