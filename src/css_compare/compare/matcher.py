"""Pair elements from two documents by identity key."""

import structlog

from ..models import MatchResult, ScrapedElement

logger = structlog.get_logger()


def match_elements(
    left_elements: list[ScrapedElement],
    right_elements: list[ScrapedElement],
) -> MatchResult:
    """
    Match left and right elements by ``key`` equality.

    Only one right element is kept per key (the last one seen), so every
    left element sharing that key is paired with the same right element.
    Keys repeated on the right are reported in ``duplicate_keys`` but do not
    change the pairing.

    Args:
        left_elements: Elements scraped from the expected page.
        right_elements: Elements scraped from the actual page.

    Returns:
        MatchResult where every left element is either matched or deleted,
        and every right element is either matched or added.
    """
    right_by_key: dict[str, ScrapedElement] = {}
    duplicate_keys: list[str] = []
    seen_duplicates: set[str] = set()
    for element in right_elements:
        if element.key in right_by_key and element.key not in seen_duplicates:
            seen_duplicates.add(element.key)
            duplicate_keys.append(element.key)
        right_by_key[element.key] = element

    result = MatchResult(duplicate_keys=duplicate_keys)
    consumed: set[str] = set()

    for left in left_elements:
        right = right_by_key.get(left.key)
        if right is not None:
            consumed.add(left.key)
            result.matched.append((left, right))
        else:
            result.deleted.append(left)

    result.added = [el for el in right_elements if el.key not in consumed]

    if duplicate_keys:
        logger.debug("Duplicate identity keys on right side", count=len(duplicate_keys))

    return result
