"""
Result post-processing: deduplication and ranking of generated items.

Both functions are pure and return new lists.
"""

from typing import List, Set, Tuple, TypeVar

from recommender.schemas.recommendations import Recommendation

R = TypeVar("R", bound=Recommendation)


def remove_duplicates(items: List[R]) -> List[R]:
    """
    Drop repeated items, keeping the first occurrence.

    Two items are the same when their titles and creators match
    case-insensitively. Surviving items keep their relative order.
    """
    seen: Set[Tuple[str, str]] = set()
    unique: List[R] = []
    for item in items:
        key = (item.title.lower(), (item.creator_name or "").lower())
        if key in seen:
            continue
        seen.add(key)
        unique.append(item)
    return unique


def sort_by_confidence(items: List[R]) -> List[R]:
    """Highest confidence first; ties keep their original order."""
    return sorted(items, key=lambda item: item.confidence, reverse=True)
