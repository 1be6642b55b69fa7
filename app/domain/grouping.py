"""In-memory grouping of related rows"""

from typing import Callable, Dict, Hashable, Iterable, List, TypeVar

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


def group_by(items: Iterable[T], key: Callable[[T], K]) -> Dict[K, List[T]]:
    """
    Group items by key.
    Keys keep first-seen order and items keep input order within a group.
    """
    grouped: Dict[K, List[T]] = {}
    for item in items:
        grouped.setdefault(key(item), []).append(item)
    return grouped
