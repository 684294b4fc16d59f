from __future__ import annotations

from typing import List, Sequence, TypeVar


T = TypeVar("T")


def split_list(items: Sequence[T], size: int) -> List[List[T]]:
    """Partition items into consecutive chunks of at most `size`."""
    if size <= 0:
        raise ValueError("Batch size must be positive")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]
