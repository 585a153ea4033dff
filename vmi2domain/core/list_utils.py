# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
"""Order-preserving list helpers."""
from __future__ import annotations

from typing import Callable, Hashable, Iterable, List, Optional, TypeVar


T = TypeVar("T")


def dedup_preserve_order(items: Iterable[T], key: Optional[Callable[[T], Hashable]] = None) -> List[T]:
    """Drop repeated items, keeping the first occurrence of each.

    Args:
        items: Items to filter
        key: Identity function; defaults to the item itself (which must then be hashable)

    Returns:
        New list in first-seen order

    Example:
        >>> dedup_preserve_order(["a", "b", "a"])
        ['a', 'b']
        >>> dedup_preserve_order([("tcp", 80), ("TCP", 80)], key=lambda p: (p[0].upper(), p[1]))
        [('tcp', 80)]
    """
    seen = set()
    result: List[T] = []
    for item in items:
        k = key(item) if key is not None else item
        if k in seen:
            continue
        seen.add(k)
        result.append(item)
    return result


__all__ = ["dedup_preserve_order"]
