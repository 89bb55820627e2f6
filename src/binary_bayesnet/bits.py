"""
Binary Bayes Net — Bit Indexing
===============================
Pure functions mapping ordered sets of binary variables to and from integer
bit patterns.

Layout convention:
    A table over k variables has 2^k entries. Variables are held in
    *descending* order of the global variable ordering, and the variable at
    position i of that sequence owns bit i of the table index. Read as a
    binary number, an index therefore lists the assignment of the smallest
    variable first (most-significant bit):

        variables = ('I', 'C', 'B')      # stored order, bit 0 = I
        index 0b101 -> B=True, C=False, I=True

These helpers let product and marginalisation work on the local tables only,
never on a joint table over the whole network.

Author: Binary Bayes Net contributors
License: MIT
"""

from typing import Hashable, List, Sequence, Union

import numpy as np

Index = Union[int, np.ndarray]


def overlap_mask(subset: Sequence[Hashable], superset: Sequence[Hashable]) -> int:
    """Bit mask marking where the members of ``subset`` sit in ``superset``.

    Both sequences must be ordered the same way (descending global order)
    and every element of ``subset`` must occur in ``superset``. The check is
    a single forward scan with two pointers, so the precondition is NOT
    verified: a subset out of order, or with a member missing from the
    superset, produces a meaningless mask.

    Example:
        >>> overlap_mask(['M', 'B'], ['S', 'M', 'I', 'C', 'B'])
        18      # 0b10010
    """
    mask = 0
    if not subset:
        return mask

    j = 0
    for i, var in enumerate(superset):
        if subset[j] == var:
            mask |= 1 << i
            j += 1
            if j == len(subset):
                break
    return mask


def index_in_factor(new_index: Index, mask: int) -> Index:
    """Compact the bits of ``new_index`` selected by ``mask`` into a dense index.

    The selected bits keep their relative order: the lowest selected bit of
    ``new_index`` becomes bit 0 of the result, the next one bit 1, and so on.
    ``new_index`` may be a Python int or a numpy integer array (evaluated
    elementwise).

    Example:
        >>> index_in_factor(0b10101010101, 0b01001011010)
        12      # 0b01100
    """
    out = 0
    j = 0
    i = 0
    while mask >> i:
        if mask & (1 << i):
            out = out | (((new_index >> i) & 1) << j)
            j += 1
        i += 1
    return out


def union_ordered(vars_a: Sequence[Hashable], vars_b: Sequence[Hashable]) -> List[Hashable]:
    """Merge two descending-ordered variable sequences into their ordered union.

    Linear-time merge walk; variables common to both appear once.
    """
    out = []
    a = b = 0
    while a < len(vars_a) and b < len(vars_b):
        va, vb = vars_a[a], vars_b[b]
        if va > vb:
            out.append(va)
            a += 1
        elif va < vb:
            out.append(vb)
            b += 1
        else:
            out.append(va)
            a += 1
            b += 1

    out.extend(vars_a[a:])
    out.extend(vars_b[b:])
    return out


def assignment_to_index(assignment: Sequence[bool]) -> int:
    """Index of an assignment listed smallest-variable first (MSB first)."""
    index = 0
    for value in assignment:
        index = (index << 1) | (1 if value else 0)
    return index


def index_to_assignment(index: int, n_vars: int) -> List[bool]:
    """Inverse of :func:`assignment_to_index`."""
    return [bool((index >> (n_vars - 1 - i)) & 1) for i in range(n_vars)]
