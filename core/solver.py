from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence

from crypto.errors import InvalidParameter

log = logging.getLogger(__name__)


# Greedy solve for a superincreasing weight sequence; returns the 0/1 mask.
# Assumes target is reachable - if it isn't, the mask is simply wrong.
def solve_superincreasing(weights: Sequence[int], target: int) -> List[int]:
    mask = [0] * len(weights)
    remaining = sum(weights)
    for i in reversed(range(len(weights))):  # largest weight first
        if target == 0:
            break
        last = weights[i]
        remaining -= last  # now the sum of everything below index i
        if target > remaining:  # smaller weights can't cover target alone
            mask[i] = 1
            target -= last
    return mask


def is_superincreasing(weights: Sequence[int]) -> bool:
    total = 0
    for i, w in enumerate(weights):
        if i > 0 and w <= total:
            return False
        total += w
    return True


# Every inclusion mask over `length` indices, the mask for i being i's binary digits (MSB first)
def generate_index_masks(length: int) -> List[List[int]]:
    masks = []
    for i in range(1 << length):
        masks.append([(i >> (length - 1 - j)) & 1 for j in range(length)])
    return masks


def sum_with_mask(weights: Sequence[int], mask: Sequence[int]) -> int:
    if len(weights) != len(mask):
        raise InvalidParameter("weights and mask must have equal lengths")
    return sum(w * m for w, m in zip(weights, mask))


# sum -> mask; when several masks share a sum only the last one is kept
def _unique_sums(weights: Sequence[int]) -> Dict[int, List[int]]:
    sums = {}
    for mask in generate_index_masks(len(weights)):
        sums[sum_with_mask(weights, mask)] = mask
    return sums


def _construct_solution(weights: Sequence[int], left_mask: List[int], right_mask: List[int]) -> List[int]:
    return [w for w, m in zip(weights, left_mask + right_mask) if m]


def solve_subset_sum(weights: Sequence[int], target: int) -> Optional[List[int]]:
    """
    Meet-in-the-middle search for a subset of `weights` summing to `target`.

    Both halves are enumerated exhaustively, so time and memory grow as
    2^(n/2): fine for a couple of dozen weights, hopeless beyond that.
    Returns the chosen weight values in index order, or None when no subset
    works. With several solutions, which one comes back is arbitrary.
    """
    mid = len(weights) // 2
    left, right = weights[:mid], weights[mid:]

    left_sums = _unique_sums(left)
    right_sums = _unique_sums(right)
    log.debug("meet-in-the-middle: %d left sums, %d right sums", len(left_sums), len(right_sums))

    for s, left_mask in left_sums.items():
        right_mask = right_sums.get(target - s)
        if right_mask is not None:
            return _construct_solution(weights, left_mask, right_mask)
    return None


# Pick the cheap greedy path for superincreasing weights, brute force otherwise
def solve_knapsack(weights: Sequence[int], target: int) -> Optional[List[int]]:
    if is_superincreasing(weights):
        mask = solve_superincreasing(weights, target)
        if sum_with_mask(weights, mask) != target:
            return None
        return [w for w, m in zip(weights, mask) if m]
    return solve_subset_sum(weights, target)
