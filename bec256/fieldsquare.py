"""Squaring of secp256k1 field words held in base 2**26.

Squaring needs fewer multiplications than a general product, because every
cross term a[i] * a[j] with i != j appears twice.  The twenty base-2**26
terms of the square are reduced modulo the secp256k1 prime in the same way
as a general product.
"""

from __future__ import annotations

from collections.abc import Sequence

from bec256.fieldmul import (
    FIELD_BASE,
    FIELD_BASE_MASK,
    FIELD_WORDS,
    PRODUCT_TERMS,
    reduce_terms,
)

_UINT64_MASK = 0xFFFFFFFFFFFFFFFF


def _square_term(a: Sequence[int], k: int) -> int:
    """Return the sum of a[i] * a[j] over all i + j == k."""
    lo = max(0, k - (FIELD_WORDS - 1))
    total = sum(2 * a[i] * a[k - i] for i in range(lo, (k + 1) // 2))
    if k % 2 == 0:
        half = k // 2
        total += a[half] * a[half]
    return total


def square_words(a: Sequence[int]) -> list[int]:
    """Square a ten-word field value and reduce the result.

    The input must have a magnitude of at most 8 for the result to be
    correct.  The result has magnitude 1 but may be denormalised.
    """
    if len(a) != FIELD_WORDS:
        raise ValueError(f"field values must have {FIELD_WORDS} words")

    terms = []
    m = 0
    for k in range(PRODUCT_TERMS - 1):
        m = ((m >> FIELD_BASE) + _square_term(a, k)) & _UINT64_MASK
        terms.append(m & FIELD_BASE_MASK)
    terms.append(m >> FIELD_BASE)
    return reduce_terms(terms)