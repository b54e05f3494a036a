"""Multiplication of secp256k1 field words held in base 2**26.

A field element is ten 32-bit words, each carrying 26 bits of value (22 in
the most significant word) plus overflow room. The product of two such
elements is formed as twenty base-2**26 terms. Those terms are then reduced
modulo the secp256k1 prime, which is 2**256 - 4294968273.
"""

from __future__ import annotations

from collections.abc import Sequence

FIELD_WORDS = 10
FIELD_BASE = 26
FIELD_BASE_MASK = (1 << FIELD_BASE) - 1
FIELD_MSB_BITS = 256 - FIELD_BASE * (FIELD_WORDS - 1)
FIELD_MSB_MASK = (1 << FIELD_MSB_BITS) - 1

PRODUCT_TERMS = 2 * FIELD_WORDS

_UINT32_MASK = 0xFFFFFFFF
_UINT64_MASK = 0xFFFFFFFFFFFFFFFF

# 4294968273 (= 2**256 - P) is n[0] = 977, n[1] = 64 in base 2**26.  Terms
# from t10 up begin at bit 260, so that constant is scaled by 2**4.
_C_WORD0 = 977
_C_WORD1 = 64
_C_HIGH_WORD0 = _C_WORD0 * 16
_C_HIGH_WORD1 = _C_WORD1 * 16
_C_HIGH_FULL = 4294968273 * 16


def reduce_terms(terms: Sequence[int]) -> list[int]:
    """Reduce twenty base-2**26 product terms to ten field words.

    The terms are those of a full 512-bit product, the last one holding
    whatever is left above 2**(26*19).  The result has magnitude 1 but may
    be denormalised.
    """
    if len(terms) != PRODUCT_TERMS:
        raise ValueError(
            f"expected {PRODUCT_TERMS} product terms, got {len(terms)}"
        )
    t = list(terms)

    m = (t[0] + t[10] * _C_HIGH_WORD0) & _UINT64_MASK
    low = [m & FIELD_BASE_MASK]
    for i in range(1, FIELD_WORDS - 1):
        m = (
            (m >> FIELD_BASE)
            + t[i]
            + t[i + 9] * _C_HIGH_WORD1
            + t[i + 10] * _C_HIGH_WORD0
        ) & _UINT64_MASK
        low.append(m & FIELD_BASE_MASK)
    m = (
        (m >> FIELD_BASE) + t[9] + t[18] * _C_HIGH_WORD1 + t[19] * _C_HIGH_FULL
    ) & _UINT64_MASK
    low.append(m & FIELD_MSB_MASK)
    m >>= FIELD_MSB_BITS

    # m counts how many times the value exceeds 2**256; fold it back once.
    d = (low[0] + m * _C_WORD0) & _UINT64_MASK
    word0 = d & FIELD_BASE_MASK
    d = ((d >> FIELD_BASE) + low[1] + m * _C_WORD1) & _UINT64_MASK
    word1 = d & FIELD_BASE_MASK
    word2 = (d >> FIELD_BASE) + low[2]

    words = [word0, word1, word2, *low[3:]]
    return [w & _UINT32_MASK for w in words]


def mul_words(a: Sequence[int], b: Sequence[int]) -> list[int]:
    """Multiply two ten-word field values and reduce the product.

    Each input must have a magnitude of at most 8 for the result to be
    correct.  The result has magnitude 1 but may be denormalised.
    """
    if len(a) != FIELD_WORDS or len(b) != FIELD_WORDS:
        raise ValueError(f"field values must have {FIELD_WORDS} words")

    terms = []
    m = 0
    for k in range(PRODUCT_TERMS - 1):
        lo = max(0, k - (FIELD_WORDS - 1))
        hi = min(k, FIELD_WORDS - 1)
        m = (
            (m >> FIELD_BASE)
            + sum(a[i] * b[k - i] for i in range(lo, hi + 1))
        ) & _UINT64_MASK
        terms.append(m & FIELD_BASE_MASK)
    terms.append(m >> FIELD_BASE)
    return reduce_terms(terms)