"""Fixed-precision arithmetic over the secp256k1 finite field.

Every value is held as ten 32-bit words in base 2**26, the most significant
word carrying 22 bits of value.  The spare high bits of each word let sums
and small multiples build up without carry propagation until the value is
normalised.  All arithmetic is modulo the secp256k1 prime
0xfffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffc2f.

Like the words of a machine representation, each word wraps at 2**32.
Several operations only give a correct result for a normalised value, and
none of them checks this.
"""

from __future__ import annotations

from collections.abc import Iterable

from bec256.fieldmul import (
    FIELD_BASE,
    FIELD_BASE_MASK,
    FIELD_MSB_BITS,
    FIELD_MSB_MASK,
    FIELD_WORDS,
    mul_words,
)
from bec256.fieldsquare import square_words

_UINT32_MASK = 0xFFFFFFFF
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")

# Words zero and one of the prime in the internal representation.
_PRIME_WORD_ZERO = 0x3FFFC2F
_PRIME_WORD_ONE = 0x3FFFFBF
_PRIME_WORDS = (
    _PRIME_WORD_ZERO,
    _PRIME_WORD_ONE,
    *([FIELD_BASE_MASK] * (FIELD_WORDS - 3)),
    FIELD_MSB_MASK,
)


def _decode_hex_prefix(text: str) -> bytes:
    """Decode hex two digits at a time, stopping at the first bad pair."""
    out = bytearray()
    for start in range(0, len(text) - 1, 2):
        pair = text[start:start + 2]
        if not set(pair) <= _HEX_DIGITS:
            break
        out.append(int(pair, 16))
    return bytes(out)


class FieldVal:
    """An element of the secp256k1 field in ten base-2**26 words.

    Mutating methods return the value itself so calls can be chained,
    e.g. ``FieldVal().set_int(2).mul(other)``.
    """

    __slots__ = ("words",)

    def __init__(self, words: Iterable[int] | None = None) -> None:
        if words is None:
            self.words = [0] * FIELD_WORDS
            return
        values = [w & _UINT32_MASK for w in words]
        if len(values) != FIELD_WORDS:
            raise ValueError(f"a field value has {FIELD_WORDS} words")
        self.words = values

    def __str__(self) -> str:
        return self.copy().normalise().to_bytes().hex()

    def __repr__(self) -> str:
        return f"FieldVal({str(self)})"

    def copy(self) -> FieldVal:
        """Return an independent copy of this value."""
        return FieldVal(self.words)

    def zero(self) -> FieldVal:
        """Set the value to zero."""
        self.words = [0] * FIELD_WORDS
        return self

    def set(self, val: FieldVal) -> FieldVal:
        """Set the value equal to ``val``."""
        self.words = list(val.words)
        return self

    def set_int(self, ui: int) -> FieldVal:
        """Set the value to a small native integer (truncated to 32 bits)."""
        self.zero()
        self.words[0] = ui & _UINT32_MASK
        return self

    def set_bytes(self, b: bytes) -> FieldVal:
        """Pack a 32-byte big-endian value into the field words."""
        if len(b) != 32:
            raise ValueError(f"expected 32 bytes, got {len(b)}")
        value = int.from_bytes(b, "big")
        self.words = [
            (value >> (FIELD_BASE * i)) & FIELD_BASE_MASK
            for i in range(FIELD_WORDS - 1)
        ]
        self.words.append(value >> (FIELD_BASE * (FIELD_WORDS - 1)))
        return self

    def set_byte_slice(self, b: bytes) -> FieldVal:
        """Pack a big-endian value, keeping only its first 32 bytes."""
        return self.set_bytes(bytes(b[:32]).rjust(32, b"\x00"))

    def set_hex(self, hex_string: str) -> FieldVal:
        """Set the value from big-endian hex; decoding stops at bad digits."""
        if len(hex_string) % 2:
            hex_string = "0" + hex_string
        return self.set_byte_slice(_decode_hex_prefix(hex_string))

    def _carry(self, t: list[int], m: int) -> list[int]:
        """Add m times (2**256 - P) to t and propagate carries in place."""
        t[0] = (t[0] + m * 977) & _UINT32_MASK
        t[1] = ((t[0] >> FIELD_BASE) + t[1] + (m << 6)) & _UINT32_MASK
        t[0] &= FIELD_BASE_MASK
        for i in range(2, FIELD_WORDS):
            t[i] = ((t[i - 1] >> FIELD_BASE) + t[i]) & _UINT32_MASK
            t[i - 1] &= FIELD_BASE_MASK
        return t

    def normalise(self) -> FieldVal:
        """Compact the words into range and reduce modulo the prime."""
        t = list(self.words)
        m = t[9] >> FIELD_MSB_BITS
        t[9] &= FIELD_MSB_MASK
        self._carry(t, m)

        # The value may still be >= P, or carry into bit 256.
        middle = FIELD_BASE_MASK
        for word in t[2:9]:
            middle &= word
        over_prime = (
            t[9] == FIELD_MSB_MASK
            and middle == FIELD_BASE_MASK
            and ((t[0] + 977) >> FIELD_BASE) + t[1] + 64 > FIELD_BASE_MASK
        )
        m = 1 if over_prime or (t[9] >> FIELD_MSB_BITS) != 0 else 0
        self._carry(t, m)
        t[9] &= FIELD_MSB_MASK
        self.words = t
        return self

    def to_bytes(self) -> bytes:
        """Return the value as 32 big-endian bytes; it must be normalised."""
        value = 0
        for i, word in enumerate(self.words[:-1]):
            value |= (word & FIELD_BASE_MASK) << (FIELD_BASE * i)
        value |= (self.words[-1] & FIELD_MSB_MASK) << (
            FIELD_BASE * (FIELD_WORDS - 1)
        )
        return value.to_bytes(32, "big")

    def is_zero(self) -> bool:
        """Whether every word is zero."""
        return not any(self.words)

    def is_odd(self) -> bool:
        """Whether the value is odd; it must be normalised."""
        return self.words[0] & 1 == 1

    def equals(self, val: FieldVal) -> bool:
        """Whether two normalised values are the same."""
        return self.words == val.words

    def negate_val(self, val: FieldVal, magnitude: int) -> FieldVal:
        """Set this value to -val, given the magnitude of val."""
        factor = magnitude + 1
        self.words = [
            (factor * p - w) & _UINT32_MASK
            for p, w in zip(_PRIME_WORDS, val.words)
        ]
        return self

    def negate(self, magnitude: int) -> FieldVal:
        """Negate this value, given its magnitude."""
        return self.negate_val(self, magnitude)

    def add_int(self, ui: int) -> FieldVal:
        """Add a small native integer without carry propagation."""
        self.words[0] = (self.words[0] + (ui & _UINT32_MASK)) & _UINT32_MASK
        return self

    def add(self, val: FieldVal) -> FieldVal:
        """Add val to this value without carry propagation."""
        return self.add2(self, val)

    def add2(self, val: FieldVal, val2: FieldVal) -> FieldVal:
        """Set this value to val + val2 without carry propagation."""
        self.words = [
            (a + b) & _UINT32_MASK for a, b in zip(val.words, val2.words)
        ]
        return self

    def mul_int(self, val: int) -> FieldVal:
        """Multiply every word by a small integer; words may wrap."""
        factor = val & _UINT32_MASK
        self.words = [(w * factor) & _UINT32_MASK for w in self.words]
        return self

    def mul(self, val: FieldVal) -> FieldVal:
        """Multiply this value by val; magnitudes must be at most 8."""
        return self.mul2(self, val)

    def mul2(self, val: FieldVal, val2: FieldVal) -> FieldVal:
        """Set this value to val * val2; magnitudes must be at most 8."""
        self.words = mul_words(val.words, val2.words)
        return self

    def square(self) -> FieldVal:
        """Square this value; its magnitude must be at most 8."""
        return self.square_val(self)

    def square_val(self, val: FieldVal) -> FieldVal:
        """Set this value to val squared; its magnitude must be at most 8."""
        self.words = square_words(val.words)
        return self