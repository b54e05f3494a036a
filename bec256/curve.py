"""The secp256k1 Koblitz curve: y**2 = x**3 + 7 over the secp256k1 field.

Points are given to and returned from the public methods in affine
coordinates, with ``(0, 0)`` standing for the point at infinity.  Internally
the group operations work in Jacobian coordinates to avoid an inversion per
step.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from bec256.field import FieldVal

_Jacobian = tuple[int, int, int]
_INFINITY: _Jacobian = (0, 0, 0)


def _to_int(k: bytes | int) -> int:
    """Interpret a scalar given as big-endian bytes or as an integer."""
    if isinstance(k, (bytes, bytearray, memoryview)):
        return int.from_bytes(bytes(k), "big")
    value = int(k)
    if value < 0:
        raise ValueError("scalar must not be negative")
    return value


def _int_bytes(value: int) -> bytes:
    """Minimal big-endian bytes of a non-negative integer (empty for 0)."""
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def integer_sqrt(n: int) -> int:
    """Return the floor of the square root of a non-negative integer."""
    if n < 0:
        raise ValueError("square root of a negative number")
    return math.isqrt(n)


@dataclass(frozen=True)
class KoblitzCurve:
    """A short Weierstrass curve y**2 = x**3 + b over a prime field."""

    name: str
    p: int
    n: int
    b: int
    gx: int
    gy: int
    bit_size: int
    lam: int
    h: int = 1

    @property
    def byte_size(self) -> int:
        """Size of a coordinate in bytes."""
        return self.bit_size // 8

    @property
    def half_order(self) -> int:
        """Half the group order, rounded down."""
        return self.n >> 1

    @property
    def field_b(self) -> FieldVal:
        """The curve constant b as a field value."""
        return FieldVal().set_byte_slice(_int_bytes(self.b))

    def is_on_curve(self, x: int, y: int) -> bool:
        """Whether the affine point (x, y) satisfies the curve equation."""
        return (y * y - x * x * x - self.b) % self.p == 0

    def _to_jacobian(self, x: int, y: int) -> _Jacobian:
        if x == 0 and y == 0:
            return _INFINITY
        return (x % self.p, y % self.p, 1)

    def _to_affine(self, point: _Jacobian) -> tuple[int, int]:
        x, y, z = point
        p = self.p
        if z % p == 0:
            return (0, 0)
        z_inv = pow(z, -1, p)
        z_inv2 = z_inv * z_inv % p
        return (x * z_inv2 % p, y * z_inv2 * z_inv % p)

    def _double_jacobian(self, point: _Jacobian) -> _Jacobian:
        x, y, z = point
        p = self.p
        if z % p == 0 or y % p == 0:
            return _INFINITY
        a = x * x % p
        b = y * y % p
        c = b * b % p
        d = 2 * ((x + b) ** 2 - a - c) % p
        e = 3 * a % p
        f = e * e % p
        x3 = (f - 2 * d) % p
        y3 = (e * (d - x3) - 8 * c) % p
        z3 = 2 * y * z % p
        return (x3, y3, z3)

    def _add_jacobian(self, p1: _Jacobian, p2: _Jacobian) -> _Jacobian:
        x1, y1, z1 = p1
        x2, y2, z2 = p2
        p = self.p
        if z1 % p == 0:
            return p2
        if z2 % p == 0:
            return p1
        z1z1 = z1 * z1 % p
        z2z2 = z2 * z2 % p
        u1 = x1 * z2z2 % p
        u2 = x2 * z1z1 % p
        s1 = y1 * z2 * z2z2 % p
        s2 = y2 * z1 * z1z1 % p
        if u1 == u2:
            if s1 != s2:
                return _INFINITY
            return self._double_jacobian(p1)
        h = (u2 - u1) % p
        i = (2 * h) ** 2 % p
        j = h * i % p
        r = 2 * (s2 - s1) % p
        v = u1 * i % p
        x3 = (r * r - j - 2 * v) % p
        y3 = (r * (v - x3) - 2 * s1 * j) % p
        z3 = ((z1 + z2) ** 2 - z1z1 - z2z2) * h % p
        return (x3, y3, z3)

    def add(self, x1: int, y1: int, x2: int, y2: int) -> tuple[int, int]:
        """Return the sum of two affine points."""
        return self._to_affine(
            self._add_jacobian(self._to_jacobian(x1, y1), self._to_jacobian(x2, y2))
        )

    def double(self, x: int, y: int) -> tuple[int, int]:
        """Return twice the affine point (x, y)."""
        return self._to_affine(self._double_jacobian(self._to_jacobian(x, y)))

    def _scalar_mult_jacobian(self, point: _Jacobian, k: int) -> _Jacobian:
        result = _INFINITY
        for i in reversed(range(k.bit_length())):
            result = self._double_jacobian(result)
            if (k >> i) & 1:
                result = self._add_jacobian(result, point)
        return result

    def scalar_mult(self, bx: int, by: int, k: bytes | int) -> tuple[int, int]:
        """Return k * (bx, by); k is big-endian bytes or an integer."""
        point = self._to_jacobian(bx, by)
        return self._to_affine(self._scalar_mult_jacobian(point, _to_int(k)))

    def scalar_base_mult(self, k: bytes | int) -> tuple[int, int]:
        """Return k * G; k is big-endian bytes or an integer."""
        return self.scalar_mult(self.gx, self.gy, k)

    def doubling_points(self) -> list[tuple[int, int]]:
        """Return G * 2**i for i in 0 .. bit_size - 1, as affine points."""
        points = []
        current = self._to_jacobian(self.gx, self.gy)
        for _ in range(self.bit_size):
            points.append(self._to_affine(current))
            current = self._double_jacobian(current)
        return points

    def endomorphism_vectors(self) -> tuple[int, int, int, int]:
        """Return (a1, b1, a2, b2), the short lattice vectors for lambda.

        These are the linearly independent vectors used to split a scalar k
        into k1 + k2 * lambda (mod n), found with the extended Euclidean
        algorithm on n and lambda.
        """
        n_sqrt = integer_sqrt(self.n)
        u, v = self.n, self.lam
        x1, y1 = 1, 0
        x2, y2 = 0, 1
        ri = ti = 0
        a1 = b1 = a2 = b2 = 0
        found = one_more = False
        while u != 0:
            q = v // u
            r = v - q * u
            s = x2 - q * x1
            t = y2 - q * y1
            v, u = u, r
            x2, x1 = x1, s
            y2, y1 = y1, t

            if not found and r < n_sqrt:
                # r[i+1] and t[i+1] give the first vector.
                a1, b1 = r, -t
                found = one_more = True
                continue
            if one_more:
                # Pick the shorter of (r[i], t[i]) and (r[i+2], t[i+2]).
                if ri * ri + ti * ti <= r * r + t * t:
                    a2, b2 = ri, -ti
                else:
                    a2, b2 = r, -t
                break
            ri, ti = r, t
        return a1, b1, a2, b2


_SECP256K1 = KoblitzCurve(
    name="secp256k1",
    p=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F,
    n=0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
    b=7,
    gx=0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
    gy=0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
    bit_size=256,
    lam=0x5363AD4CC05C30E0A5261C028812645A122E22EA20816678DF02967C1B23BD72,
)


def s256() -> KoblitzCurve:
    """Return the secp256k1 curve."""
    return _SECP256K1