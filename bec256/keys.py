"""secp256k1 private and public keys and their serialised forms."""

from __future__ import annotations

import secrets
from dataclasses import dataclass

from bec256.curve import KoblitzCurve
from bec256.field import FieldVal
from bec256.fieldpow import sqrt_val

PRIV_KEY_BYTES_LEN = 32
PUB_KEY_BYTES_LEN_COMPRESSED = 33
PUB_KEY_BYTES_LEN_UNCOMPRESSED = 65
PUB_KEY_BYTES_LEN_HYBRID = 65

PUBKEY_COMPRESSED = 0x02  # y bit + x coordinate
PUBKEY_UNCOMPRESSED = 0x04  # x coordinate + y coordinate
PUBKEY_HYBRID = 0x06  # y bit + x coordinate + y coordinate


def _padded(value: int, size: int) -> bytes:
    """Big-endian bytes of value, left-padded with zeros to size."""
    raw = value.to_bytes((value.bit_length() + 7) // 8, "big")
    return raw.rjust(size, b"\x00")


@dataclass(frozen=True)
class PublicKey:
    """A point on a Koblitz curve used as a public key."""

    curve: KoblitzCurve
    x: int
    y: int

    def serialise_uncompressed(self) -> bytes:
        """Serialise in the 65-byte uncompressed format."""
        return bytes([PUBKEY_UNCOMPRESSED]) + _padded(self.x, 32) + _padded(self.y, 32)

    def serialise_compressed(self) -> bytes:
        """Serialise in the 33-byte compressed format."""
        return bytes([PUBKEY_COMPRESSED | (self.y & 1)]) + _padded(self.x, 32)

    def serialise_hybrid(self) -> bytes:
        """Serialise in the 65-byte hybrid format."""
        prefix = bytes([PUBKEY_HYBRID | (self.y & 1)])
        return prefix + _padded(self.x, 32) + _padded(self.y, 32)

    def is_equal(self, other: PublicKey) -> bool:
        """Whether both keys have the same coordinates."""
        return self.x == other.x and self.y == other.y


@dataclass(frozen=True)
class PrivateKey:
    """A private scalar together with its public key."""

    curve: KoblitzCurve
    d: int
    public_key: PublicKey

    @property
    def x(self) -> int:
        return self.public_key.x

    @property
    def y(self) -> int:
        return self.public_key.y

    def pub_key(self) -> PublicKey:
        """Return the public key of this private key."""
        return self.public_key

    def sign(self, hash: bytes):
        """Return a deterministic, low-S RFC 6979 signature of ``hash``."""
        from bec256.signature import sign_rfc6979

        return sign_rfc6979(self, hash)

    def serialise(self) -> bytes:
        """Return d as 32 big-endian bytes."""
        return _padded(self.d, PRIV_KEY_BYTES_LEN)


def priv_key_from_bytes(curve: KoblitzCurve, pk: bytes) -> tuple[PrivateKey, PublicKey]:
    """Build the private and public key for a big-endian private scalar."""
    x, y = curve.scalar_base_mult(pk)
    pub = PublicKey(curve, x, y)
    return PrivateKey(curve, int.from_bytes(bytes(pk), "big"), pub), pub


def new_private_key(curve: KoblitzCurve) -> PrivateKey:
    """Generate a random private key with d in [1, n - 1]."""
    d = secrets.randbelow(curve.n - 1) + 1
    x, y = curve.scalar_base_mult(d)
    return PrivateKey(curve, d, PublicKey(curve, x, y))


def decompress_point(curve: KoblitzCurve, x: int, ybit: bool) -> int:
    """Return the y coordinate for x whose oddness matches ybit."""
    fx = FieldVal().set_byte_slice(x.to_bytes((x.bit_length() + 7) // 8, "big"))

    x3 = FieldVal().square_val(fx).mul(fx)
    x3.add(curve.field_b).normalise()

    y = sqrt_val(x3).normalise()
    if ybit != y.is_odd():
        y.negate(1).normalise()

    y2 = FieldVal().square_val(y).normalise()
    if not y2.equals(x3):
        raise ValueError("invalid square root")
    if ybit != y.is_odd():
        raise ValueError("ybit doesn't match oddness")
    return int.from_bytes(y.to_bytes(), "big")


def is_compressed_pub_key(pub_key: bytes) -> bool:
    """Whether the serialised key is in the compressed format."""
    return (
        len(pub_key) == PUB_KEY_BYTES_LEN_COMPRESSED
        and pub_key[0] & 0xFE == PUBKEY_COMPRESSED
    )


def parse_pub_key(pub_key_str: bytes, curve: KoblitzCurve) -> PublicKey:
    """Parse a compressed, uncompressed or hybrid public key and validate it."""
    if len(pub_key_str) == 0:
        raise ValueError("pubkey string is empty")

    first = pub_key_str[0]
    ybit = first & 0x1 == 0x1
    key_format = first & 0xFE

    if len(pub_key_str) == PUB_KEY_BYTES_LEN_UNCOMPRESSED:
        if key_format not in (PUBKEY_UNCOMPRESSED, PUBKEY_HYBRID):
            raise ValueError(f"invalid magic in pubkey str: {first}")
        x = int.from_bytes(pub_key_str[1:33], "big")
        y = int.from_bytes(pub_key_str[33:], "big")
        if key_format == PUBKEY_HYBRID and ybit != (y & 1 == 1):
            raise ValueError("ybit doesn't match oddness")
        if x >= curve.p:
            raise ValueError("pubkey X parameter is >= to P")
        if y >= curve.p:
            raise ValueError("pubkey Y parameter is >= to P")
        if not curve.is_on_curve(x, y):
            raise ValueError("pubkey isn't on secp256k1 curve")
        return PublicKey(curve, x, y)

    if len(pub_key_str) == PUB_KEY_BYTES_LEN_COMPRESSED:
        if key_format != PUBKEY_COMPRESSED:
            raise ValueError(f"invalid magic in compressed pubkey string: {first}")
        x = int.from_bytes(pub_key_str[1:33], "big")
        return PublicKey(curve, x, decompress_point(curve, x, ybit))

    raise ValueError(f"invalid pub key length {len(pub_key_str)}")