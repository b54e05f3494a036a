"""ECDSA signatures over secp256k1: DER encoding, RFC 6979 signing and
public key recovery from compact signatures.
"""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass

from bec256.curve import KoblitzCurve, s256
from bec256.keys import PrivateKey, PublicKey, decompress_point

# The shortest DER signature: both R and S one byte long.
MIN_SIG_LEN = 8


class _PaddingProblem:
    NEGATIVE = "negative"
    EXCESSIVELY_PADDED = "excessively padded"


@dataclass(frozen=True)
class Signature:
    """An ECDSA signature made of the scalars r and s."""

    r: int
    s: int

    def serialise(self) -> bytes:
        """Return the signature in strict DER form, with S made low.

        The hash type used in script signatures is not appended.
        """
        curve = s256()
        sig_s = self.s
        if sig_s > curve.half_order:
            sig_s = curve.n - sig_s
        rb = _canonicalize_int(self.r)
        sb = _canonicalize_int(sig_s)
        length = 6 + len(rb) + len(sb)
        return (
            bytes([0x30, length - 2, 0x02, len(rb)])
            + rb
            + bytes([0x02, len(sb)])
            + sb
        )

    def verify(self, hash: bytes, pub_key: PublicKey) -> bool:
        """Whether this is a valid signature of ``hash`` by ``pub_key``."""
        curve = pub_key.curve
        n = curve.n
        if not (0 < self.r < n and 0 < self.s < n):
            return False
        e = hash_to_int(hash, curve)
        w = pow(self.s, -1, n)
        u1 = e * w % n
        u2 = self.r * w % n
        x1, y1 = curve.scalar_base_mult(u1)
        x2, y2 = curve.scalar_mult(pub_key.x, pub_key.y, u2)
        x, y = curve.add(x1, y1, x2, y2)
        if x == 0 and y == 0:
            return False
        return x % n == self.r

    def is_equal(self, other: Signature) -> bool:
        """Whether both signatures have the same R and S."""
        return self.r == other.r and self.s == other.s


def _canonicalize_int(value: int) -> bytes:
    """Big-endian bytes of |value| that cannot read as negative in DER."""
    magnitude = abs(value)
    b = magnitude.to_bytes((magnitude.bit_length() + 7) // 8, "big")
    if not b:
        b = b"\x00"
    if b[0] & 0x80:
        b = b"\x00" + b
    return b


def _canonical_padding(b: bytes) -> str | None:
    """Report whether an encoded integer looks negative or is over-padded."""
    if b[0] & 0x80 == 0x80:
        return _PaddingProblem.NEGATIVE
    if len(b) > 1 and b[0] == 0x00 and b[1] & 0x80 != 0x80:
        return _PaddingProblem.EXCESSIVELY_PADDED
    return None


def _check_padding(b: bytes, label: str) -> None:
    problem = _canonical_padding(b)
    if problem == _PaddingProblem.NEGATIVE:
        raise ValueError(f"signature {label} is negative")
    if problem == _PaddingProblem.EXCESSIVELY_PADDED:
        raise ValueError(f"signature {label} is excessively padded")


def _parse_sig(sig_str: bytes, curve: KoblitzCurve, der: bool) -> Signature:
    # 0x30 <length> 0x02 <length R> <R> 0x02 <length S> <S>
    if len(sig_str) < MIN_SIG_LEN:
        raise ValueError("malformed signature: too short")
    if sig_str[0] != 0x30:
        raise ValueError("malformed signature: no header magic")
    total = (sig_str[1] + 2) & 0xFF
    if total > len(sig_str) or total < MIN_SIG_LEN:
        raise ValueError("malformed signature: bad length")
    sig_str = bytes(sig_str[:total])

    index = 2
    if sig_str[index] != 0x02:
        raise ValueError("malformed signature: no 1st int marker")
    index += 1
    r_len = sig_str[index]
    index += 1
    if r_len <= 0 or r_len > len(sig_str) - index - 3:
        raise ValueError("malformed signature: bogus R length")
    r_bytes = sig_str[index:index + r_len]
    if der:
        _check_padding(r_bytes, "R")
    r = int.from_bytes(r_bytes, "big")
    index += r_len

    if sig_str[index] != 0x02:
        raise ValueError("malformed signature: no 2nd int marker")
    index += 1
    s_len = sig_str[index]
    index += 1
    if s_len <= 0 or s_len > len(sig_str) - index:
        raise ValueError("malformed signature: bogus S length")
    s_bytes = sig_str[index:index + s_len]
    if der:
        _check_padding(s_bytes, "S")
    s = int.from_bytes(s_bytes, "big")
    index += s_len

    if index != len(sig_str):
        raise ValueError(
            f"malformed signature: bad final length {index} != {len(sig_str)}"
        )
    if r < 1:
        raise ValueError("signature R isn't 1 or more")
    if s < 1:
        raise ValueError("signature S isn't 1 or more")
    if r >= curve.n:
        raise ValueError("signature R is >= curve.N")
    if s >= curve.n:
        raise ValueError("signature S is >= curve.N")
    return Signature(r, s)


def parse_signature(sig_str: bytes, curve: KoblitzCurve) -> Signature:
    """Parse a BER signature with basic sanity checks."""
    return _parse_sig(sig_str, curve, False)


def parse_der_signature(sig_str: bytes, curve: KoblitzCurve) -> Signature:
    """Parse a signature in strict DER form."""
    return _parse_sig(sig_str, curve, True)


def hash_to_int(hash: bytes, curve: KoblitzCurve) -> int:
    """Turn a hash into an integer the way SEC 1 and OpenSSL do."""
    order_bits = curve.n.bit_length()
    order_bytes = (order_bits + 7) // 8
    hash = bytes(hash[:order_bytes])
    ret = int.from_bytes(hash, "big")
    excess = len(hash) * 8 - order_bits
    if excess > 0:
        ret >>= excess
    return ret


def _recover_key_from_signature(
    curve: KoblitzCurve, sig: Signature, msg: bytes, iteration: int,
    do_checks: bool,
) -> PublicKey:
    """Recover a public key as in SEC 1 section 4.1.6, step 1."""
    n = curve.n
    if sig.r >= n:
        raise ValueError("signature R is >= curve order")
    if sig.r == 0:
        raise ValueError("signature R is 0")
    if sig.s >= n:
        raise ValueError("signature S is >= curve order")
    if sig.s == 0:
        raise ValueError("signature S is 0")

    rx = n * (iteration // 2) + sig.r
    if rx >= curve.p:
        raise ValueError("calculated Rx is larger than curve P")
    ry = decompress_point(curve, rx, iteration % 2 == 1)

    if do_checks:
        nrx, nry = curve.scalar_mult(rx, ry, n)
        if nrx != 0 or nry != 0:
            raise ValueError("n*R does not equal the point at infinity")

    e = hash_to_int(msg, curve)
    invr = pow(sig.r, -1, n)
    srx, sry = curve.scalar_mult(rx, ry, invr * sig.s % n)
    minus_e = (-e) % n * invr % n
    gx, gy = curve.scalar_base_mult(minus_e)
    qx, qy = curve.add(srx, sry, gx, gy)
    return PublicKey(curve, qx, qy)


def sign_compact(
    curve: KoblitzCurve, key: PrivateKey, hash: bytes, is_compressed_key: bool
) -> bytes:
    """Produce a compact, key-recoverable signature of ``hash``.

    The format is one header byte (27 + recovery id, plus 4 for a
    compressed key) followed by R and S padded to the curve size.
    """
    sig = key.sign(hash)
    curve_len = (curve.bit_size + 7) // 8
    for i in range((curve.h + 1) * 2):
        try:
            pk = _recover_key_from_signature(curve, sig, hash, i, True)
        except ValueError:
            continue
        if pk.x == key.x and pk.y == key.y:
            header = 27 + i + (4 if is_compressed_key else 0)
            return (
                bytes([header])
                + sig.r.to_bytes(curve_len, "big")
                + sig.s.to_bytes(curve_len, "big")
            )
    raise ValueError("no valid solution for pubkey found")


def recover_compact(
    curve: KoblitzCurve, signature: bytes, hash: bytes
) -> tuple[PublicKey, bool]:
    """Recover the public key of a compact signature and its compressed flag."""
    bitlen = (curve.bit_size + 7) // 8
    if len(signature) != 1 + bitlen * 2:
        raise ValueError("invalid compact signature size")
    header = (signature[0] - 27) & 0xFF
    iteration = header & ~4 & 0xFF
    sig = Signature(
        int.from_bytes(signature[1:bitlen + 1], "big"),
        int.from_bytes(signature[bitlen + 1:], "big"),
    )
    key = _recover_key_from_signature(curve, sig, hash, iteration, False)
    return key, header & 4 == 4


def sign_rfc6979(private_key: PrivateKey, hash: bytes) -> Signature:
    """Sign deterministically per RFC 6979, with a low S per BIP 62."""
    curve = s256()
    n = curve.n
    k = nonce_rfc6979(private_key.d, hash)
    inv = pow(k, -1, n)
    r = private_key.curve.scalar_base_mult(k)[0] % n
    if r == 0:
        raise ValueError("calculated R is zero")
    e = hash_to_int(hash, private_key.curve)
    s = (private_key.d * r + e) * inv % n
    if s > curve.half_order:
        s = n - s
    if s == 0:
        raise ValueError("calculated S is zero")
    return Signature(r, s)


def _mac(key: bytes, message: bytes) -> bytes:
    return hmac.new(key, message, hashlib.sha256).digest()


def _int2octets(value: int, rolen: int) -> bytes:
    out = value.to_bytes((value.bit_length() + 7) // 8, "big")
    if len(out) < rolen:
        return out.rjust(rolen, b"\x00")
    return out[len(out) - rolen:]


def _bits2octets(data: bytes, curve: KoblitzCurve, rolen: int) -> bytes:
    z1 = hash_to_int(data, curve)
    z2 = z1 - curve.n
    return _int2octets(z1 if z2 < 0 else z2, rolen)


def nonce_rfc6979(privkey: int, hash: bytes) -> int:
    """Return the deterministic ECDSA nonce k for a key and hash (RFC 6979)."""
    curve = s256()
    q = curve.n
    qlen = q.bit_length()
    holen = hashlib.sha256().digest_size
    rolen = (qlen + 7) >> 3
    bx = _int2octets(privkey, rolen) + _bits2octets(hash, curve, rolen)

    v = b"\x01" * holen
    k = b"\x00" * holen
    k = _mac(k, v + b"\x00" + bx)
    v = _mac(k, v)
    k = _mac(k, v + b"\x01" + bx)
    v = _mac(k, v)

    while True:
        t = b""
        while len(t) * 8 < qlen:
            v = _mac(k, v)
            t += v
        secret = hash_to_int(t, curve)
        if 1 <= secret < q:
            return secret
        k = _mac(k, v + b"\x00")
        v = _mac(k, v)