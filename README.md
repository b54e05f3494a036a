# bec256

Pure-Python arithmetic over the secp256k1 curve: field elements, public and
private keys, DER signatures, RFC 6979 deterministic signing and compact
(key-recoverable) signatures. It has no runtime dependencies.

## Installation

```
pip install bec256
```

## The curve

`bec256.curve.s256()` returns the secp256k1 `KoblitzCurve`. Points are affine
`(x, y)` integer pairs, with `(0, 0)` standing for the point at infinity.

```python
from bec256.curve import s256

curve = s256()
x, y = curve.scalar_base_mult(3)           # scalar as int or big-endian bytes
assert curve.is_on_curve(x, y)
assert curve.add(*curve.double(curve.gx, curve.gy), curve.gx, curve.gy) == (x, y)
```

`scalar_mult`, `doubling_points` (G·2^i for every bit) and
`endomorphism_vectors` (the lattice vectors for the curve's λ) are also
available, along with `integer_sqrt`.

## Keys

```python
from bec256.curve import s256
from bec256.keys import priv_key_from_bytes, parse_pub_key

curve = s256()
private_scalar = bytes(31) + b"\x07"          # a made-up example scalar
priv, pub = priv_key_from_bytes(curve, private_scalar)

compressed = pub.serialise_compressed()      # 33 bytes
uncompressed = pub.serialise_uncompressed()  # 65 bytes
hybrid = pub.serialise_hybrid()              # 65 bytes
assert parse_pub_key(compressed, curve).is_equal(pub)
assert priv.serialise() == private_scalar
```

`new_private_key(curve)` draws a random key with `secrets`.
`parse_pub_key` accepts the compressed, uncompressed and hybrid encodings and
raises `ValueError` for anything malformed or off the curve.
`is_compressed_pub_key` checks the encoding without parsing it, and
`decompress_point` recovers a y coordinate from x and its parity.

## Signatures

```python
import hashlib
from bec256.signature import parse_der_signature

digest = hashlib.sha256(b"sample").digest()
sig = priv.sign(digest)            # RFC 6979 nonce, low S
der = sig.serialise()
assert sig.verify(digest, pub)
assert parse_der_signature(der, curve).is_equal(sig)
```

`parse_signature` is the more lenient BER variant: it skips the checks for
negative-looking or over-padded integers. Both raise `ValueError` with a
description of what is wrong. `Signature.serialise` always emits the low-S
form. `nonce_rfc6979`, `sign_rfc6979` and `hash_to_int` are exposed as well.

For recoverable signatures:

```python
from bec256.signature import sign_compact, recover_compact

compact = sign_compact(curve, priv, digest, True)
recovered, was_compressed = recover_compact(curve, compact, digest)
assert recovered.is_equal(pub) and was_compressed
```

## Field elements

`bec256.field.FieldVal` is a secp256k1 field element held as ten 26-bit
words. Its methods mutate in place and return the value so they can be
chained; like the words of a fixed-width representation, results may be
denormalised until `normalise()` is called.

```python
from bec256.field import FieldVal
from bec256.fieldpow import inverse

a = FieldVal().set_hex("2a")
inv = inverse(a).normalise()
assert FieldVal().mul2(a, inv).normalise().equals(FieldVal().set_int(1))
```

`bec256.fieldpow.sqrt_val` returns x^((p+1)/4), a square root whenever one
exists. The word-level products live in `bec256.fieldmul.mul_words` and
`bec256.fieldsquare.square_words`.

## What it does not do

This is a library only: there is no command-line tool, no key storage and no
address or script handling. The code is written for clarity rather than
speed, uses no precomputed tables, and is not constant time, so it should not
be used where timing side channels matter.

## Running the tests

```
pip install -e ".[test]"
pytest
```