import pytest

from bec256.curve import s256
from bec256.keys import (
    PUBKEY_COMPRESSED,
    PUBKEY_HYBRID,
    PUBKEY_UNCOMPRESSED,
    decompress_point,
    is_compressed_pub_key,
    new_private_key,
    parse_pub_key,
    priv_key_from_bytes,
)

X_HEX = "11db93e1dcdb8a016b49840f8c53bc1eb68a382e97b1482ecad7b148a6909a5c"
Y_HEX = "b2e0eaddfb84ccf9744464f82e160bfa9b8b64f9d4c03f999b8643f656b412a3"
C0_HEX = "ce0b14fb842b1ba549fdd675c98075f12e9c510f8ef52bd021a9a1f4809d3b4d"
C1_HEX = "2689c7c2dab13309fb143e0e8fe396342521887e976690b6b47f5b2a4b7d448e"
P_HEX = "fffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffc2f"
P_PLUS_HEX = "fffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffd2f"
G_HEX = (
    "79be667ef9dcbbac55a06295ce870b07029bfcdb2dce28d959f2815b16f81798"
    "483ada7726a3c4655da4fbfc0e1108a8fd17b448a68554199c47d08ffb10d4b8"
)

PUB_KEY_TESTS = [
    ("uncompressed ok", "04" + X_HEX + Y_HEX, PUBKEY_UNCOMPRESSED, True),
    ("uncompressed x changed", "04" + "15" + X_HEX[2:] + Y_HEX, None, False),
    ("uncompressed y changed", "04" + X_HEX + Y_HEX[:-2] + "a4", None, False),
    ("uncompressed claims compressed", "03" + X_HEX + Y_HEX, None, False),
    ("uncompressed as hybrid ok", "07" + X_HEX + Y_HEX, PUBKEY_HYBRID, True),
    ("uncompressed as hybrid wrong", "06" + X_HEX + Y_HEX, None, False),
    ("compressed ok (ybit = 0)", "02" + C0_HEX, PUBKEY_COMPRESSED, True),
    ("compressed ok (ybit = 1)", "03" + C1_HEX, PUBKEY_COMPRESSED, True),
    ("compressed claims uncompressed (ybit = 0)", "04" + C0_HEX, None, False),
    ("compressed claims uncompressed (ybit = 1)", "05" + C1_HEX, None, False),
    ("wrong length", "05", None, False),
    ("X == P", "04" + P_HEX + Y_HEX, None, False),
    ("X > P", "04" + P_PLUS_HEX + Y_HEX, None, False),
    ("Y == P", "04" + X_HEX + P_HEX, None, False),
    ("Y > P", "04" + X_HEX + P_PLUS_HEX, None, False),
    ("hybrid", "06" + G_HEX, PUBKEY_HYBRID, True),
]

PRIV_KEY_HEX = "eaf02ca348c524e6392655ba4d29603cd1a7347d9d65cfe93ce1ebffdca22694"


def _serialise(pk, key_format):
    if key_format == PUBKEY_UNCOMPRESSED:
        return pk.serialise_uncompressed()
    if key_format == PUBKEY_COMPRESSED:
        return pk.serialise_compressed()
    return pk.serialise_hybrid()


@pytest.mark.parametrize(
    "name,key_hex,key_format",
    [(n, k, f) for n, k, f, valid in PUB_KEY_TESTS if valid],
)
def test_valid_pub_keys_round_trip(name, key_hex, key_format):
    key = bytes.fromhex(key_hex)
    pk = parse_pub_key(key, s256())
    assert s256().is_on_curve(pk.x, pk.y)
    assert _serialise(pk, key_format) == key


@pytest.mark.parametrize(
    "name,key_hex",
    [(n, k) for n, k, _, valid in PUB_KEY_TESTS if not valid],
)
def test_invalid_pub_keys_rejected(name, key_hex):
    with pytest.raises(ValueError):
        parse_pub_key(bytes.fromhex(key_hex), s256())


@pytest.mark.parametrize("name,key_hex,key_format,valid", PUB_KEY_TESTS)
def test_is_compressed(name, key_hex, key_format, valid):
    assert is_compressed_pub_key(bytes.fromhex(key_hex)) == (
        key_format == PUBKEY_COMPRESSED
    )


def test_empty_pub_key():
    with pytest.raises(ValueError, match="empty"):
        parse_pub_key(b"", s256())


def test_wrong_length_message():
    with pytest.raises(ValueError, match="invalid pub key length 1"):
        parse_pub_key(b"\x05", s256())


def test_public_key_is_equal():
    pub1 = parse_pub_key(bytes.fromhex("03" + C1_HEX), s256())
    pub2 = parse_pub_key(bytes.fromhex("02" + C0_HEX), s256())
    assert pub1.is_equal(pub1)
    assert not pub1.is_equal(pub2)


def test_hybrid_key_is_generator():
    pk = parse_pub_key(bytes.fromhex("06" + G_HEX), s256())
    assert (pk.x, pk.y) == (s256().gx, s256().gy)


def test_decompress_point_parity():
    curve = s256()
    x = int(C0_HEX, 16)
    even = decompress_point(curve, x, False)
    odd = decompress_point(curve, x, True)
    assert even % 2 == 0
    assert odd % 2 == 1
    assert even + odd == curve.p
    assert curve.is_on_curve(x, even)


def test_decompress_point_without_root():
    x = 0x00B1693892219D736CABA55BDB67216E485557EA6B6AF75F37096C9AA6A5A75F
    with pytest.raises(ValueError, match="invalid square root"):
        decompress_point(s256(), x, True)


def test_priv_key_round_trip_and_sign():
    key = bytes.fromhex(PRIV_KEY_HEX)
    priv, pub = priv_key_from_bytes(s256(), key)

    parsed = parse_pub_key(pub.serialise_uncompressed(), s256())
    assert parsed.is_equal(pub)
    assert priv.pub_key() is pub

    hash_bytes = bytes(range(10))
    sig = priv.sign(hash_bytes)
    assert sig.verify(hash_bytes, pub)

    assert priv.serialise() == key


def test_serialise_pads_small_scalar():
    priv, pub = priv_key_from_bytes(s256(), b"\x01")
    assert priv.serialise() == b"\x00" * 31 + b"\x01"
    assert (pub.x, pub.y) == (s256().gx, s256().gy)


def test_new_private_key():
    curve = s256()
    priv = new_private_key(curve)
    assert 1 <= priv.d < curve.n
    assert curve.is_on_curve(priv.x, priv.y)
    _, pub = priv_key_from_bytes(curve, priv.serialise())
    assert pub.is_equal(priv.pub_key())