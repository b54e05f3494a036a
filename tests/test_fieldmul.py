import pytest

from bec256.fieldmul import mul_words, reduce_terms

P = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F


def to_words(n):
    n %= P
    words = [(n >> (26 * i)) & 0x3FFFFFF for i in range(9)]
    words.append(n >> (26 * 9))
    return words


def from_words(words):
    return sum(w << (26 * i) for i, w in enumerate(words))


MUL_CASES = [
    ("0", "0", "0"),
    ("1", "0", "0"),
    ("0", "1", "0"),
    ("1", "1", "1"),
    (
        "ffffffffffffffffffffffffffffffffffffffffffffffffffffffff1ffff",
        "1000",
        "1ffff3d1",
    ),
    (
        "fffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffc2e",
        "2",
        "fffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffc2d",
    ),
    ("fffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffc2f", "3", "0"),
    (
        "fffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffc2e",
        "8",
        "fffffffffffffffffffffffffffffffffffffffffffffffffffffffefffffc27",
    ),
    (
        "cfb81753d5ef499a98ecc04c62cb7768c2e4f1740032946db1c12e405248137e",
        "58f355ad27b4d75fb7db0442452e732c436c1f7c5a7c4e214fa9cc031426a7d3",
        "1018cd2d7c2535235b71e18db9cd98027386328d2fa6a14b36ec663c4c87282b",
    ),
    (
        "26e9d61d1cdf3920e9928e85fa3df3e7556ef9ab1d14ec56d8b4fc8ed37235bf",
        "2dfc4bbe537afee979c644f8c97b31e58be5296d6dbc460091eae630c98511cf",
        "da85f48da2dc371e223a1ae63bd30b7e7ee45ae9b189ac43ff357e9ef8cf107a",
    ),
    (
        "5db64ed5afb71646c8b231585d5b2bf7e628590154e0854c4c29920b999ff351",
        "279cfae5eea5d09ade8e6a7409182f9de40981bc31c84c3d3dfe1d933f152e9a",
        "2c78fbae91792dd0b157abe3054920049b1879a7cc9d98cfda927d83be411b37",
    ),
    (
        "b66dfc1f96820b07d2bdbd559c19319a3a73c97ceb7b3d662f4fe75ecb6819e6",
        "bf774aba43e3e49eb63a6e18037d1118152568f1a3ac4ec8b89aeb6ff8008ae1",
        "c4f016558ca8e950c21c3f7fc15f640293a979c7b01754ee7f8b3340d4902ebb",
    ),
]


@pytest.mark.parametrize("in1, in2, expected", MUL_CASES)
def test_mul_words_matches_expected(in1, in2, expected):
    result = mul_words(to_words(int(in1, 16)), to_words(int(in2, 16)))
    assert from_words(result) % P == int(expected, 16) % P


@pytest.mark.parametrize("in1, in2, expected", MUL_CASES)
def test_mul_words_result_has_magnitude_one(in1, in2, expected):
    result = mul_words(to_words(int(in1, 16)), to_words(int(in2, 16)))
    assert len(result) == 10
    assert all(w <= 0x3FFFFFF for w in result[3:9])
    assert result[9] <= 0x3FFFFF
    assert from_words(result) < 2 * P


def test_mul_words_is_commutative():
    a = to_words(0xCFB81753D5EF499A98ECC04C62CB7768C2E4F1740032946DB1C12E405248137E)
    b = to_words(0x58F355AD27B4D75FB7DB0442452E732C436C1F7C5A7C4E214FA9CC031426A7D3)
    assert mul_words(a, b) == mul_words(b, a)


def test_mul_words_accepts_denormalised_inputs():
    # 2^26 held entirely in word zero, times 2.
    a = [0x04000000] + [0] * 9
    b = [2] + [0] * 9
    assert from_words(mul_words(a, b)) % P == 1 << 27


def test_mul_words_rejects_wrong_length():
    with pytest.raises(ValueError):
        mul_words([1] * 9, [1] * 10)


def test_reduce_terms_low_term_only():
    terms = [5] + [0] * 19
    assert reduce_terms(terms) == [5, 0, 0, 0, 0, 0, 0, 0, 0, 0]


def test_reduce_terms_folds_bit_260():
    # 2^260 mod P is 16 * 4294968273, i.e. words 15632 and 1024.
    terms = [0] * 20
    terms[10] = 1
    assert reduce_terms(terms) == [15632, 1024, 0, 0, 0, 0, 0, 0, 0, 0]


def test_reduce_terms_rejects_wrong_length():
    with pytest.raises(ValueError):
        reduce_terms([0] * 19)