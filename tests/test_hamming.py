"""Hamming distance and the helpers around it."""

import random

import pytest

from imghasher.utils.dhash import HASH_MASK
from imghasher.utils.hamming import (
    from_signed64,
    hamming_distance,
    hash_to_hex,
    is_duplicate,
    parse_hash,
    similarity,
    to_signed64,
)

rng = random.Random(1234)
SAMPLES = [0, 1, HASH_MASK, 1 << 63, 0x7E7E7E7E7E7E7E7E] + [rng.getrandbits(64) for _ in range(20)]


def test_known_distances():
    assert hamming_distance(0, 0) == 0
    assert hamming_distance(0, HASH_MASK) == 64
    assert hamming_distance(0b1011, 0b0001) == 2
    assert hamming_distance(1 << 63, 1) == 2


def test_matches_bit_by_bit_count():
    for a in SAMPLES:
        for b in SAMPLES[:6]:
            expected = sum(((a >> i) & 1) ^ ((b >> i) & 1) for i in range(64))
            assert hamming_distance(a, b) == expected


def test_identity_and_symmetry():
    for a in SAMPLES:
        assert hamming_distance(a, a) == 0
        for b in SAMPLES:
            assert hamming_distance(a, b) == hamming_distance(b, a)


def test_range_and_triangle_inequality():
    for a in SAMPLES:
        for b in SAMPLES:
            d = hamming_distance(a, b)
            assert 0 <= d <= 64
            for c in SAMPLES[:8]:
                assert d <= hamming_distance(a, c) + hamming_distance(c, b)


def test_signed_storage_form_compares_equal():
    for value in SAMPLES:
        assert hamming_distance(value, to_signed64(value)) == 0


def test_signed_round_trip_edges():
    assert to_signed64(HASH_MASK) == -1
    assert to_signed64(1 << 63) == -(1 << 63)
    assert to_signed64((1 << 63) - 1) == (1 << 63) - 1
    assert from_signed64(-1) == HASH_MASK


def test_similarity():
    assert similarity(0) == 100.0
    assert similarity(64) == 0.0
    assert similarity(16) == 75.0


def test_is_duplicate_threshold():
    assert is_duplicate(0, 0b1111, threshold=4)
    assert not is_duplicate(0, 0b11111, threshold=4)


def test_is_duplicate_uses_configured_threshold(monkeypatch):
    from imghasher.utils.config import reset_config
    monkeypatch.setenv("IMGHASHER_DUPLICATE_THRESHOLD", "2")
    reset_config()
    assert is_duplicate(0, 0b11)
    assert not is_duplicate(0, 0b111)


def test_hash_to_hex_pads():
    assert hash_to_hex(1) == "0000000000000001"
    assert hash_to_hex(0x7E7E7E7E7E7E7E7E) == "7e7e7e7e7e7e7e7e"
    assert hash_to_hex(-1) == "ffffffffffffffff"


@pytest.mark.parametrize("text, expected", [
    ("9114861776524122264", 9114861776524122264),
    ("0x7e7e7e7e7e7e7e7e", 0x7E7E7E7E7E7E7E7E),
    ("7E7E7E7E7E7E7E7E", 0x7E7E7E7E7E7E7E7E),
    ("-1", HASH_MASK),
    ("  42 ", 42),
])
def test_parse_hash(text, expected):
    assert parse_hash(text) == expected


@pytest.mark.parametrize("text", ["", "photo.jpg", "0x1" + "0" * 16, str(1 << 64), "abc"])
def test_parse_hash_rejects(text):
    with pytest.raises(ValueError):
        parse_hash(text)


@pytest.mark.parametrize("value", ["abc", "-3", "65", "4.5"])
def test_configured_threshold_must_be_a_bit_count(monkeypatch, value):
    from imghasher.utils.config import reset_config
    from imghasher.utils.hamming import duplicate_threshold
    monkeypatch.setenv("IMGHASHER_DUPLICATE_THRESHOLD", value)
    reset_config()
    with pytest.raises(ValueError, match="hashing.duplicate_threshold"):
        duplicate_threshold()
    with pytest.raises(ValueError):
        is_duplicate(0, 1)


def test_configured_threshold_accepts_padded_digits(monkeypatch):
    from imghasher.utils.config import reset_config
    from imghasher.utils.hamming import duplicate_threshold
    monkeypatch.setenv("IMGHASHER_DUPLICATE_THRESHOLD", " 7 ")
    reset_config()
    assert duplicate_threshold() == 7
