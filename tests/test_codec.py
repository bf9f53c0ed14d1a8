import pytest

from dataitem_core.tags import Tag, deserialize_tags, serialize_tags, validate_tags
from dataitem_core.errors import InvalidTagError
from dataitem_core.utils import (
    b64url_decode, b64url_encode, bytes_to_long, bytes_to_short, long_to_bytes, short_to_bytes,
)


@pytest.mark.parametrize("n", [0, 1, 255, 256, 0xABCD, 0xFFFF])
def test_short_roundtrip(n):
    b = short_to_bytes(n)
    assert len(b) == 2
    assert bytes_to_short(b) == n


@pytest.mark.parametrize("n", [0, 1, 0x0102030405060708, 2**63, 2**64 - 1])
def test_long_roundtrip(n):
    b = long_to_bytes(n)
    assert len(b) == 8
    assert bytes_to_long(b) == n


def test_integers_are_little_endian():
    assert short_to_bytes(3) == b"\x03\x00"
    assert long_to_bytes(0x0102) == b"\x02\x01" + b"\x00" * 6


def test_out_of_range_integer_rejected():
    with pytest.raises(ValueError):
        short_to_bytes(0x10000)


def test_b64url_has_no_padding():
    s = b64url_encode(b"\xfb\xff")
    assert "=" not in s and "+" not in s and "/" not in s
    assert b64url_decode(s) == b"\xfb\xff"


def test_empty_tags_serialize_to_nothing():
    assert serialize_tags([]) == b""
    assert serialize_tags(None) == b""
    assert deserialize_tags(b"") == []


def test_tags_avro_layout():
    # block count 1, "App-Name" (8), "Test" (4), end-of-array marker
    assert serialize_tags([("App-Name", "Test")]) == b"\x02\x10App-Name\x08Test\x00"


def test_tags_roundtrip_preserves_order():
    tags = [
        Tag("Content-Type", "text/plain"),
        Tag("App-Name", "Test"),
        Tag("Ünïcode", "värde ✓"),
        Tag("App-Name", "Duplicate"),
    ]
    assert deserialize_tags(serialize_tags(tags)) == tags


def test_tag_order_changes_bytes():
    a = serialize_tags([("a", "1"), ("b", "2")])
    b = serialize_tags([("b", "2"), ("a", "1")])
    assert a != b


def test_tags_accept_dicts_and_tuples():
    raw = serialize_tags([{"name": "x", "value": "y"}, ("z", "w")])
    assert deserialize_tags(raw) == [Tag("x", "y"), Tag("z", "w")]


def test_validate_tags_limits():
    validate_tags([Tag("n", "v")])
    with pytest.raises(InvalidTagError):
        validate_tags([Tag("", "v")])
    with pytest.raises(InvalidTagError):
        validate_tags([Tag("n", "v" * 3073)])
    with pytest.raises(InvalidTagError):
        validate_tags([Tag("n", "v")] * 129)
