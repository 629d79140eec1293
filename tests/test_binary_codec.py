import pytest

from lazyjson.binary_codec import decode_binary, encode_binary


def test_safe_set_round_trip():
    output = encode_binary(b"hello")
    assert output == '"hello"'
    assert decode_binary(output) == b"hello"


def test_non_safe_set_round_trip():
    output = encode_binary(bytes([1, 2, 3, 23]))
    assert output == r'"\\x01\\x02\\x03\\x17"'
    assert decode_binary(output) == bytes([1, 2, 3, 23])


def test_empty_bytes():
    assert encode_binary(b"") == '""'
    assert decode_binary('""') == b""


def test_mixed_safe_and_unsafe():
    assert encode_binary(b'ab\x01"\\\xff') == r'"ab\\x01\\x22\\x5c\\xff"'


def test_every_byte_round_trips():
    data = bytes(range(256))
    assert decode_binary(encode_binary(data)) == data


def test_decode_accepts_bytes_input():
    assert decode_binary(b'"\\\\x41b"') == b"Ab"


def test_single_backslash_escape_rejected():
    with pytest.raises(ValueError):
        decode_binary(r'"\x01"')


def test_bad_hex_rejected():
    with pytest.raises(ValueError):
        decode_binary(r'"\\xzz"')


def test_uppercase_hex_rejected():
    with pytest.raises(ValueError):
        decode_binary(r'"\\xFF"')


def test_not_a_string_rejected():
    with pytest.raises(ValueError):
        decode_binary("null")


def test_unterminated_string_rejected():
    with pytest.raises(ValueError):
        decode_binary('"abc')