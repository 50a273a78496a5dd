"""Tests for the letter-rotation cipher and image data URIs."""

from __future__ import annotations

import base64
import string

import pytest

from utils.cipher import (
    decode_data_uri,
    decrypt_image,
    encode_data_uri,
    encrypt_image,
    parse_key,
    shift,
    unshift,
)
from utils.errors import TransformFailure

PRINTABLE = string.printable
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256))


class TestShift:
    def test_known_example(self):
        assert shift("Hello, World! 123", 3) == "Khoor, Zruog! 123"

    def test_wraps_within_case(self):
        assert shift("xyz XYZ", 3) == "abc ABC"

    def test_zero_key_is_noop(self):
        assert shift(PRINTABLE, 0) == PRINTABLE
        assert unshift(PRINTABLE, 0) == PRINTABLE

    @pytest.mark.parametrize("key", [26, 52, -26, 260])
    def test_multiples_of_26_are_noop(self, key):
        assert shift("Attack at dawn", key) == "Attack at dawn"

    def test_non_letters_untouched(self):
        text = "0123456789 !@#$%^&*()[]{};:'\",.<>/?\\|`~ \t\n"
        assert shift(text, 11) == text

    def test_non_ascii_untouched(self):
        assert shift("café ñ ü 日本", 1) == "dbgé ñ ü 日本"

    def test_key_congruence(self):
        for k in (-40, -3, 0, 5, 25, 29):
            for n in (-2, 1, 3):
                assert shift("The Quick Brown Fox", k) == shift("The Quick Brown Fox", k + 26 * n)

    def test_negative_key_rotates_backwards(self):
        assert shift("abc", -1) == "zab"


class TestUnshift:
    @pytest.mark.parametrize("key", [-1000, -27, -1, 0, 1, 3, 13, 25, 26, 27, 99, 12345])
    def test_inverts_shift(self, key):
        assert unshift(shift(PRINTABLE, key), key) == PRINTABLE

    def test_wrong_key_does_not_fail(self):
        obfuscated = shift("secret note", 7)
        assert unshift(obfuscated, 8) != "secret note"


class TestParseKey:
    @pytest.mark.parametrize("raw,expected", [(3, 3), ("3", 3), (" 42 ", 42), ("-5", -5), ("+7", 7), ("0", 0)])
    def test_accepts_numbers(self, raw, expected):
        assert parse_key(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "3.5", "1e3", True])
    def test_rejects_non_numbers(self, raw):
        with pytest.raises(TransformFailure):
            parse_key(raw)


class TestDataUri:
    def test_encode_with_media_type(self):
        uri = encode_data_uri(b"hi", media_type="text/plain")
        assert uri == "data:text/plain;base64," + base64.b64encode(b"hi").decode()

    def test_media_type_from_filename(self):
        assert encode_data_uri(PNG_BYTES, filename="cat.png").startswith("data:image/png;base64,")

    def test_default_media_type(self):
        assert encode_data_uri(b"x").startswith("data:application/octet-stream;base64,")

    def test_decode(self):
        media, data = decode_data_uri(encode_data_uri(PNG_BYTES, media_type="image/png"))
        assert media == "image/png"
        assert data == PNG_BYTES

    @pytest.mark.parametrize("bad", ["", "hello", "data:image/png,abc", "data:image/png;base64,@@@"])
    def test_decode_rejects_garbage(self, bad):
        with pytest.raises(TransformFailure):
            decode_data_uri(bad)


class TestImageCipher:
    def test_round_trip(self):
        uri = encode_data_uri(PNG_BYTES, media_type="image/png")
        obfuscated = encrypt_image(PNG_BYTES, 9, media_type="image/png")
        assert obfuscated != uri
        assert decrypt_image(obfuscated, 9) == uri
        assert decode_data_uri(decrypt_image(obfuscated, 9))[1] == PNG_BYTES

    def test_prefix_is_rotated_too(self):
        obfuscated = encrypt_image(PNG_BYTES, 1, media_type="image/png")
        assert obfuscated.startswith("ebub:jnbhf/qoh;cbtf64,")

    def test_wrong_key_yields_invalid_uri_without_error(self):
        obfuscated = encrypt_image(PNG_BYTES, 4, media_type="image/png")
        broken = decrypt_image(obfuscated, 5)
        with pytest.raises(TransformFailure):
            decode_data_uri(broken)
