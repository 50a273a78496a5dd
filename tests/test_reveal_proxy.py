"""Tests for RevealProxy: the obfuscated original is never touched."""

from __future__ import annotations

import pytest

from patterns.reveal_proxy import OBFUSCATED, REVEALED, RevealProxy
from utils.cipher import decode_data_uri, encrypt_image, shift
from utils.errors import TransformFailure

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(64))


def _text_entry(plain="Meet me at noon!", key=5):
    return RevealProxy({"id": "e1", "kind": "text", "title": "t", "content": shift(plain, key)})


class TestStates:
    def test_starts_obfuscated(self):
        entry = _text_entry()
        assert entry.state == OBFUSCATED
        assert entry.displayed == entry.content

    def test_reveal_with_right_key(self):
        entry = _text_entry()
        assert entry.reveal(5) == "Meet me at noon!"
        assert entry.state == REVEALED
        assert entry.displayed == "Meet me at noon!"

    def test_reveal_accepts_string_key(self):
        assert _text_entry().reveal("5") == "Meet me at noon!"

    def test_conceal_needs_no_key(self):
        entry = _text_entry()
        entry.reveal(5)
        assert entry.conceal() == shift("Meet me at noon!", 5)
        assert entry.state == OBFUSCATED

    def test_toggle_round_trip(self):
        entry = _text_entry()
        assert entry.toggle(5) == "Meet me at noon!"
        assert entry.toggle() == entry.content


class TestWrongKey:
    def test_wrong_key_does_not_raise(self):
        entry = _text_entry()
        assert entry.reveal(6) != "Meet me at noon!"
        assert entry.is_revealed

    def test_original_restored_byte_for_byte(self):
        entry = _text_entry()
        original = entry.content
        entry.toggle(17)
        entry.toggle()
        assert entry.displayed == original
        assert entry.record["content"] == original

    def test_repeated_toggles_keep_original(self):
        entry = _text_entry()
        original = entry.content
        for key in (1, 2, 3, 4):
            entry.toggle(key)
            entry.toggle()
        assert entry.content == original
        assert entry.reveal(5) == "Meet me at noon!"

    def test_record_copy_is_isolated(self):
        record = {"id": "e1", "kind": "text", "content": "abc"}
        entry = RevealProxy(record)
        record["content"] = "mutated"
        entry.record["content"] = "also mutated"
        assert entry.content == "abc"


class TestKeys:
    def test_key_required_without_memory(self):
        with pytest.raises(TransformFailure):
            _text_entry().reveal()

    def test_non_numeric_key(self):
        with pytest.raises(TransformFailure):
            _text_entry().reveal("five")

    def test_zero_key_shows_stored_text(self):
        entry = _text_entry()
        assert entry.reveal(0) == entry.content

    def test_remembered_key_reused(self):
        entry = RevealProxy({"id": "e1", "kind": "text", "content": shift("hi", 3)}, remember_key=True)
        entry.toggle(3)
        entry.toggle()
        assert entry.has_key
        assert entry.toggle() == "hi"

    def test_key_not_remembered_by_default(self):
        entry = _text_entry()
        entry.reveal(5)
        assert not entry.has_key

    def test_forget_key(self):
        entry = RevealProxy({"id": "e1", "kind": "text", "content": "abc"}, remember_key=True)
        entry.reveal(1)
        entry.forget_key()
        entry.conceal()
        with pytest.raises(TransformFailure):
            entry.reveal()


class TestImages:
    def test_image_reveal_is_data_uri(self):
        entry = RevealProxy({"id": "i1", "kind": "image", "content": encrypt_image(PNG_BYTES, 12, media_type="image/png")})
        media, data = decode_data_uri(entry.reveal(12))
        assert media == "image/png"
        assert data == PNG_BYTES

    def test_image_wrong_key_then_conceal(self):
        content = encrypt_image(PNG_BYTES, 12, media_type="image/png")
        entry = RevealProxy({"id": "i1", "kind": "image", "content": content})
        entry.toggle(13)
        assert entry.toggle() == content
