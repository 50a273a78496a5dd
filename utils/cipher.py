"""Caesar-style letter rotation used to obfuscate vault entries.

Only ASCII letters move; digits, punctuation, whitespace and anything outside
ASCII are left alone. This is obfuscation, not encryption: a key of 0 (or any
multiple of 26) leaves the text unchanged and nothing detects a wrong key.
"""

import base64
import binascii
import mimetypes
import re
import string

from utils.errors import TransformFailure

ALPHABET_SIZE = 26

_DATA_URI_RE = re.compile(r'^data:(?P<media>[^;,]*);base64,(?P<payload>.*)$', re.DOTALL)
_KEY_RE = re.compile(r'^[+-]?\d+$')


def _rotate(ch: str, key: int) -> str:
    if ch in string.ascii_uppercase:
        base = ord('A')
    elif ch in string.ascii_lowercase:
        base = ord('a')
    else:
        return ch
    return chr((ord(ch) - base + key) % ALPHABET_SIZE + base)


def shift(text: str, key: int) -> str:
    # Python's modulo is floored, so negative keys rotate backwards correctly
    key = key % ALPHABET_SIZE
    if key == 0:
        return text
    return ''.join(_rotate(ch, key) for ch in text)


def unshift(text: str, key: int) -> str:
    return shift(text, ALPHABET_SIZE - (key % ALPHABET_SIZE))


def parse_key(raw) -> int:
    """Turn user input into a numeric key.

    Accepts ints and optionally signed digit strings. Zero is accepted and
    simply does nothing. Anything else raises ``TransformFailure``.
    """
    if isinstance(raw, bool):
        raise TransformFailure()
    if isinstance(raw, int):
        return raw
    text = '' if raw is None else str(raw).strip()
    if not text:
        raise TransformFailure('A key is required')
    if not _KEY_RE.match(text):
        raise TransformFailure()
    return int(text)


def encode_data_uri(data: bytes, media_type: str | None = None, filename: str | None = None) -> str:
    # Pick a media type from the filename when none is given
    if not media_type and filename:
        media_type, _ = mimetypes.guess_type(filename)
    media_type = media_type or 'application/octet-stream'
    payload = base64.b64encode(data).decode('ascii')
    return f'data:{media_type};base64,{payload}'


def decode_data_uri(uri: str) -> tuple[str, bytes]:
    match = _DATA_URI_RE.match(uri or '')
    if not match:
        raise TransformFailure('Not a valid image')
    try:
        data = base64.b64decode(match.group('payload'), validate=True)
    except (binascii.Error, ValueError):
        raise TransformFailure('Not a valid image')
    return match.group('media'), data


def encrypt_image(data: bytes, key: int, media_type: str | None = None, filename: str | None = None) -> str:
    # The whole data URI is rotated, prefix and base64 alphabet included
    return shift(encode_data_uri(data, media_type=media_type, filename=filename), key)


def decrypt_image(obfuscated: str, key: int) -> str:
    # No validation here: a wrong key just yields a broken data URI
    return unshift(obfuscated, key)
