from utils.cipher import decrypt_image, parse_key, unshift
from utils.errors import TransformFailure

OBFUSCATED = 'obfuscated'
REVEALED = 'revealed'


class RevealProxy:
    """Client-side view of one vault entry.

    The record fetched from the server is never modified. Revealing computes
    a plaintext view next to it and concealing throws that view away, so
    toggling back always shows the stored content exactly, even after a
    wrong key.
    """

    def __init__(self, record: dict, remember_key: bool = False):
        self._record = dict(record)
        self.remember_key = remember_key
        self._plaintext = None
        self._key = None

    @property
    def id(self) -> str:
        return self._record['id']

    @property
    def kind(self) -> str:
        return self._record.get('kind', 'text')

    @property
    def title(self) -> str:
        return self._record.get('title') or ''

    @property
    def content(self) -> str:
        # Original obfuscated content, as stored
        return self._record['content']

    @property
    def record(self) -> dict:
        return dict(self._record)

    @property
    def state(self) -> str:
        return REVEALED if self._plaintext is not None else OBFUSCATED

    @property
    def is_revealed(self) -> bool:
        return self._plaintext is not None

    @property
    def has_key(self) -> bool:
        return self._key is not None

    @property
    def displayed(self) -> str:
        return self._plaintext if self._plaintext is not None else self.content

    def reveal(self, key=None) -> str:
        # A wrong key is not an error, it just produces different text
        if key is None:
            if self._key is None:
                raise TransformFailure('A key is required')
            key = self._key
        else:
            key = parse_key(key)

        if self.kind == 'image':
            self._plaintext = decrypt_image(self.content, key)
        else:
            self._plaintext = unshift(self.content, key)
        if self.remember_key:
            self._key = key
        return self._plaintext

    def conceal(self) -> str:
        self._plaintext = None
        return self.content

    def toggle(self, key=None) -> str:
        if self.is_revealed:
            return self.conceal()
        return self.reveal(key)

    def forget_key(self) -> None:
        self._key = None
