from patterns.observer import NoticeSubject
from patterns.reveal_proxy import RevealProxy
from utils.cipher import encrypt_image, parse_key, shift
from utils.errors import NotFound, TransformFailure, VaultError
from utils.logging_setup import get_logger

logger = get_logger('client')


class EntryManager:
    """In-memory list of the signed-in user's entries.

    Obfuscation happens here, before anything is sent. Every failure is
    turned into an error notice for the UI; nothing is retried.
    """

    def __init__(self, api, remember_keys: bool = False, notices: NoticeSubject | None = None):
        self.api = api
        self.remember_keys = remember_keys
        self.notices = notices or NoticeSubject()
        self._entries: list[RevealProxy] = []

    @property
    def entries(self) -> list[RevealProxy]:
        return list(self._entries)

    def get(self, entry_id: str) -> RevealProxy | None:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def _fail(self, message: str, exc: VaultError):
        logger.warning('%s: %s', message, exc.message)
        self.notices.error(f'{message}: {exc.message}')

    def refresh(self) -> bool:
        # Refetching drops every revealed view and remembered key
        try:
            records = self.api.list_entries()
        except VaultError as exc:
            self._fail('Failed to fetch entries', exc)
            return False
        self._entries = [RevealProxy(r, remember_key=self.remember_keys) for r in records]
        return True

    def _add(self, kind: str, content: str, title: str, label: str) -> RevealProxy | None:
        try:
            record = self.api.create_entry(kind, content, title=title or None)
        except VaultError as exc:
            self._fail(f'Failed to add {label}', exc)
            return None
        entry = RevealProxy(record, remember_key=self.remember_keys)
        # Newest first, same as the server's ordering
        self._entries.insert(0, entry)
        self.notices.info(f'{label.capitalize()} added successfully')
        return entry

    def add_text(self, text: str, key, title: str = '') -> RevealProxy | None:
        if not text:
            self.notices.error('Failed to add text: nothing to store')
            return None
        try:
            obfuscated = shift(text, parse_key(key))
        except TransformFailure as exc:
            self._fail('Failed to add text', exc)
            return None
        return self._add('text', obfuscated, title, 'text')

    def add_image(self, data: bytes, key, title: str = '', media_type: str | None = None,
                  filename: str | None = None) -> RevealProxy | None:
        try:
            obfuscated = encrypt_image(data, parse_key(key), media_type=media_type, filename=filename)
        except TransformFailure as exc:
            self._fail('Failed to add image', exc)
            return None
        return self._add('image', obfuscated, title, 'image')

    def toggle(self, entry_id: str, key=None) -> str | None:
        """Flip one entry between obfuscated and revealed; returns what to display."""
        entry = self.get(entry_id)
        if entry is None:
            self._fail('Failed to toggle entry', NotFound())
            return None
        try:
            return entry.toggle(key)
        except TransformFailure as exc:
            self._fail('Failed to decrypt entry', exc)
            return None

    def delete(self, entry_id: str) -> bool:
        try:
            self.api.delete_entry(entry_id)
        except VaultError as exc:
            self._fail('Failed to delete entry', exc)
            return False
        self._entries = [e for e in self._entries if e.id != entry_id]
        self.notices.info('Entry deleted successfully')
        return True
