import time

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.vault_entry import ENTRY_KINDS, VaultEntry
from utils.errors import NotFound, PersistenceFailure, ValidationFailure
from utils.logging_setup import get_logger

logger = get_logger('store')

MAX_TITLE_LENGTH = 255


class EntryStore:
    """Owner-scoped access to persisted vault entries.

    Content arrives already obfuscated; the store never sees a key. Entries
    can be created and deleted but never updated.
    """

    def list_for(self, owner_id: str) -> list[VaultEntry]:
        try:
            return (
                VaultEntry.query.filter_by(owner_id=owner_id)
                .order_by(VaultEntry.created_at.desc())
                .all()
            )
        except SQLAlchemyError as exc:
            logger.error('Fetch entries failed: %s', exc)
            raise PersistenceFailure('Failed to fetch entries')

    def create(self, owner_id: str, kind: str, content: str, title: str | None = None) -> VaultEntry:
        if kind not in ENTRY_KINDS:
            raise ValidationFailure(f'kind must be one of: {", ".join(ENTRY_KINDS)}')
        if not isinstance(content, str) or not content:
            raise ValidationFailure('content is required')
        if title is not None and not isinstance(title, str):
            raise ValidationFailure('title must be a string')
        title = (title or '').strip()
        if len(title) > MAX_TITLE_LENGTH:
            raise ValidationFailure(f'title must be at most {MAX_TITLE_LENGTH} characters')

        entry = VaultEntry(owner_id=owner_id, kind=kind, content=content, title=title)
        db.session.add(entry)
        try:
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error('Create entry failed: %s', exc)
            raise PersistenceFailure('Failed to create entry')
        logger.info('Created %s entry %s for user %s', kind, entry.id, owner_id)
        return entry

    def delete(self, owner_id: str, entry_id: str) -> None:
        try:
            entry = VaultEntry.query.filter_by(id=entry_id, owner_id=owner_id).first()
        except SQLAlchemyError as exc:
            logger.error('Lookup entry failed: %s', exc)
            raise PersistenceFailure('Failed to delete entry')
        # Someone else's entry looks exactly like a missing one
        if entry is None:
            raise NotFound()
        db.session.delete(entry)
        try:
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            logger.error('Delete entry failed: %s', exc)
            raise PersistenceFailure('Failed to delete entry')
        logger.info('Deleted entry %s for user %s', entry_id, owner_id)


def wait_for_database(interval: float = 5.0, attempts: int | None = None, sleep=time.sleep) -> bool:
    """Block until the database answers ``SELECT 1``.

    Retries at a fixed ``interval`` forever unless ``attempts`` caps it.
    Must run inside an app context. Returns False only when capped attempts
    run out.
    """
    tried = 0
    while True:
        tried += 1
        try:
            with db.engine.connect() as conn:
                conn.execute(text('SELECT 1'))
            logger.info('Connected to database')
            return True
        except SQLAlchemyError as exc:
            logger.error('Database connection failed (attempt %d): %s', tried, exc)
            if attempts is not None and tried >= attempts:
                return False
            logger.info('Retrying database connection in %.1fs', interval)
            sleep(interval)
