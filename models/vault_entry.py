from . import db, isoformat_utc, new_id, utcnow

ENTRY_KINDS = ('text', 'image')


class VaultEntry(db.Model):
    __tablename__ = 'vault_entries'
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    owner_id = db.Column(db.String(32), db.ForeignKey('users.id'), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False, default='')
    kind = db.Column(db.String(16), nullable=False)
    # Always the obfuscated form; plaintext never reaches this column
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'ownerId': self.owner_id,
            'title': self.title or '',
            'kind': self.kind,
            'content': self.content,
            'createdAt': isoformat_utc(self.created_at),
        }
