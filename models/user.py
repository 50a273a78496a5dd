from urllib.parse import quote

from . import db, new_id, utcnow

AVATAR_FALLBACK_URL = 'https://ui-avatars.com/api/?name={name}'


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    # Subject identifier issued by the identity provider
    subject = db.Column(db.String(255), unique=True, nullable=False, index=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    picture = db.Column(db.String(1024))
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    @staticmethod
    def from_profile(profile: dict) -> 'User':
        email = profile['email']
        name = profile.get('name') or email.split('@')[0]
        picture = profile.get('picture') or AVATAR_FALLBACK_URL.format(name=quote(profile.get('name') or ''))
        return User(subject=str(profile['subject']), name=name, email=email, picture=picture)

    def to_dict(self) -> dict:
        return {'id': self.id, 'name': self.name, 'email': self.email, 'picture': self.picture}
