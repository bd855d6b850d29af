from dataclasses import dataclass
from datetime import datetime
from stockroom import db


class User(db.Model):
    """A person allowed to sign in. Created by CLI or registration, never edited."""
    __tablename__ = 'users'

    id            = db.Column(db.Integer, primary_key=True)
    username      = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at    = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.CheckConstraint("username <> ''", name='check_username_not_empty'),
    )

    def __repr__(self) -> str:
        return f"<User {self.username!r}>"


@dataclass(frozen=True)
class UserRecord:
    """Read-only view of a users row handed out by UserStore."""
    id: int
    username: str
    password_hash: str

    @classmethod
    def from_model(cls, user: User) -> 'UserRecord':
        return cls(id=user.id, username=user.username, password_hash=user.password_hash)
