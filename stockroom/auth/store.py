"""
stockroom/auth/store.py
───────────────────────
Data store adapter for the users table.
"""
from datetime import datetime
from typing import Optional

from sqlalchemy import select

from stockroom.auth.models import User, UserRecord
from stockroom.utils.db import store_errors


class UserStore:

    def __init__(self, db):
        self._db = db

    @property
    def session(self):
        return self._db.session

    def find_by_username(self, username: str) -> Optional[UserRecord]:
        """Exact match on username."""
        stmt = select(User).where(User.username == username)
        with store_errors(self.session, 'look up user'):
            user = self.session.scalars(stmt).first()
            return UserRecord.from_model(user) if user else None

    def get(self, user_id: int) -> Optional[UserRecord]:
        with store_errors(self.session, 'load user'):
            user = self.session.get(User, user_id)
            return UserRecord.from_model(user) if user else None

    def insert(self, username: str, password_hash: str) -> UserRecord:
        """Raises ConstraintViolation if the username is already taken."""
        user = User(username=username, password_hash=password_hash,
                    created_at=datetime.utcnow())
        with store_errors(self.session, 'create user'):
            self.session.add(user)
            self.session.flush()
            record = UserRecord.from_model(user)
            self.session.commit()
        return record
