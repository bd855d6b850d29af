"""
stockroom/auth/service.py
-------------------------
Credential checks and session lifecycle.

Passwords are hashed with werkzeug's salted key-derivation hash and only
ever compared through check_password_hash.
"""
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from stockroom.auth.models import UserRecord
from stockroom.auth.sessions import SessionStore
from stockroom.auth.store import UserStore
from stockroom.errors import ConstraintViolation, InvalidCredentials, ValidationError

MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 64
MIN_PASSWORD_LENGTH = 4


class AuthService:

    def __init__(self, users: UserStore, sessions: SessionStore):
        self.users = users
        self.sessions = sessions
        self._dummy_hash = None

    # ── Credentials ───────────────────────────────────────────────
    def authenticate(self, username: str, password: str) -> int:
        """
        Return the user id for a valid username/password pair.
        Raises InvalidCredentials otherwise, with the same message whether
        the username or the password was wrong.
        """
        user = self.users.find_by_username(username or '')
        if user is None:
            # Burn the same hashing time as a real check
            check_password_hash(self._get_dummy_hash(), password or '')
            raise InvalidCredentials()
        if not check_password_hash(user.password_hash, password or ''):
            raise InvalidCredentials()
        return user.id

    def register(self, username: str, password: str) -> UserRecord:
        """Create a user with a hashed password."""
        username = (username or '').strip()
        password = password or ''

        errors = {}
        if len(username) < MIN_USERNAME_LENGTH:
            errors['username'] = f'Username must be at least {MIN_USERNAME_LENGTH} characters.'
        elif len(username) > MAX_USERNAME_LENGTH:
            errors['username'] = f'Username must be {MAX_USERNAME_LENGTH} characters or fewer.'
        if len(password) < MIN_PASSWORD_LENGTH:
            errors['password'] = f'Password must be at least {MIN_PASSWORD_LENGTH} characters.'
        if not errors and self.users.find_by_username(username) is not None:
            errors['username'] = 'Username already taken.'
        if errors:
            raise ValidationError.from_errors(errors)

        try:
            return self.users.insert(username, generate_password_hash(password))
        except ConstraintViolation:
            # Lost a race with another registration for the same name
            raise ValidationError('username', 'Username already taken.') from None

    def get_user(self, user_id: int) -> Optional[UserRecord]:
        return self.users.get(user_id)

    # ── Sessions ──────────────────────────────────────────────────
    def create_session(self, user_id: int) -> str:
        return self.sessions.create(user_id)

    def validate_session(self, token: Optional[str]) -> Optional[int]:
        return self.sessions.validate(token)

    def destroy_session(self, token: Optional[str]) -> None:
        self.sessions.destroy(token)

    def _get_dummy_hash(self) -> str:
        if self._dummy_hash is None:
            self._dummy_hash = generate_password_hash('stockroom-timing-pad')
        return self._dummy_hash
