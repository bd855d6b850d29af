"""
stockroom/context.py
────────────────────
The service handle shared by request handlers.

Built once per application in create_app() and stored on
app.extensions['stockroom']; handlers reach it through get_services().
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING

from flask import current_app

if TYPE_CHECKING:
    from stockroom.auth.service import AuthService
    from stockroom.auth.sessions import SessionStore
    from stockroom.inventory.service import ProductService

EXTENSION_KEY = 'stockroom'


@dataclass
class Services:
    products: 'ProductService'
    auth: 'AuthService'

    @classmethod
    def build(cls, app, db, sessions: 'SessionStore' = None) -> 'Services':
        # Imported here: the blueprint packages import this module
        from stockroom.auth.service import AuthService
        from stockroom.auth.sessions import MemorySessionStore
        from stockroom.auth.store import UserStore
        from stockroom.inventory.service import ProductService
        from stockroom.inventory.store import ProductStore

        if sessions is None:
            sessions = MemorySessionStore(lifetime=app.config['PERMANENT_SESSION_LIFETIME'])
        return cls(
            products=ProductService(ProductStore(db)),
            auth=AuthService(UserStore(db), sessions),
        )


def get_services() -> 'Services':
    return current_app.extensions[EXTENSION_KEY]
