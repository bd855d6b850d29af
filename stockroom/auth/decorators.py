"""
stockroom/auth/decorators.py
----------------------------
Route protection.
Usage:
    from stockroom.auth.decorators import login_required

    @inventory.route('')
    @login_required
    def index():
        ...

The session token is checked before the view runs, so a rejected request
never reaches the database.
"""
from functools import wraps
from flask import flash, g, redirect, session, url_for

from stockroom.context import get_services
from stockroom.errors import NotAuthenticated
from stockroom.utils.http import json_error, wants_json


def login_required(f):
    """
    Reject requests without a valid session token.
    API callers get 401 JSON; page navigation is redirected to the login page.
    On success the signed-in user's id is available as g.user_id.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        user_id = get_services().auth.validate_session(session.get('token'))
        if user_id is None:
            session.pop('token', None)
            if wants_json():
                return json_error(NotAuthenticated())
            flash('Please log in to access this page.', 'warning')
            return redirect(url_for('auth.login'))
        g.user_id = user_id
        return f(*args, **kwargs)
    return decorated
