from flask import (
    abort, current_app, flash, jsonify, redirect, render_template, request, session,
    url_for,
)
from stockroom.auth import auth
from stockroom.context import get_services
from stockroom.errors import InvalidCredentials, ValidationError
from stockroom.utils.http import json_error, request_data, wants_json


def _field(data: dict, name: str) -> str:
    value = data.get(name)
    return '' if value is None else str(value)


@auth.route('/login', methods=['GET', 'POST'])
def login():
    """
    GET  → render login form.
    POST → verify credentials, issue a session token.
           Form posts redirect to the product list; API callers get JSON.
    """
    services = get_services()

    # Already logged in → go straight to the products page
    if services.auth.validate_session(session.get('token')) is not None and not wants_json():
        return redirect(url_for('inventory.index'))

    error = None

    if request.method == 'POST':
        data = request_data()
        username = _field(data, 'username').strip()
        password = _field(data, 'password')

        if not username or not password:
            error = 'Username and password are required.'
            if wants_json():
                return jsonify({'success': False, 'error': error}), 400
        else:
            try:
                user_id = services.auth.authenticate(username, password)
            except InvalidCredentials as exc:
                # Deliberately vague — don't reveal which field was wrong
                current_app.logger.warning("Failed login attempt for username: %s", username)
                if wants_json():
                    return json_error(exc)
                error = exc.message
            else:
                # Replace any previous token rather than reusing it
                services.auth.destroy_session(session.get('token'))
                session.clear()
                session['token'] = services.auth.create_session(user_id)
                session.permanent = True   # respect PERMANENT_SESSION_LIFETIME

                current_app.logger.info("User %s logged in successfully.", username)
                if wants_json():
                    return jsonify({'success': True})
                flash(f'Welcome back, {username}!', 'success')
                return redirect(url_for('inventory.index'))

    return render_template('auth/login.html', title='Login', error=error)


@auth.route('/logout', methods=['GET', 'POST'])
def logout():
    """Destroy the session token, clear the cookie session, go to login."""
    get_services().auth.destroy_session(session.get('token'))
    session.clear()
    if wants_json():
        return jsonify({'success': True})
    flash('You have been logged out.', 'info')
    return redirect(url_for('auth.login'))


@auth.route('/register', methods=['GET', 'POST'])
def register():
    """Self-service account creation, enabled by ALLOW_REGISTRATION."""
    if not current_app.config.get('ALLOW_REGISTRATION'):
        abort(404)

    errors = {}
    form_data = {}

    if request.method == 'POST':
        data = request_data()
        form_data = {'username': _field(data, 'username')}
        try:
            user = get_services().auth.register(_field(data, 'username'), _field(data, 'password'))
        except ValidationError as exc:
            if wants_json():
                return json_error(exc)
            errors = exc.errors
        else:
            current_app.logger.info("New user registered: %s", user.username)
            if wants_json():
                return jsonify({'success': True}), 201
            flash('Account created. Please log in.', 'success')
            return redirect(url_for('auth.login'))

    return render_template('auth/register.html', title='Register',
                           errors=errors, form_data=form_data)