import click
from flask import Flask, g, render_template
from flask_sqlalchemy import SQLAlchemy
from config import config

db = SQLAlchemy()


def create_app(config_name='default', sessions=None):
    """
    Application factory — creates and configures the Flask app.

    `sessions` swaps in a different session token store; by default each
    app gets its own in-memory store.
    """
    app = Flask(__name__)
    app.config.from_object(config[config_name])

    # ── Logging ───────────────────────────────────────────────────
    from stockroom.utils.logging import setup_logging
    setup_logging(app)

    # ── Extensions ────────────────────────────────────────────────
    db.init_app(app)

    # ── Blueprints ────────────────────────────────────────────────
    from stockroom.main import main as main_blueprint
    app.register_blueprint(main_blueprint)

    from stockroom.auth import auth as auth_blueprint
    app.register_blueprint(auth_blueprint)

    from stockroom.inventory import inventory as inventory_blueprint
    app.register_blueprint(inventory_blueprint, url_prefix='/products')

    # ── Services (explicit handle, one per app) ───────────────────
    from stockroom.context import EXTENSION_KEY, Services
    app.extensions[EXTENSION_KEY] = Services.build(app, db, sessions=sessions)

    register_error_handlers(app)

    # ── Template helpers ──────────────────────────────────────────
    @app.template_filter('money')
    def money(value):
        """Two fraction digits, always."""
        return f'{value:.2f}'

    @app.context_processor
    def inject_current_user():
        """
        Makes `current_user` available in every Jinja template.
        None when the view was not behind login_required, or when the
        database is down (the error page must still render).
        """
        from stockroom.context import get_services
        from stockroom.errors import StoreError
        user_id = g.get('user_id')
        if not user_id:
            return {'current_user': None}
        try:
            user = get_services().auth.get_user(user_id)
        except StoreError:
            user = None
        return {'current_user': user}

    # ── CLI Commands ──────────────────────────────────────────────
    register_commands(app)

    return app


def register_error_handlers(app):
    """JSON for API callers, error pages for browsers. Never leak driver text."""
    from flask import jsonify
    from stockroom.errors import StoreError
    from stockroom.utils.http import wants_json

    @app.errorhandler(StoreError)
    def store_error(e):
        app.logger.exception("Store error: %s", e.message)
        if app.config.get('EXPOSE_STORE_ERRORS') and e.__cause__ is not None:
            message = f'{e.message} ({e.__cause__})'
        else:
            message = StoreError.message
        if wants_json():
            return jsonify({'success': False, 'error': message}), e.status_code
        return render_template('errors/500.html', title='Server Error', message=message), e.status_code

    @app.errorhandler(404)
    def not_found(e):
        if wants_json():
            return jsonify({'success': False, 'error': 'Not found.'}), 404
        return render_template('errors/404.html', title='Page Not Found'), 404

    @app.errorhandler(500)
    def internal_error(e):
        if wants_json():
            return jsonify({'success': False, 'error': 'Internal server error.'}), 500
        return render_template('errors/500.html', title='Server Error',
                               message='Something went wrong.'), 500


def register_commands(app):
    """Register custom Flask CLI commands."""

    @app.cli.command('init-db')
    def init_db():
        """Create all database tables."""
        db.create_all()
        click.echo('Database tables created.')

    @app.cli.command('seed-admin')
    @click.option('--username', prompt='Username', help='Login name')
    @click.option('--password', prompt=True, hide_input=True,
                  confirmation_prompt=True, help='Password')
    def seed_admin(username, password):
        """Create a user who can sign in."""
        from stockroom.context import get_services
        from stockroom.errors import ValidationError

        db.create_all()
        try:
            user = get_services().auth.register(username, password)
        except ValidationError as e:
            click.echo(f'Could not create user: {e.message}')
            return
        click.echo(f'User "{user.username}" created successfully.')

    @app.cli.command('seed-demo')
    def seed_demo():
        """Create admin/admin123 and a few sample products."""
        from stockroom.context import get_services

        services = get_services()
        db.create_all()

        if services.auth.users.find_by_username('admin') is None:
            services.auth.register('admin', 'admin123')
            click.echo('User created (admin/admin123).')

        if not services.products.list():
            samples = [
                ('Wireless Mouse', '24.99', 40),
                ('Keyboard', '49.00', 25),
                ('USB Cable', '5.50', 120),
                ('Desk Lamp', '32.75', 12),
                ('Notebook', '2.10', 300),
            ]
            for name, price, qty in samples:
                services.products.create(name, price, qty)
            click.echo(f'{len(samples)} products seeded.')

        click.echo('Demo seed complete.')
