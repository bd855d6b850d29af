"""
stockroom/main/routes.py
────────────────────────
Home redirect and health check.
"""
from datetime import datetime

from flask import current_app, redirect, url_for
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from stockroom import db
from stockroom.main import main


@main.route('/')
def index():
    """The product list is the home page; it enforces login itself."""
    return redirect(url_for('inventory.index'))


@main.route('/health')
def health():
    """Health check for load balancers and monitoring."""
    status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        db.session.rollback()
        status = "error"
        current_app.logger.error("Health check failed (DB): %s", e)

    response = {
        "status": status,
        "timestamp": datetime.utcnow().isoformat(),
        "details": {"db": status},
    }
    return response, 200 if status == "ok" else 500
