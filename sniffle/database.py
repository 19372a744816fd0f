# sniffle/database.py
from sqlalchemy import text
from sqlalchemy.engine import make_url

from .extensions import db


def setup_database(app):
    """Create missing tables and make sure the database answers.

    Runs before any route is registered; errors propagate to the caller.
    """
    backend = make_url(app.config["SQLALCHEMY_DATABASE_URI"]).get_backend_name()
    with app.app_context():
        try:
            db.create_all()
            db.session.execute(text("SELECT 1"))
        except Exception:
            app.logger.critical("database setup failed (%s)", backend)
            raise
        finally:
            db.session.remove()
    app.logger.info("database ready (%s)", backend)
