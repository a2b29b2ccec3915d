"""
Teamboard Data Migrations
Flask Application Factory.

Usage:
    from teamboard import create_app
    app = create_app()           # defaults to "development"
    app = create_app("testing")  # explicit config
"""

import logging
import os

import click
from flask import Flask
from flask_migrate import Migrate

from teamboard.config import config
from teamboard.core.logging_config import configure_logging
from teamboard.models import db

logger = logging.getLogger(__name__)

# ── SQLite engine events (global) ────────────────────────────────────────
# pysqlite defers BEGIN and never wraps SAVEPOINT correctly; take over
# transaction control so savepoints and dry-run rollbacks behave as on PostgreSQL.
from sqlalchemy import event as _sa_event, engine as _sa_engine


@_sa_event.listens_for(_sa_engine.Engine, "connect")
def _configure_sqlite_connection(dbapi_conn, connection_record):
    """Enable foreign keys and disable pysqlite's implicit transactions."""
    if "sqlite" in type(dbapi_conn).__module__:
        dbapi_conn.isolation_level = None
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@_sa_event.listens_for(_sa_engine.Engine, "begin")
def _sqlite_explicit_begin(conn):
    if conn.dialect.name == "sqlite":
        conn.exec_driver_sql("BEGIN")


migrate = Migrate()


def create_app(config_name=None):
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     One of: "development", "testing", "production".
                     Defaults to APP_ENV env var, or "development" if unset.

    Returns:
        Configured Flask application instance.
    """
    if config_name is None:
        config_name = os.getenv("APP_ENV", "development")

    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config[config_name]())
    os.makedirs(app.instance_path, exist_ok=True)

    # ── Structured logging (must be first) ───────────────────────────────
    configure_logging(app)

    # ── Extensions ───────────────────────────────────────────────────────
    db.init_app(app)
    migrate.init_app(app, db)

    # ── Model registration (ensure tables are known to SQLAlchemy) ───────
    from teamboard.models import team as _team_models               # noqa: F401
    from teamboard.models import card as _card_models               # noqa: F401
    from teamboard.models import project as _project_models         # noqa: F401
    from teamboard.models import data_migration as _ledger_models   # noqa: F401

    # ── CLI commands ─────────────────────────────────────────────────────
    @app.cli.command("migrate-labels")
    @click.option("--dry-run", is_flag=True, help="Preview only; roll back all writes.")
    def migrate_labels_cmd(dry_run):
        """Create the default label set for every team (idempotent)."""
        from teamboard.services.migrations import run_standalone
        raise SystemExit(run_standalone("labels", app=app, dry_run=dry_run))

    @app.cli.command("migrate-milestones")
    @click.option("--dry-run", is_flag=True, help="Preview only; roll back all writes.")
    def migrate_milestones_cmd(dry_run):
        """Create the default milestone plan for every project without one."""
        from teamboard.services.migrations import run_standalone
        raise SystemExit(run_standalone("milestones", app=app, dry_run=dry_run))

    logger.debug("Application created: env=%s", config_name)
    return app
