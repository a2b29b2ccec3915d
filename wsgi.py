"""
Flask-Migrate / Alembic entry point.

Usage:
    flask --app wsgi db upgrade              # create / update the schema
    flask --app wsgi migrate-labels          # seed default labels per team
    flask --app wsgi migrate-milestones      # seed default milestones per project
"""

from teamboard import create_app

app = create_app()
