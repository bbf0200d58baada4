"""
Flow SMS Studio Dashboard
SQLAlchemy database instance shared by all models.

Usage:
    from flowsms.models import db
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def iso(value):
    """Serialise a date/datetime for JSON responses (None passes through)."""
    return value.isoformat() if value is not None else None
