"""
ORM models for the reference entities: countries, provinces and styles.

Importing this package ensures model classes are registered with the Base
metadata for Alembic and runtime usage.
"""

from .reference import (  # noqa: F401
    Country,
    Province,
    Style,
)
