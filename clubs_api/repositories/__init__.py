"""
Repository layer for data access.

Repositories encapsulate SQLAlchemy queries for each reference entity and
report store-level conditions (missing rows, optimistic-concurrency
conflicts) as clubs_api.core.errors exceptions.
"""
