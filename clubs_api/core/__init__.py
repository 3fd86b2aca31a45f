"""
Core application utilities for settings, errors and FastAPI dependencies.

This package provides:
- Application-level settings (separate from DB settings)
- Domain error types shared by repositories, services and routes
- Session scope access (per-client state kept in the signed session cookie)
- Dependency helpers (DB session, session scope, CSRF verification)
"""
