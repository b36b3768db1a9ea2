# app/services/__init__.py
"""
Service layer root package.

Each subpackage implements application use-cases on top of:

- SQLAlchemy models (app.models.*)
- Repositories (app.repositories.*)
- Pydantic schemas (app.schemas.*)

Services receive a SQLAlchemy session plus their collaborators (settings,
notification relay, mailer) through the constructor and raise
``app.core.exceptions`` types on failure.
"""
