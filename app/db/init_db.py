# app/db/init_db.py
"""Database initialization utilities."""
from typing import Optional

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from app.config.settings import Settings, settings
from app.core.logging import get_logger
from app.core.security import PasswordHasher
from app.db.base import Base, import_models
from app.models.admin.admin_user import AdminUser
from app.models.base.enums import AdminRole

logger = get_logger(__name__)


def init_db(
    bind: Optional[Engine] = None,
    session_factory: Optional[sessionmaker] = None,
    app_settings: Optional[Settings] = None,
) -> None:
    """
    Create all tables and seed the first admin account.

    Note: suitable for development and tests. Production schemas are
    expected to be managed by migrations.
    """
    from app.db.session import SessionLocal, engine

    bind = bind or engine
    session_factory = session_factory or SessionLocal
    app_settings = app_settings or settings

    import_models()
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables ensured", extra={"tables": len(Base.metadata.tables)})

    seed_first_admin(session_factory, app_settings)


def seed_first_admin(session_factory: sessionmaker, app_settings: Settings) -> Optional[AdminUser]:
    """Create the bootstrap admin when configured and absent."""
    if not (app_settings.FIRST_ADMIN_EMAIL and app_settings.FIRST_ADMIN_PASSWORD):
        return None

    email = app_settings.FIRST_ADMIN_EMAIL.strip().lower()
    with session_factory() as db:
        existing = db.execute(select(AdminUser).where(AdminUser.email == email)).scalar_one_or_none()
        if existing:
            return existing

        hasher = PasswordHasher(rounds=app_settings.PASSWORD_BCRYPT_ROUNDS)
        admin = AdminUser(
            first_name="Hotel",
            last_name="Admin",
            email=email,
            password_hash=hasher.hash(app_settings.FIRST_ADMIN_PASSWORD),
            role=AdminRole.ADMIN,
            permissions=AdminUser.default_permissions(AdminRole.ADMIN),
        )
        db.add(admin)
        db.commit()
        logger.info("Seeded first admin account", extra={"admin_email": email})
        return admin


def drop_db(bind: Optional[Engine] = None) -> None:
    """
    Drop all database tables.

    WARNING: This will delete all data! Development and tests only.
    """
    from app.db.session import engine

    Base.metadata.drop_all(bind=bind or engine)
    logger.warning("All database tables dropped")


def reset_db(bind: Optional[Engine] = None) -> None:
    """Drop and recreate all tables."""
    logger.warning("Resetting database")
    drop_db(bind)
    init_db(bind)
    logger.info("Database reset complete")
