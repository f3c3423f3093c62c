"""
Database initialization script
Creates all tables and optionally seeds a system administrator
"""
import argparse
import logging

from store_rating.core.config import get_settings
from store_rating.core.exceptions import AppError
from store_rating.database import build_engine, build_session_factory, create_tables
from store_rating.models.user import Role
from store_rating.repositories import DataAccess
from store_rating.services import UserService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def init_db(admin_name=None, admin_email=None, admin_password=None, admin_address=None, database_url=None):
    """Initialize database with all tables, then create the admin account if requested"""
    settings = get_settings()
    engine = build_engine(database_url or settings.database_url)

    logger.info("Creating all database tables...")
    create_tables(engine)
    logger.info("Database tables created successfully")

    if not admin_email:
        logger.info("No admin email given, skipping admin seeding")
        engine.dispose()
        return None

    session = build_session_factory(engine)()
    try:
        user_service = UserService(DataAccess(session))
        existing = user_service.get_user_by_email(admin_email)
        if existing is not None:
            logger.info(f"Admin account already exists (ID: {existing.id})")
            return existing

        admin = user_service.create_user(
            name=admin_name,
            email=admin_email,
            password=admin_password,
            address=admin_address,
            role=Role.SYSTEM_ADMIN,
        )
        logger.info(f"System administrator created (ID: {admin.id})")
        return admin
    except AppError as e:
        logger.error(f"Could not create admin account: {e.message}")
        raise
    finally:
        session.close()
        engine.dispose()


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create tables and seed a system administrator")
    parser.add_argument("--database-url", help="Overrides DATABASE_URL")
    parser.add_argument("--admin-name", default="Platform System Administrator")
    parser.add_argument("--admin-email")
    parser.add_argument("--admin-password")
    parser.add_argument("--admin-address", default="Head Office")
    args = parser.parse_args(argv)

    init_db(
        admin_name=args.admin_name,
        admin_email=args.admin_email,
        admin_password=args.admin_password,
        admin_address=args.admin_address,
        database_url=args.database_url,
    )
    logger.info("Database initialization complete!")


if __name__ == "__main__":
    main()
