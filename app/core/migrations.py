import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def alembic_config(database_url: str) -> Config:
    """Build an Alembic config pointing at the project's migration scripts"""
    # alembic.ini is for the CLI only; its logging section must not apply here
    cfg = Config()
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    return cfg


def apply_migrations(database_url: str) -> None:
    """
    Upgrade the database schema to the latest revision.

    Raises:
        Whatever Alembic raises; startup should fail if the schema can't be applied
    """
    logger.info("Applying pending database migrations...")
    try:
        command.upgrade(alembic_config(database_url), "head")
    except Exception:
        logger.exception("An error occurred while applying database migrations")
        raise
    logger.info("Database migrations applied successfully")
