import logging
import os
import re


logger = logging.getLogger(__name__)

ALEMBIC_INI = os.path.join(os.path.dirname(__file__), "alembic.ini")


def _alembic_config(url: str):
    from alembic.config import Config

    # Point Alembic at our alembic.ini configurations
    alembic_cfg = Config(ALEMBIC_INI)
    alembic_cfg.set_main_option("sqlalchemy.url", url)
    return alembic_cfg


def run_migrations(url: str) -> bool:
    """
    Programmatically executes `alembic upgrade head`.
    Does nothing when the database is already at head.
    """
    from audionotes.core.config.settings import settings

    if not settings.AUTO_MIGRATE:
        logger.info("AUTO_MIGRATE is disabled, skipping Alembic.")
        return False

    from alembic import command

    db_name_match = re.search(r"/([^/?]+)(\?|$)", url)
    db_name = db_name_match.group(1) if db_name_match else "unknown"

    logger.info(f"Running database migrations for: {db_name}")
    command.upgrade(_alembic_config(url), "head")
    logger.info(f"Migrations complete for: {db_name}")
    return True
