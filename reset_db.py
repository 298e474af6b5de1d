import logging

from config import load_settings
from database import Store, sqlite_path
from models import Base

logger = logging.getLogger(__name__)


def reset_database(database_url: str):
    """Start over with empty tables; the next server start reseeds them."""
    path = sqlite_path(database_url)
    if path is not None and path.exists():
        path.unlink()
        logger.info("Removed existing DB: %s", path)
    store = Store(database_url)
    if path is None:
        Base.metadata.drop_all(bind=store.engine)
    store.create_tables()
    store.dispose()
    logger.info("Empty DB created. It will reseed on next server start.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    reset_database(load_settings().database_url)
