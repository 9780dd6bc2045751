"""Seed the educational content catalog. Run: python -m scripts.seed_content"""
import logging

from dotenv import load_dotenv

# Load environment variables before settings are read
load_dotenv()

from metabolic_health.config import settings
from metabolic_health.db.seed import seed_content
from metabolic_health.db.storage import open_storage

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger("seed_content")


def main() -> int:
    storage = open_storage(settings)
    try:
        created = seed_content(storage)
    finally:
        storage.close()
    logger.info("Seeding completed: %d item(s) created in %s storage", created, storage.name)
    return created


if __name__ == "__main__":
    main()
