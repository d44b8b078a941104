"""
Database initialization script
Usage: python init_db.py
"""
import logging

from database import init_database

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    logger.info("Initializing database...")
    init_database()
    logger.info("Database initialized")


if __name__ == "__main__":
    main()
