"""
Setup script for initializing the fleet admin database.
Creates the users and vehicles tables and seeds the configured admin account.
"""

import logging
from app.db.init_db import init_data, init_db

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

def setup_database():
    """Initialize database tables and the seed administrator."""
    logger.info("Creating fleet admin database tables...")
    try:
        init_db()
        init_data()
        logger.info("Database setup completed successfully!")
    except Exception as e:
        logger.error(f"Error setting up database: {e}")
        raise

if __name__ == "__main__":
    setup_database()
