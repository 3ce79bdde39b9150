import logging
import sys

from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from database import Base
from database.connection import engine, DATABASE_URL
from database.seed import seed_all
# All models must be imported so Base.metadata knows about them
import models  # noqa: F401

logger = logging.getLogger("reset_db")


def reset_database():
    """
    Drops all tables, recreates them, and adds the default statuses,
    provinces and sequence counters.
    """
    print("-------------------------------------------------------------------")
    print(f"Starting database reset process on {engine.url.render_as_string(hide_password=True)}...")

    try:
        # 1. Drop all tables
        print("1. Dropping all tables...")
        Base.metadata.drop_all(engine)
        print("All tables dropped successfully.")

        # 2. Create all tables
        print("2. Creating all tables...")
        Base.metadata.create_all(engine)
        print("All tables created successfully.")

        # 3. Seed lookup data
        print("3. Adding default statuses, provinces and sequences...")
        with Session(bind=engine) as session:
            seed_all(session)
        print("Default data added successfully.")

        print("-------------------------------------------------------------------")
        print("Database reset completed successfully.")
        print("-------------------------------------------------------------------")
        return True

    except OperationalError as e:
        print("-------------------------------------------------------------------")
        print("Connection or Operational Error:")
        print("Please ensure the database is running and OSRA_DATABASE_URL is correct.")
        logger.error("Reset of %s failed: %s", DATABASE_URL.split("@")[-1], e)
        print("-------------------------------------------------------------------")
        return False


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    sys.exit(0 if reset_database() else 1)
