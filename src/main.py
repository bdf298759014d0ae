import logging

import settings
from database import Database
from errors import DatabaseError
from managing_system import ManagingSystem


def configure_logging(level=None, log_file=None):
    handler = logging.FileHandler(log_file) if log_file else logging.StreamHandler()
    logging.basicConfig(
        level=level or settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=[handler],
    )


def main():
    """Main application entry point"""
    configure_logging(settings.LOG_LEVEL, settings.LOG_FILE)
    db = Database()  # One connection per operation, opened on demand

    try:
        db.create_tables()
    except DatabaseError as e:
        # Keep going; every action will report the same problem
        print(f"Database unavailable: {e}")

    ManagingSystem(db).run()


# Ensure main() only runs if this script is executed directly
if __name__ == "__main__":
    main()
