import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from enum import Enum
from sqlite3 import Error

import settings
from errors import DatabaseError

logger = logging.getLogger(__name__)


# Money is kept as exact text, dates as ISO text, booleans as 0/1
sqlite3.register_adapter(Decimal, str)
sqlite3.register_adapter(date, lambda d: d.isoformat())
sqlite3.register_converter("DECIMAL", lambda b: Decimal(b.decode()))
sqlite3.register_converter("DATE", lambda b: date.fromisoformat(b.decode()))
sqlite3.register_converter("BOOLEAN", lambda b: bool(int(b)))


class EntityTable(Enum):
    """The only tables whose names may be interpolated into SQL"""
    ARCHITECT = "architect"
    CONTRACTOR = "contractor"
    CUSTOMER = "customer"

    @property
    def label(self):
        return self.value.capitalize()


def _check_table(table):
    if not isinstance(table, EntityTable):
        raise TypeError(f"table must be an EntityTable, not {table!r}")
    return table.value


def execute_query(conn, query, params=()):
    """Run one statement and commit it straight away"""
    try:
        logger.debug("SQL: %s | params: %s", query.strip(), params)
        cursor = conn.execute(query, params)
        if conn.in_transaction:
            conn.commit()
        return cursor
    except (Error, OverflowError) as e:
        # OverflowError: an int parameter wider than SQLite's 64-bit INTEGER
        logger.error("Query error: %s\nSQL: %s\nParams: %s", e, query, params)
        raise DatabaseError(str(e)) from e


def id_exists(conn, table, record_id):
    """True when `record_id` is a row of the given entity table"""
    name = _check_table(table)
    cur = execute_query(conn, f"SELECT 1 FROM {name} WHERE id = ?", (record_id,))
    return cur.fetchone() is not None


class Database:
    """Hands out one short-lived SQLite connection per operation."""

    def __init__(self, db_file=None):
        self.db_file = os.path.abspath(db_file or settings.DB_FILE)

    @contextmanager
    def connect(self):
        try:
            logger.debug("Connecting to: %s", self.db_file)
            conn = sqlite3.connect(self.db_file, detect_types=sqlite3.PARSE_DECLTYPES)
        except Error as e:
            logger.error("Connection error: %s", e)
            raise DatabaseError(f"Database connection error: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        finally:
            conn.close()
            logger.debug("Closed connection to: %s", self.db_file)

    def create_tables(self):
        """Create the four tables if this is a fresh database file"""
        person_columns = """
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            first_name TEXT,
            last_name TEXT,
            phone_number TEXT,
            email TEXT,
            address TEXT,
            post_code TEXT
        """
        create_projects_table = """
        CREATE TABLE IF NOT EXISTS projects (
            project_number INTEGER PRIMARY KEY AUTOINCREMENT,
            project_name TEXT,
            building_type TEXT NOT NULL,
            project_address TEXT NOT NULL,
            erf_number TEXT NOT NULL,
            total_fee_gbp DECIMAL TEXT,
            paid_to_date_gbp DECIMAL TEXT,
            deadline_date DATE NOT NULL,
            completion_date DATE,
            finalised BOOLEAN NOT NULL DEFAULT 0,
            architect_id INTEGER REFERENCES architect(id),
            contractor_id INTEGER REFERENCES contractor(id),
            customer_id INTEGER REFERENCES customer(id)
        );
        """
        with self.connect() as conn:
            for table in EntityTable:
                execute_query(conn, f"CREATE TABLE IF NOT EXISTS {table.value} ({person_columns});")
            execute_query(conn, create_projects_table)
        logger.info("Schema ready in %s", self.db_file)
