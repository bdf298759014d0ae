import logging

from database import EntityTable, execute_query, id_exists
from errors import DatabaseError, NotFoundError

logger = logging.getLogger(__name__)

# Column order used for inserts, updates and display
PERSON_FIELDS = ["first_name", "last_name", "phone_number", "email", "address", "post_code"]


class Person:
    """An architect, contractor or customer row"""

    def __init__(self, id=None, first_name="", last_name="", phone_number="",
                 email="", address="", post_code=""):
        self.id = id                        # Assigned by the database
        self.first_name = first_name
        self.last_name = last_name
        self.phone_number = phone_number
        self.email = email
        self.address = address              # Home address
        self.post_code = post_code

    @classmethod
    def from_row(cls, row):
        return cls(row["id"], *(row[f] for f in PERSON_FIELDS))

    def get_info(self):
        """Return the person's details as a dictionary"""
        info = {"id": self.id}
        info.update({f: getattr(self, f) for f in PERSON_FIELDS})
        return info

    def __eq__(self, other):
        if not isinstance(other, Person):
            return NotImplemented
        return self.get_info() == other.get_info()

    def __repr__(self):
        return f"Person(id={self.id!r}, {self.first_name!r} {self.last_name!r})"


class PersonRepository:
    """CRUD for one of the three person tables, chosen by EntityTable."""

    table = None

    def __init__(self, db, table=None):
        self.db = db
        if table is not None:
            self.table = table
        if not isinstance(self.table, EntityTable):
            raise TypeError(f"table must be an EntityTable, not {self.table!r}")

    @property
    def label(self):
        return self.table.label

    def _values(self, details):
        # Free text, not format-checked; missing keys become empty strings
        return [str(details.get(f) or "").strip() for f in PERSON_FIELDS]

    def _require(self, conn, person_id):
        if not id_exists(conn, self.table, person_id):
            logger.warning("%s %s not found", self.label, person_id)
            raise NotFoundError(self.label, person_id)

    def exists(self, person_id):
        with self.db.connect() as conn:
            return id_exists(conn, self.table, person_id)

    def add(self, details):
        """Insert a new row and return its id"""
        q = (f"INSERT INTO {self.table.value} ({', '.join(PERSON_FIELDS)}) "
             f"VALUES ({', '.join(['?'] * len(PERSON_FIELDS))})")
        with self.db.connect() as conn:
            cur = execute_query(conn, q, self._values(details))
        if cur.rowcount < 1:
            raise DatabaseError(f"Failed to add the new {self.table.value}.")
        logger.info("Added %s %s", self.table.value, cur.lastrowid)
        return cur.lastrowid

    def update(self, person_id, details):
        """Overwrite all six fields of an existing row"""
        set_clause = ", ".join(f"{f} = ?" for f in PERSON_FIELDS)
        q = f"UPDATE {self.table.value} SET {set_clause} WHERE id = ?"
        with self.db.connect() as conn:
            self._require(conn, person_id)
            cur = execute_query(conn, q, self._values(details) + [person_id])
        if cur.rowcount < 1:
            raise DatabaseError(f"Failed to update the {self.table.value}.")
        logger.info("Updated %s %s", self.table.value, person_id)

    def delete(self, person_id):
        # Projects pointing at this row are left as they are
        with self.db.connect() as conn:
            self._require(conn, person_id)
            cur = execute_query(conn, f"DELETE FROM {self.table.value} WHERE id = ?", (person_id,))
        if cur.rowcount < 1:
            raise DatabaseError(f"Failed to delete the {self.table.value}.")
        logger.info("Deleted %s %s", self.table.value, person_id)

    def find_by_id(self, person_id):
        """Return the Person or None"""
        with self.db.connect() as conn:
            row = execute_query(conn, f"SELECT * FROM {self.table.value} WHERE id = ?",
                                (person_id,)).fetchone()
        return Person.from_row(row) if row else None

    def list_all(self):
        with self.db.connect() as conn:
            rows = execute_query(conn, f"SELECT * FROM {self.table.value} ORDER BY id").fetchall()
        return [Person.from_row(r) for r in rows]


class ArchitectRepository(PersonRepository):
    table = EntityTable.ARCHITECT


class ContractorRepository(PersonRepository):
    table = EntityTable.CONTRACTOR


class CustomerRepository(PersonRepository):
    table = EntityTable.CUSTOMER
