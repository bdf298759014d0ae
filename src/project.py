"""
Projects: the central PoisePMS record.

A project references one architect, one contractor and one customer by id.
Those ids are checked against their tables whenever they are written; nothing
cascades when a referenced person is later deleted.
"""

import logging

import validation
from database import EntityTable, execute_query, id_exists
from errors import DatabaseError, ForeignKeyError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Columns in table order; also the order of SET entries in a partial update
PROJECT_COLUMNS = [
    "project_name", "building_type", "project_address", "erf_number",
    "total_fee_gbp", "paid_to_date_gbp", "deadline_date", "completion_date",
    "finalised", "architect_id", "contractor_id", "customer_id",
]

FOREIGN_KEYS = {
    "architect_id": EntityTable.ARCHITECT,
    "contractor_id": EntityTable.CONTRACTOR,
    "customer_id": EntityTable.CUSTOMER,
}


class Project:
    """One row of the projects table"""

    def __init__(self, project_number=None, project_name="", building_type="",
                 project_address="", erf_number="", total_fee_gbp=None,
                 paid_to_date_gbp=None, deadline_date=None, completion_date=None,
                 finalised=False, architect_id=None, contractor_id=None, customer_id=None):
        self.project_number = project_number
        self.project_name = project_name
        self.building_type = building_type
        self.project_address = project_address
        self.erf_number = erf_number            # Up to 10 digits by convention
        self.total_fee_gbp = total_fee_gbp      # Decimal
        self.paid_to_date_gbp = paid_to_date_gbp
        self.deadline_date = deadline_date      # date
        self.completion_date = completion_date  # None until complete
        self.finalised = finalised
        self.architect_id = architect_id
        self.contractor_id = contractor_id
        self.customer_id = customer_id

    @classmethod
    def from_row(cls, row):
        values = {c: row[c] for c in PROJECT_COLUMNS}
        values["finalised"] = bool(values["finalised"])
        return cls(row["project_number"], **values)

    def get_info(self):
        info = {"project_number": self.project_number}
        info.update({c: getattr(self, c) for c in PROJECT_COLUMNS})
        return info

    def __eq__(self, other):
        if not isinstance(other, Project):
            return NotImplemented
        return self.get_info() == other.get_info()

    def __repr__(self):
        return f"Project(project_number={self.project_number!r}, project_name={self.project_name!r})"


def parse_new_project(fields):
    """Validate the fields of a new project, returning typed column values."""
    get = fields.get
    if validation.is_blank(get("deadline_date")):
        raise ValidationError("Deadline date cannot be left blank. Please enter a value.", "Deadline date")
    values = {
        "project_name": validation.optional_text(get("project_name")),
        "building_type": validation.require_text(get("building_type"), "Building type"),
        "project_address": validation.require_text(get("project_address"), "Project address"),
        "erf_number": validation.require_text(get("erf_number"), "ERF number"),
        "total_fee_gbp": validation.parse_money(get("total_fee_gbp"), "Total fee"),
        "paid_to_date_gbp": validation.parse_money(get("paid_to_date_gbp"), "Paid to date"),
        "deadline_date": validation.parse_date(get("deadline_date"), "Deadline date"),
        "completion_date": validation.parse_optional_date(get("completion_date"), "Completion date"),
        "finalised": validation.parse_boolean(get("finalised"), "Finalised"),
    }
    for column, table in FOREIGN_KEYS.items():
        label = f"{table.label} ID"
        raw = get(column)
        if validation.is_blank(raw):
            raise ValidationError(f"{label} cannot be left blank. Please enter a value.", label)
        values[column] = validation.parse_id(raw, label)
    return values


def parse_project_changes(fields):
    """
    Validate an update request. Blank or missing fields mean "keep the current
    value" and are left out of the result, so an all-blank request gives {}.
    """
    parsers = {
        "project_name": lambda v: str(v).strip(),
        "building_type": lambda v: str(v).strip(),
        "project_address": lambda v: str(v).strip(),
        "erf_number": lambda v: str(v).strip(),
        "total_fee_gbp": lambda v: validation.parse_money(v, "Total fee"),
        "paid_to_date_gbp": lambda v: validation.parse_money(v, "Paid to date"),
        "deadline_date": lambda v: validation.parse_date(v, "Deadline date"),
        "completion_date": lambda v: validation.parse_date(v, "Completion date"),
        "finalised": lambda v: validation.parse_boolean(v, "Finalised"),
    }
    for column, table in FOREIGN_KEYS.items():
        parsers[column] = lambda v, label=f"{table.label} ID": validation.parse_id(v, label)

    changes = {}
    for column in PROJECT_COLUMNS:
        raw = fields.get(column)
        if validation.is_blank(raw):
            continue
        changes[column] = parsers[column](raw)
    return changes


def build_update_statement(project_number, changes):
    """
    Build "UPDATE projects SET a = ?, b = ? WHERE project_number = ?" touching
    only the columns in `changes`, in PROJECT_COLUMNS order.
    Returns (sql, params), or None when there is nothing to change.
    """
    unknown = set(changes) - set(PROJECT_COLUMNS)
    if unknown:
        raise ValueError(f"Unknown project columns: {', '.join(sorted(unknown))}")
    columns = [c for c in PROJECT_COLUMNS if c in changes]
    if not columns:
        return None
    set_clause = ", ".join(f"{c} = ?" for c in columns)
    params = [changes[c] for c in columns] + [project_number]
    return f"UPDATE projects SET {set_clause} WHERE project_number = ?", params


class ProjectRepository:
    def __init__(self, db):
        self.db = db

    def id_exists(self, table, record_id):
        """Existence check against the architect, contractor or customer table"""
        with self.db.connect() as conn:
            return id_exists(conn, table, record_id)

    def exists(self, project_number):
        with self.db.connect() as conn:
            return self._exists(conn, project_number)

    def _exists(self, conn, project_number):
        cur = execute_query(conn, "SELECT 1 FROM projects WHERE project_number = ?", (project_number,))
        return cur.fetchone() is not None

    def _check_foreign_keys(self, conn, values):
        for column, table in FOREIGN_KEYS.items():
            if column in values and not id_exists(conn, table, values[column]):
                logger.warning("Rejected %s=%s: no such %s", column, values[column], table.value)
                raise ForeignKeyError(table, values[column])

    def create(self, fields):
        """Validate and insert a project, returning its new project number"""
        values = parse_new_project(fields)
        q = (f"INSERT INTO projects ({', '.join(PROJECT_COLUMNS)}) "
             f"VALUES ({', '.join(['?'] * len(PROJECT_COLUMNS))})")
        with self.db.connect() as conn:
            self._check_foreign_keys(conn, values)
            cur = execute_query(conn, q, [values[c] for c in PROJECT_COLUMNS])
        if cur.rowcount < 1:
            raise DatabaseError("Failed to add the new project.")
        logger.info("Added project %s", cur.lastrowid)
        return cur.lastrowid

    def update(self, project_number, fields):
        """
        Apply the non-blank fields to an existing project.
        Returns the list of columns changed; empty means nothing was updated.
        """
        with self.db.connect() as conn:
            if not self._exists(conn, project_number):
                logger.warning("Project %s not found", project_number)
                raise NotFoundError("Project", project_number)
            changes = parse_project_changes(fields)
            statement = build_update_statement(project_number, changes)
            if statement is None:
                logger.info("Project %s: no fields to update", project_number)
                return []
            self._check_foreign_keys(conn, changes)
            execute_query(conn, *statement)
        logger.info("Updated project %s: %s", project_number, ", ".join(changes))
        return [c for c in PROJECT_COLUMNS if c in changes]

    def delete(self, project_number):
        with self.db.connect() as conn:
            if not self._exists(conn, project_number):
                logger.warning("Project %s not found", project_number)
                raise NotFoundError("Project", project_number)
            cur = execute_query(conn, "DELETE FROM projects WHERE project_number = ?", (project_number,))
        if cur.rowcount < 1:
            raise DatabaseError("No project was deleted.")
        logger.info("Deleted project %s", project_number)
