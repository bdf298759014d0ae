"""
Error types raised by the PoisePMS core.

Everything derives from PoiseError so the menu can report any failure of a
single action and carry on with the loop.
"""


class PoiseError(Exception):
    """Base class for every error the core raises"""
    pass


class ValidationError(PoiseError):
    """Input rejected before touching the database (blank required field etc.)"""

    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field


class ParseError(ValidationError):
    """A number, date, boolean or id could not be parsed"""
    pass


class ForeignKeyError(PoiseError):
    """A referenced architect/contractor/customer id does not exist"""

    def __init__(self, table, record_id):
        super().__init__(f"ID {record_id} does not exist in the {table.value} table.")
        self.table = table
        self.record_id = record_id


class NotFoundError(PoiseError):
    """Operation on an id that does not exist"""

    def __init__(self, label, record_id):
        super().__init__(f"{label} {record_id} not found.")
        self.label = label
        self.record_id = record_id


class DatabaseError(PoiseError):
    """Connection or statement failure, wraps the sqlite3 error"""
    pass
