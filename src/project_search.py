from datetime import date

from database import execute_query
from project import Project


def _escape_like(text):
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ProjectSearch:
    """Read-only project queries"""

    def __init__(self, db):
        self.db = db

    def _fetch(self, query, params=()):
        with self.db.connect() as conn:
            rows = execute_query(conn, query, params).fetchall()
        return [Project.from_row(r) for r in rows]

    def by_number(self, project_number):
        """Exact match on project number, None if there is no such project"""
        rows = self._fetch("SELECT * FROM projects WHERE project_number = ?", (project_number,))
        return rows[0] if rows else None

    def by_name(self, name):
        # Substring match; case sensitivity follows SQLite's LIKE (ASCII-insensitive)
        pattern = f"%{_escape_like(name)}%"
        return self._fetch(
            "SELECT * FROM projects WHERE project_name LIKE ? ESCAPE '\\' ORDER BY project_number",
            (pattern,),
        )

    def list_all(self):
        return self._fetch("SELECT * FROM projects ORDER BY project_number")

    def list_incomplete(self):
        """Projects not yet finalised"""
        return self._fetch("SELECT * FROM projects WHERE finalised = 0 ORDER BY project_number")

    def list_past_deadline(self, today=None):
        """Open projects (no completion date) whose deadline is before today"""
        today = today or date.today()
        return self._fetch(
            "SELECT * FROM projects WHERE deadline_date < ? AND completion_date IS NULL "
            "ORDER BY project_number",
            (today,),
        )
