"""SQLite report store with filtered fetch."""

import datetime as dt
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Iterable, Optional, Union

from problemrank.models import ReportFilters, ReportItem
from problemrank.utils.logging_config import get_logger

logger = get_logger()


# Schema SQL
SCHEMA_SQL = """
-- reports: Problem reports synced from the approval system
CREATE TABLE IF NOT EXISTS reports (
    id TEXT PRIMARY KEY,
    title TEXT,
    description TEXT NOT NULL DEFAULT '',
    category TEXT,
    report_date TEXT,
    department TEXT,
    assignee TEXT,
    reporter TEXT,
    status TEXT,
    imported_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE INDEX IF NOT EXISTS idx_reports_category ON reports(category);
CREATE INDEX IF NOT EXISTS idx_reports_department ON reports(department);
CREATE INDEX IF NOT EXISTS idx_reports_date ON reports(report_date);
CREATE INDEX IF NOT EXISTS idx_reports_status ON reports(status);
"""


def _format_date(value: Optional[Union[dt.date, dt.datetime]]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_date(value: Optional[str]) -> Optional[Union[dt.date, dt.datetime]]:
    if not value:
        return None
    if "T" in value or " " in value:
        return dt.datetime.fromisoformat(value)
    return dt.date.fromisoformat(value)


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ReportStore:
    """SQLite report store with filtered queries."""

    def __init__(self, db_path: Path):
        """Initialize store.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self.conn: Optional[sqlite3.Connection] = None

    def connect(self) -> None:
        """Open the database connection."""
        if str(self.db_path) != ":memory:":
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(self.db_path))
        self.conn.row_factory = sqlite3.Row
        logger.info(f"Connected to report store: {self.db_path}")

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.info("Report store connection closed")

    def _require_conn(self) -> sqlite3.Connection:
        if not self.conn:
            raise RuntimeError("Database not connected")
        return self.conn

    def create_schema(self) -> None:
        """Create database schema."""
        conn = self._require_conn()
        conn.executescript(SCHEMA_SQL)
        conn.commit()
        logger.info("Report store schema created")

    @contextmanager
    def transaction(self) -> Generator[None, None, None]:
        """Context manager for database transactions."""
        conn = self._require_conn()

        try:
            yield
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def insert_reports(self, reports: Iterable[ReportItem]) -> int:
        """Insert or replace reports by id.

        Args:
            reports: Reports to store

        Returns:
            Number of rows written
        """
        conn = self._require_conn()

        rows = [
            (
                report.id,
                report.title,
                report.text,
                report.category,
                _format_date(report.date),
                report.department,
                report.assignee,
                report.reporter,
                report.status,
            )
            for report in reports
        ]

        with self.transaction():
            conn.executemany(
                """
                INSERT INTO reports (
                    id, title, description, category, report_date,
                    department, assignee, reporter, status
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    title = excluded.title,
                    description = excluded.description,
                    category = excluded.category,
                    report_date = excluded.report_date,
                    department = excluded.department,
                    assignee = excluded.assignee,
                    reporter = excluded.reporter,
                    status = excluded.status
                """,
                rows,
            )

        logger.info(f"Stored {len(rows)} reports")
        return len(rows)

    def fetch_filtered(self, filters: Optional[ReportFilters] = None) -> list[ReportItem]:
        """Fetch reports with a non-empty description matching the filters.

        Text filters match case-insensitive substrings, status matches
        exactly, and the date range is inclusive on both ends.

        Args:
            filters: Filter criteria

        Returns:
            Matching reports in insertion order
        """
        conn = self._require_conn()
        filters = filters or ReportFilters()

        clauses = ["description IS NOT NULL", "TRIM(description) != ''"]
        params: list[Any] = []

        for column, value in (
            ("department", filters.department),
            ("category", filters.category),
            ("assignee", filters.assignee),
            ("reporter", filters.reporter),
        ):
            if value:
                clauses.append(f"{column} LIKE ? ESCAPE '\\'")
                params.append(f"%{_escape_like(value)}%")

        if filters.status:
            clauses.append("status = ?")
            params.append(filters.status)

        if filters.search:
            pattern = f"%{_escape_like(filters.search)}%"
            clauses.append(
                "(title LIKE ? ESCAPE '\\' OR reporter LIKE ? ESCAPE '\\' "
                "OR description LIKE ? ESCAPE '\\')"
            )
            params.extend([pattern, pattern, pattern])

        # Date-only comparison so datetimes on the end date are included
        if filters.start_date:
            clauses.append("substr(report_date, 1, 10) >= ?")
            params.append(filters.start_date.isoformat())
        if filters.end_date:
            clauses.append("substr(report_date, 1, 10) <= ?")
            params.append(filters.end_date.isoformat())

        query = f"SELECT * FROM reports WHERE {' AND '.join(clauses)} ORDER BY rowid"
        rows = conn.execute(query, params).fetchall()

        logger.debug(f"Fetched {len(rows)} reports with filters {filters.model_dump(exclude_none=True)}")

        return [
            ReportItem(
                id=row["id"],
                text=row["description"],
                category=row["category"],
                date=_parse_date(row["report_date"]),
                department=row["department"],
                assignee=row["assignee"],
                reporter=row["reporter"],
                status=row["status"],
                title=row["title"],
            )
            for row in rows
        ]

    def count_reports(self) -> int:
        """Count total reports."""
        conn = self._require_conn()
        cursor = conn.execute("SELECT COUNT(*) FROM reports")
        return cursor.fetchone()[0]

    def list_categories(self) -> list[str]:
        """Distinct non-empty categories, sorted."""
        return self._distinct("category")

    def list_departments(self) -> list[str]:
        """Distinct non-empty departments, sorted."""
        return self._distinct("department")

    def _distinct(self, column: str) -> list[str]:
        conn = self._require_conn()
        cursor = conn.execute(
            f"SELECT DISTINCT {column} FROM reports "
            f"WHERE {column} IS NOT NULL AND {column} != '' ORDER BY {column}"
        )
        return [row[0] for row in cursor.fetchall()]
