"""Load problem reports from CSV, JSON or XLSX exports."""

import csv
import datetime as dt
import json
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from openpyxl import load_workbook

from problemrank.models import ReportItem
from problemrank.utils.logging_config import get_logger

logger = get_logger()

SUPPORTED_EXTENSIONS = {".csv", ".json", ".xlsx"}

# Accepted header names per report field
COLUMN_ALIASES = {
    "id": ("id", "report_id", "no"),
    "text": ("text", "description", "deskripsi_masalah", "deskripsi"),
    "category": ("category", "kategori"),
    "date": ("date", "tanggal", "report_date"),
    "department": ("department", "originator_dept_name", "departemen"),
    "assignee": ("assignee", "ditujukan_kepada"),
    "reporter": ("reporter", "dilaporkan_oleh"),
    "status": ("status",),
    "title": ("title", "judul"),
}

REQUIRED_FIELDS = ("id", "text")

DATE_FORMATS = ("%d/%m/%Y", "%d-%m-%Y", "%d/%m/%Y %H:%M", "%d/%m/%Y %H:%M:%S")


def parse_date(value: Any) -> Optional[Union[dt.date, dt.datetime]]:
    """Parse a report date cell.

    Accepts native ``date``/``datetime`` values, ISO strings and
    day-first ``DD/MM/YYYY`` strings.

    Args:
        value: Raw cell value

    Returns:
        Parsed date, or None when the value is empty or unparseable
    """
    if value is None:
        return None
    if isinstance(value, (dt.date, dt.datetime)):
        return value

    text = str(value).strip()
    if not text:
        return None

    try:
        if len(text) == 10 and text[4] == "-":
            return dt.date.fromisoformat(text)
        return dt.datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    for fmt in DATE_FORMATS:
        try:
            parsed = dt.datetime.strptime(text, fmt)
        except ValueError:
            continue
        return parsed.date() if " " not in fmt else parsed

    logger.warning(f"Unparseable report date: {text!r}")
    return None


def _resolve_columns(headers: Iterable[str]) -> dict[str, str]:
    """Map report fields to the header names present in a file."""
    normalized = {str(header).strip().lower(): header for header in headers if header is not None}

    columns = {}
    for field, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in normalized:
                columns[field] = normalized[alias]
                break

    missing = [field for field in REQUIRED_FIELDS if field not in columns]
    if missing:
        raise ValueError(f"Missing required columns: {', '.join(missing)}")

    return columns


def _rows_to_reports(rows: list[dict[str, Any]]) -> list[ReportItem]:
    if not rows:
        return []

    columns = _resolve_columns(dict.fromkeys(key for row in rows for key in row))
    reports = []

    for row in rows:
        values = {field: row.get(header) for field, header in columns.items()}
        if values["id"] is None or str(values["id"]).strip() == "":
            logger.warning("Skipping row without id")
            continue

        values["id"] = str(values["id"]).strip()
        values["date"] = parse_date(values.get("date"))
        for field in ("text", "category", "department", "assignee", "reporter", "status", "title"):
            if values.get(field) is not None:
                values[field] = str(values[field])

        reports.append(ReportItem(**values))

    return reports


def _read_csv(file_path: Path) -> list[dict[str, Any]]:
    with open(file_path, newline="", encoding="utf-8-sig") as f:
        return list(csv.DictReader(f))


def _read_json(file_path: Path) -> list[dict[str, Any]]:
    with open(file_path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("reports", data.get("data"))
    if not isinstance(data, list):
        raise ValueError(f"Expected a list of report objects in {file_path}")

    return data


def _read_xlsx(file_path: Path) -> list[dict[str, Any]]:
    workbook = load_workbook(str(file_path), read_only=True, data_only=True)
    try:
        sheet = workbook[workbook.sheetnames[0]]

        headers = None
        rows = []
        for row in sheet.iter_rows(values_only=True):
            # Skip completely empty rows
            if not any(cell is not None and str(cell).strip() for cell in row):
                continue

            if headers is None:
                headers = [str(cell) if cell is not None else f"Col{i}" for i, cell in enumerate(row, 1)]
                continue

            rows.append(dict(zip(headers, row)))

        return rows
    finally:
        workbook.close()


def load_reports(file_path: Path) -> list[ReportItem]:
    """Load reports from a CSV, JSON or XLSX file.

    Args:
        file_path: Path to the report export

    Returns:
        Reports in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the format is unsupported or required columns are missing
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    extension = file_path.suffix.lower()
    if extension not in SUPPORTED_EXTENSIONS:
        raise ValueError(f"Unsupported report file type: {extension}")

    logger.info(f"Loading reports from {file_path}")

    if extension == ".csv":
        rows = _read_csv(file_path)
    elif extension == ".json":
        rows = _read_json(file_path)
    else:
        rows = _read_xlsx(file_path)

    reports = _rows_to_reports(rows)
    logger.info(f"Loaded {len(reports)} reports from {file_path.name}")

    return reports
