"""Tests for the SQLite report store."""

import datetime as dt

import pytest

from problemrank.database import ReportStore
from problemrank.models import ReportFilters, ReportItem


@pytest.fixture
def populated_store(report_store):
    report_store.insert_reports(
        [
            ReportItem(
                id="R-1",
                title="Kaca pecah",
                text="kaca pecah saat packing",
                category="Produksi",
                date=dt.date(2026, 10, 1),
                department="Assembly Line 1",
                assignee="QC Team",
                reporter="Budi",
                status="Open",
            ),
            ReportItem(
                id="R-2",
                title="Engsel",
                text="engsel pintu longgar",
                category="QC Incoming",
                date=dt.datetime(2026, 10, 5, 16, 30),
                department="Warehouse",
                assignee="Maintenance",
                reporter="Sari",
                status="Closed",
            ),
            ReportItem(
                id="R-3",
                title="Warna",
                text="warna cat belang",
                category="Finishing",
                date=dt.date(2026, 9, 20),
                department="Assembly Line 2",
                reporter="Budi",
                status="Open",
            ),
            ReportItem(id="R-4", title="Kosong", text="   ", category="Produksi"),
        ]
    )
    return report_store


def _ids(reports):
    return [report.id for report in reports]


def test_fetch_all_skips_blank_descriptions(populated_store):
    reports = populated_store.fetch_filtered()

    assert _ids(reports) == ["R-1", "R-2", "R-3"]
    assert populated_store.count_reports() == 4


def test_fetch_round_trips_fields(populated_store):
    first, second, _ = populated_store.fetch_filtered()

    assert first.text == "kaca pecah saat packing"
    assert first.date == dt.date(2026, 10, 1)
    assert first.assignee == "QC Team"
    assert second.date == dt.datetime(2026, 10, 5, 16, 30)
    assert second.title == "Engsel"


def test_text_filters_match_case_insensitive_substrings(populated_store):
    assert _ids(populated_store.fetch_filtered(ReportFilters(department="assembly"))) == ["R-1", "R-3"]
    assert _ids(populated_store.fetch_filtered(ReportFilters(category="qc"))) == ["R-2"]
    assert _ids(populated_store.fetch_filtered(ReportFilters(assignee="team"))) == ["R-1"]
    assert _ids(populated_store.fetch_filtered(ReportFilters(reporter="budi"))) == ["R-1", "R-3"]


def test_status_matches_exactly(populated_store):
    assert _ids(populated_store.fetch_filtered(ReportFilters(status="Open"))) == ["R-1", "R-3"]
    assert populated_store.fetch_filtered(ReportFilters(status="Op")) == []


def test_search_covers_title_reporter_and_description(populated_store):
    assert _ids(populated_store.fetch_filtered(ReportFilters(search="packing"))) == ["R-1"]
    assert _ids(populated_store.fetch_filtered(ReportFilters(search="sari"))) == ["R-2"]
    assert _ids(populated_store.fetch_filtered(ReportFilters(search="warna"))) == ["R-3"]


def test_search_escapes_like_wildcards(populated_store):
    assert populated_store.fetch_filtered(ReportFilters(search="%")) == []
    assert populated_store.fetch_filtered(ReportFilters(search="_")) == []


def test_date_range_is_inclusive(populated_store):
    filters = ReportFilters(start_date=dt.date(2026, 10, 1), end_date=dt.date(2026, 10, 5))

    assert _ids(populated_store.fetch_filtered(filters)) == ["R-1", "R-2"]


def test_filters_combine(populated_store):
    filters = ReportFilters(reporter="budi", start_date=dt.date(2026, 9, 25))

    assert _ids(populated_store.fetch_filtered(filters)) == ["R-1"]


def test_insert_replaces_existing_id(populated_store):
    populated_store.insert_reports([ReportItem(id="R-1", text="kaca retak", category="QC")])

    reports = populated_store.fetch_filtered()

    assert populated_store.count_reports() == 4
    assert _ids(reports) == ["R-1", "R-2", "R-3"]
    assert reports[0].text == "kaca retak"
    assert reports[0].category == "QC"
    assert reports[0].date is None


def test_list_categories_and_departments(populated_store):
    assert populated_store.list_categories() == ["Finishing", "Produksi", "QC Incoming"]
    assert populated_store.list_departments() == ["Assembly Line 1", "Assembly Line 2", "Warehouse"]


def test_requires_connection(temp_dir):
    store = ReportStore(temp_dir / "reports.db")

    with pytest.raises(RuntimeError, match="not connected"):
        store.fetch_filtered()


def test_transaction_rolls_back(report_store):
    with pytest.raises(ValueError):
        with report_store.transaction():
            report_store.conn.execute("INSERT INTO reports (id, description) VALUES ('X', 'kaca pecah')")
            raise ValueError("boom")

    assert report_store.count_reports() == 0
