"""Pytest configuration and fixtures."""

import datetime as dt
import logging
import tempfile
from pathlib import Path

import pytest

from problemrank.config import Config, reset_config
from problemrank.database import ReportStore
from problemrank.models import ReportItem
from problemrank.utils.logging_config import LOGGER_NAME

# Fixed reference time so recency scores are reproducible
NOW = dt.datetime(2026, 10, 19, 12, 0, 0)


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_config(temp_dir):
    """Create a test configuration."""
    reset_config()

    config = Config(
        data_dir=temp_dir / ".problemrank",
        log_level="WARNING",
    )
    config.ensure_directories()

    yield config

    reset_config()


@pytest.fixture
def report_store(temp_dir):
    """Create a connected report store on a temporary database."""
    store = ReportStore(temp_dir / "reports.db")
    store.connect()
    store.create_schema()
    yield store
    store.close()


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers added by setup_logging during a test."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def glass_corpus():
    """Two packing glass defects and one unrelated paint complaint."""
    return [
        ReportItem(id="1", text="kaca pecah saat packing", category="Produksi"),
        ReportItem(id="2", text="kaca retak waktu packing", category="Produksi"),
        ReportItem(id="3", text="warna cat berbeda", category="Finishing"),
    ]


@pytest.fixture
def distinct_corpus():
    """Five reports that share no vocabulary."""
    return [
        ReportItem(id="1", text="engsel longgar"),
        ReportItem(id="2", text="warna pudar"),
        ReportItem(id="3", text="kabel putus"),
        ReportItem(id="4", text="baut hilang"),
        ReportItem(id="5", text="mesin mati"),
    ]


@pytest.fixture
def mixed_corpus():
    """A larger corpus with repeated and unique problems."""
    texts = [
        "kaca pecah saat packing",
        "engsel pintu longgar",
        "kaca retak waktu packing",
        "ukuran frame tidak sesuai gambar",
        "engsel pintu kendor setelah pemasangan",
        "warna cat berbeda dengan sampel",
        "ukuran frame kurang panjang",
        "kaca pecah di gudang",
        "",
        "sealant bocor pada jendela",
        "warna cat belang",
        "jendela bocor saat hujan",
    ]
    return [
        ReportItem(
            id=str(i),
            text=text,
            category="QC" if i % 2 else "Produksi",
            date=NOW.date() - dt.timedelta(days=10 * i),
        )
        for i, text in enumerate(texts, 1)
    ]
