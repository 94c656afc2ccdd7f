"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest
from faker import Faker

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.diagnostics import RunLog


@pytest.fixture
def log():
    """Silent run log collecting warnings."""
    return RunLog(silent=True)


@pytest.fixture
def sample_invoice():
    """Raw invoice document as loaded from YAML."""
    return {
        "name": "Jane Contractor",
        "address": "1 Example St\nSydney NSW 2000",
        "date": "2024-01-15",
        "hourly_rate": 100,
        "currency": "AUD",
        "invoice": [
            ["Dates", "Hours worked", "Amount"],
            ["January 1-5", 40, 0],
            ["January 8-12", 32],
            ["January 15-19", 8, 500],
        ],
    }


@pytest.fixture
def fake_table():
    """Randomized line-item table factory (header + data rows)."""
    fake = Faker()
    Faker.seed(1234)

    def make(rows: int = 10, with_amounts: bool = True):
        table = [["Dates", "Hours", "Amount"] if with_amounts else ["Dates", "Hours"]]
        for _ in range(rows):
            row = [fake.date(), fake.random_int(min=1, max=40)]
            if with_amounts:
                row.append(fake.random_element([0, 0, fake.random_int(min=100, max=5000)]))
            table.append(row)
        return table

    return make


@pytest.fixture
def template_file(tmp_path):
    """Invoice template using Go-style placeholders."""
    path = tmp_path / "Invoice.html.tmpl"
    path.write_text(
        "<html><body>\n"
        "<p>{{ .name }}</p>\n"
        "<p>{{ .address }}</p>\n"
        "<p>Invoice {{ .date }} created {{ .gen_date_created }} due {{ .gen_date_due }}</p>\n"
        "<table>\n{{ .gen_invoice }}</table>\n"
        "</body></html>\n",
        encoding="utf-8",
    )
    return path
