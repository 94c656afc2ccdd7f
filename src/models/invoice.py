"""
Data models for invoice documents and pipeline results.

Cells stay dynamic (whatever YAML produced); type aliases document the
expected shapes.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

Cell = str | int | float | None
Row = list[Cell]
LineItemTable = list[Row]
InvoiceDocument = dict[str, Any]


@dataclass
class RunOptions:
    """Parsed command line options for one run."""

    invoice_path: Path | None
    template_path: Path
    config_path: Path
    generate_offset: int | None = None
    escape_cells: bool = True
    verbose: bool = False


@dataclass
class InvoiceResult:
    """Result of invoice enrichment."""

    document: InvoiceDocument
    table: LineItemTable
    total_amount: float | None = None
    total_line_count: int = 0
    amount_index: int = -1
    hours_index: int = -1
    warnings: list[tuple[str, str]] = field(default_factory=list)
