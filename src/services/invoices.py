"""
Invoice Enrichment Service

Turns a loaded invoice document into the mapping handed to the HTML template.
Fills missing line-item amounts from hours and the hourly rate, appends total
(and optional USD) summary rows, renders the line-item table as HTML rows and
derives the created/due dates.
"""

from datetime import date, datetime, timedelta

from markupsafe import escape

from core.config import (
    AMOUNT_HEADER_LABEL,
    AMOUNT_HEADER_MATCH,
    COMPACT_DATE_FORMAT,
    CURRENCY_KEY,
    DATE_KEY,
    DUE_DAYS,
    GEN_DATE_CREATED_KEY,
    GEN_DATE_DUE_KEY,
    GEN_INVOICE_KEY,
    HOURLY_RATE_KEY,
    HOURS_HEADER_MATCH,
    INPUT_DATE_FORMAT,
    LINE_BREAK,
    RECEIVED_USD_KEY,
    ROW_CLASS_HEADING,
    ROW_CLASS_ITEM,
    ROW_CLASS_TOTAL,
    TABLE_KEY,
    TOTAL_LABEL,
    USD_AMOUNT_LABEL,
    USD_TOTAL_LABEL,
)
from core.diagnostics import RunLog
from core.errors import (
    ErrorCodes,
    MissingTable,
    NoAmountColumn,
    RowNotSequence,
    TableNotSequence,
)
from models.invoice import (
    Cell,
    InvoiceDocument,
    InvoiceResult,
    LineItemTable,
    Row,
    RunOptions,
)
from services.loader import load_config, load_document, merge_config
from services.rendering import load_template, render_invoice


# =============================================================================
# VALUE HELPERS
# =============================================================================


def to_number(value) -> float:
    """
    Coerce a cell value to a float.

    Ints and floats are cast directly, strings are parsed (unparseable -> 0),
    anything else is 0.
    """
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return 0.0
    return 0.0


def format_number(value: float | int) -> str:
    """Format a number the short way: 800.0 -> '800', 12.5 -> '12.5'."""
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def format_cell(value: Cell) -> str:
    """Default textual rendering of a cell."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def format_human_date(d: date) -> str:
    """Format date as 'D Month YYYY' (e.g., '2 January 2006')."""
    return f"{d.day} {d.strftime('%B')} {d.year}"


# =============================================================================
# DOCUMENT PREPARATION
# =============================================================================


def expand_line_breaks(document: InvoiceDocument) -> InvoiceDocument:
    """Suffix every line of multi-line string fields with an HTML line break."""
    for key, value in document.items():
        if isinstance(value, str) and "\n" in value:
            document[key] = value.replace("\r\n", "\n").replace("\n", f"{LINE_BREAK}\n")
    return document


def extract_table(document: InvoiceDocument) -> LineItemTable:
    """
    Extract the line-item table from the document.

    The normalized table (a list of row lists) is written back under the
    same key so later stages and the template share it.

    Raises:
        MissingTable: No 'invoice' key
        TableNotSequence: Value is not a sequence
        RowNotSequence: A row is not a sequence
    """
    if TABLE_KEY not in document:
        raise MissingTable(f"Invoice has no '{TABLE_KEY}' table")

    value = document[TABLE_KEY]
    if not isinstance(value, (list, tuple)):
        raise TableNotSequence(
            f"'{TABLE_KEY}' must be a sequence of rows, got {type(value).__name__}"
        )

    table = []
    for i, row in enumerate(value):
        if not isinstance(row, (list, tuple)):
            raise RowNotSequence(
                f"Row {i} of '{TABLE_KEY}' must be a sequence, got {type(row).__name__}"
            )
        table.append(list(row))

    document[TABLE_KEY] = table
    return table


# =============================================================================
# COLUMNS
# =============================================================================


def find_column(header: Row, match: str) -> int:
    """
    Locate a column by case-insensitive substring match on the header row.

    The rightmost matching header wins. Non-string header cells are ignored.

    Returns:
        Column index, or -1 if no header matches
    """
    index = -1
    for i, cell in enumerate(header):
        if isinstance(cell, str) and match in cell.lower():
            index = i
    return index


def find_columns(table: LineItemTable) -> tuple[int, int]:
    """Return (amount_index, hours_index) for the table's header row."""
    if not table:
        return -1, -1
    header = table[0]
    return find_column(header, AMOUNT_HEADER_MATCH), find_column(header, HOURS_HEADER_MATCH)


def describe_columns(table: LineItemTable) -> str:
    """Describe the bound amount/hours columns, so mis-bound headers are visible."""
    amount_index, hours_index = find_columns(table)
    header = table[0] if table else []
    parts = []
    for name, index in (("amount", amount_index), ("hours", hours_index)):
        if index < 0:
            parts.append(f"{name}=none")
        else:
            parts.append(f"{name}={index} ({header[index]!r})")
    return "Columns: " + ", ".join(parts)


# =============================================================================
# AMOUNTS AND TOTALS
# =============================================================================


def fill_amounts(table: LineItemTable, hourly_rate, log: RunLog) -> None:
    """
    Fill zero or missing line-item amounts with hours x hourly rate.

    Adds an 'Amount' header when the table has no amount column. Existing
    non-zero amounts are kept as they are.
    """
    if not table or not table[0]:
        log.warn(ErrorCodes.EMPTY_HEADER, "Invoice table has no header row")
        return

    amount_index, hours_index = find_columns(table)
    if hours_index < 0:
        log.warn(ErrorCodes.NO_HOURS_COLUMN, "No hours column found, amounts not filled")
        return

    header = table[0]
    if amount_index < 0:
        header.append(AMOUNT_HEADER_LABEL)
        amount_index = len(header) - 1

    rate = to_number(hourly_rate)

    for row_number, row in enumerate(table[1:], start=1):
        if len(row) <= hours_index:
            log.warn(ErrorCodes.SHORT_ROW, f"Row {row_number} has no hours cell, skipped")
            continue

        amount = to_number(row[hours_index]) * rate

        if len(row) > amount_index:
            if to_number(row[amount_index]) == 0:
                row[amount_index] = amount
        else:
            # Pad up to the amount column
            row.extend([""] * (amount_index - len(row)))
            row.append(amount)


def append_total(table: LineItemTable, log: RunLog) -> float:
    """
    Append a 'Total' row summing the amount and hours columns.

    Returns:
        Total amount

    Raises:
        NoAmountColumn: Header row is empty or has no amount column
    """
    if not table or not table[0]:
        raise NoAmountColumn("Invoice table has no header row")

    amount_index, hours_index = find_columns(table)
    if amount_index < 0:
        raise NoAmountColumn("No amount column found in invoice table header")
    if hours_index < 0:
        log.warn(ErrorCodes.NO_HOURS_COLUMN, "No hours column found, hours not totalled")

    total_amount = 0.0
    total_hours = 0.0

    for row_number, row in enumerate(table[1:], start=1):
        if len(row) > amount_index:
            total_amount += to_number(row[amount_index])
        else:
            log.warn(ErrorCodes.SHORT_ROW, f"Row {row_number} has no amount cell, not totalled")

        if hours_index >= 0:
            if len(row) > hours_index:
                total_hours += to_number(row[hours_index])
            else:
                log.warn(ErrorCodes.SHORT_ROW, f"Row {row_number} has no hours cell, not totalled")

    total_row: Row = [""] * (amount_index + 1)
    total_row[0] = TOTAL_LABEL
    total_row[amount_index] = format_number(total_amount)
    if 0 <= hours_index < len(total_row) and hours_index != amount_index:
        total_row[hours_index] = format_number(total_hours)

    table.append(total_row)
    return total_amount


def annotate_currency(table: LineItemTable, currency, log: RunLog) -> None:
    """Prefix the currency label onto the amount cell of every row below the header."""
    amount_index, _ = find_columns(table)
    if amount_index < 0:
        return

    for row_number, row in enumerate(table[1:], start=1):
        if len(row) <= amount_index:
            log.warn(ErrorCodes.SHORT_ROW, f"Row {row_number} has no amount cell, currency not added")
            continue
        row[amount_index] = f"{currency} {format_number(to_number(row[amount_index]))}"


def append_usd_summary(table: LineItemTable, total_amount: float, received_usd) -> bool:
    """
    Append the USD summary row after the total row.

    Skipped when no USD amount was received.

    Returns:
        True if the row was appended
    """
    usd = to_number(received_usd)
    if usd == 0:
        return False

    rate = total_amount / usd
    usd_row: Row = [""] * len(table[-1])
    usd_row[0] = USD_TOTAL_LABEL.format(rate=rate)
    usd_row[-1] = USD_AMOUNT_LABEL.format(amount=format_cell(received_usd))
    table.append(usd_row)
    return True


# =============================================================================
# HTML OUTPUT
# =============================================================================


def row_class(index: int, row_count: int, total_line_count: int) -> str:
    """CSS class for a table row by position."""
    if index == 0:
        return ROW_CLASS_HEADING
    if index >= row_count - total_line_count:
        return ROW_CLASS_TOTAL
    return ROW_CLASS_ITEM


def render_rows(table: LineItemTable, total_line_count: int, escape_cells: bool = True) -> str:
    """
    Render the table as HTML <tr>/<td> rows.

    Args:
        table: Final table including summary rows
        total_line_count: Number of trailing summary rows
        escape_cells: Escape HTML special characters in cell text
    """
    lines = []
    for i, row in enumerate(table):
        lines.append(f'\t<tr class="{row_class(i, len(table), total_line_count)}">')
        for cell in row:
            text = format_cell(cell)
            if escape_cells:
                text = str(escape(text))
            lines.append(f"\t\t<td>{text}</td>")
        lines.append("\t</tr>")
    return "\n".join(lines) + "\n" if lines else ""


# =============================================================================
# DATES
# =============================================================================


def parse_invoice_date(value) -> date | None:
    """Parse the invoice date from its YYYY-MM-DD string."""
    if isinstance(value, str):
        try:
            return datetime.strptime(value.strip(), INPUT_DATE_FORMAT).date()
        except ValueError:
            return None
    return None


def format_dates(document: InvoiceDocument, log: RunLog) -> None:
    """Rewrite the invoice date compactly and derive created/due labels."""
    value = document.get(DATE_KEY)
    invoice_date = parse_invoice_date(value)
    if invoice_date is None:
        log.warn(ErrorCodes.BAD_DATE, f"Invoice date {value!r} is not a YYYY-MM-DD date")
        return

    document[DATE_KEY] = invoice_date.strftime(COMPACT_DATE_FORMAT)
    document[GEN_DATE_CREATED_KEY] = format_human_date(invoice_date)
    document[GEN_DATE_DUE_KEY] = format_human_date(invoice_date + timedelta(days=DUE_DAYS))


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================


def enrich_invoice(
    document: InvoiceDocument,
    log: RunLog,
    escape_cells: bool = True,
) -> InvoiceResult:
    """
    Run the enrichment pipeline over a merged invoice document.

    The document is modified in place: the table gains summary rows and
    'gen_invoice', 'gen_date_created', 'gen_date_due' and 'date' are written.

    Raises:
        MissingTable, TableNotSequence, RowNotSequence: Bad 'invoice' value
    """
    expand_line_breaks(document)
    table = extract_table(document)

    fill_amounts(table, document.get(HOURLY_RATE_KEY), log)
    log.info("ColumnBinding", describe_columns(table))

    amount_index, hours_index = find_columns(table)
    result = InvoiceResult(
        document=document,
        table=table,
        amount_index=amount_index,
        hours_index=hours_index,
    )

    try:
        total_amount = append_total(table, log)
    except NoAmountColumn as e:
        log.warn(e.code, f"{e}, total row omitted")
    else:
        result.total_amount = total_amount
        result.total_line_count = 1

        currency = document.get(CURRENCY_KEY)
        if currency:
            annotate_currency(table, currency, log)

        if append_usd_summary(table, total_amount, document.get(RECEIVED_USD_KEY)):
            result.total_line_count = 2

    document[GEN_INVOICE_KEY] = render_rows(table, result.total_line_count, escape_cells)
    format_dates(document, log)

    result.warnings = list(log.details)
    return result


def generate_invoice(options: RunOptions, log: RunLog) -> str:
    """
    Main entry point for invoice generation.

    Args:
        options: Parsed run options (invoice, template and config paths)
        log: Run log receiving warnings

    Returns:
        Rendered HTML invoice

    Raises:
        InvoiceError: Any fatal error (unreadable invoice, bad table, bad template)
    """
    invoice = load_document(options.invoice_path, log)
    config = load_config(options.config_path, log)
    merge_config(invoice, config)

    result = enrich_invoice(invoice, log, options.escape_cells)

    template = load_template(options.template_path)
    return render_invoice(template, result.document)
