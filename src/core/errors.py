"""
Error codes and exceptions raised while building an invoice.
"""


class ErrorCodes:
    """Error code constants."""

    # Fatal
    INVOICE_READ_FAILED = "InvoiceReadFailed"
    BAD_INVOICE_ROOT = "BadInvoiceRoot"
    MISSING_TABLE = "MissingTable"
    TABLE_NOT_SEQUENCE = "TableNotSequence"
    ROW_NOT_SEQUENCE = "RowNotSequence"
    TEMPLATE_LOAD_FAILED = "TemplateLoadFailed"
    TEMPLATE_RENDER_FAILED = "TemplateRenderFailed"

    # Non-fatal, reported as warnings
    NO_AMOUNT_COLUMN = "NoAmountColumn"
    NO_HOURS_COLUMN = "NoHoursColumn"
    SHORT_ROW = "ShortRow"
    BAD_DATE = "BadDate"
    NON_STRING_KEY = "NonStringKey"
    EMPTY_HEADER = "EmptyHeader"


class InvoiceError(Exception):
    """Base class for invoice generation errors."""

    code = "InvoiceError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvoiceReadFailed(InvoiceError):
    code = ErrorCodes.INVOICE_READ_FAILED


class BadInvoiceRoot(InvoiceError):
    code = ErrorCodes.BAD_INVOICE_ROOT


class MissingTable(InvoiceError):
    code = ErrorCodes.MISSING_TABLE


class TableNotSequence(InvoiceError):
    code = ErrorCodes.TABLE_NOT_SEQUENCE


class RowNotSequence(InvoiceError):
    code = ErrorCodes.ROW_NOT_SEQUENCE


class NoAmountColumn(InvoiceError):
    code = ErrorCodes.NO_AMOUNT_COLUMN


class TemplateLoadFailed(InvoiceError):
    code = ErrorCodes.TEMPLATE_LOAD_FAILED


class TemplateRenderFailed(InvoiceError):
    code = ErrorCodes.TEMPLATE_RENDER_FAILED
