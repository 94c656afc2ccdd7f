"""
Invoice and config document loading.

Both documents share the same YAML schema: a mapping whose values are passed
through to the template. The config supplies defaults for keys the invoice
leaves unset.
"""

from pathlib import Path

import yaml

from core.diagnostics import RunLog
from core.errors import BadInvoiceRoot, ErrorCodes, InvoiceError, InvoiceReadFailed
from models.invoice import InvoiceDocument


class InvoiceLoader(yaml.SafeLoader):
    """SafeLoader that keeps dates and timestamps as plain strings."""


InvoiceLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def load_document(path: Path, log: RunLog) -> InvoiceDocument:
    """
    Read a YAML document whose root must be a mapping.

    Keys that are not strings are dropped with a warning.

    Raises:
        InvoiceReadFailed: File unreadable, not UTF-8 or YAML malformed
        BadInvoiceRoot: Root of the document is not a mapping
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.load(f, Loader=InvoiceLoader)
    except (OSError, UnicodeDecodeError) as e:
        raise InvoiceReadFailed(f"Can't read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise InvoiceReadFailed(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise BadInvoiceRoot(
            f"Expected a mapping at the root of {path}, got {type(data).__name__}"
        )

    document = {}
    for key, value in data.items():
        if not isinstance(key, str):
            log.warn(ErrorCodes.NON_STRING_KEY, f"Ignoring non-string key {key!r} in {path}")
            continue
        document[key] = value

    return document


def load_config(path: Path | None, log: RunLog) -> InvoiceDocument:
    """Read the optional config document, returning an empty mapping on any failure."""
    if path is None:
        return {}
    try:
        return load_document(path, log)
    except InvoiceError as e:
        log.info(e.code, f"Config not loaded: {e}")
        return {}


def merge_config(invoice: InvoiceDocument, config: InvoiceDocument) -> InvoiceDocument:
    """
    Copy config values into the invoice where the invoice has no value.

    Shallow: nested mappings and sequences are not merged.
    """
    for key, value in config.items():
        if invoice.get(key) is None:
            invoice[key] = value
    return invoice
