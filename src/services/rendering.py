"""
HTML template rendering.

Templates are Jinja2 text templates. Go-style placeholders such as
``{{ .gen_invoice }}`` are accepted and rewritten to ``{{ gen_invoice }}``.
"""

import re
from pathlib import Path

from jinja2 import Environment, Template, TemplateError

from core.errors import TemplateLoadFailed, TemplateRenderFailed
from models.invoice import InvoiceDocument

# "{{ .key" / "{{- .key" -> "{{ key" / "{{- key"
GO_PLACEHOLDER = re.compile(r"\{\{(-?)\s*\.(?=[A-Za-z_])")


def convert_placeholders(source: str) -> str:
    """Rewrite Go-style '.key' placeholders to plain Jinja2 names."""
    return GO_PLACEHOLDER.sub(lambda m: "{{" + m.group(1) + " ", source)


def load_template(template_path: Path) -> Template:
    """
    Read and compile the HTML template.

    Raises:
        TemplateLoadFailed: Template missing, unreadable, not UTF-8 or invalid
    """
    try:
        source = template_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateLoadFailed(f"Can't read template file {template_path}: {e}") from e

    # gen_invoice and <br> markers are already HTML
    env = Environment(autoescape=False, keep_trailing_newline=True)
    try:
        return env.from_string(convert_placeholders(source))
    except TemplateError as e:
        raise TemplateLoadFailed(f"Invalid template {template_path}: {e}") from e


def render_invoice(template: Template, document: InvoiceDocument) -> str:
    """
    Substitute the enriched invoice into the template.

    Raises:
        TemplateRenderFailed: Template execution failed
    """
    try:
        return template.render(document)
    except (TemplateError, TypeError, ValueError) as e:
        raise TemplateRenderFailed(f"Can't render template: {e}") from e
