import pytest

from core.errors import TemplateLoadFailed, TemplateRenderFailed
from services.rendering import convert_placeholders, load_template, render_invoice


def test_convert_placeholders():
    source = "{{ .date }} {{- .name}} {{ name }} {{ 1.5 }}"

    assert convert_placeholders(source) == "{{ date }} {{- name}} {{ name }} {{ 1.5 }}"


def test_render_invoice_substitutes_fields(template_file):
    template = load_template(template_file)

    html = render_invoice(
        template,
        {
            "name": "Jane",
            "address": "1 Example St<br>\nSydney",
            "date": "20240115",
            "gen_date_created": "15 January 2024",
            "gen_date_due": "29 January 2024",
            "gen_invoice": '\t<tr class="heading">\n\t</tr>\n',
        },
    )

    assert "<p>Jane</p>" in html
    assert "<p>1 Example St<br>\nSydney</p>" in html
    assert "Invoice 20240115 created 15 January 2024 due 29 January 2024" in html
    assert '<table>\n\t<tr class="heading">\n\t</tr>\n</table>' in html
    assert html.endswith("</html>\n")


def test_render_invoice_missing_keys_render_empty(tmp_path):
    path = tmp_path / "t.html"
    path.write_text("[{{ .nothing }}]")

    assert render_invoice(load_template(path), {}) == "[]"


def test_load_template_missing(tmp_path):
    with pytest.raises(TemplateLoadFailed):
        load_template(tmp_path / "missing.tmpl")


def test_load_template_invalid(tmp_path):
    path = tmp_path / "t.html"
    path.write_text("{% if %}")

    with pytest.raises(TemplateLoadFailed):
        load_template(path)


def test_render_invoice_failure(tmp_path):
    path = tmp_path / "t.html"
    path.write_text('{{ "%d" % name }}')

    with pytest.raises(TemplateRenderFailed):
        render_invoice(load_template(path), {"name": "Jane"})
