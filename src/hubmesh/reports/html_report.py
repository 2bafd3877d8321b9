from __future__ import annotations

from datetime import datetime
from pathlib import Path

from jinja2 import Template

from .records import ReportTable

REPORT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{{ title }}</title>
<style>
  body { font-family: -apple-system, "Segoe UI", Helvetica, Arial, sans-serif;
         margin: 2em; color: #222; }
  h1 { font-size: 1.5em; }
  h2 { font-size: 1.2em; margin-top: 2em; }
  table { border-collapse: collapse; width: 100%; }
  th, td { border: 1px solid #ddd; padding: 4px 8px; text-align: left; }
  th { background: #f0f3f7; }
  tr:nth-child(even) { background: #fafafa; }
  .note { color: #666; font-size: 0.9em; margin: 0.3em 0; }
  .generated { color: #999; font-size: 0.8em; }
</style>
</head>
<body>
<h1>{{ title }}</h1>
<p class="generated">Generated {{ generated }}{% if last_updated %}
  &middot; inventory scanned {{ last_updated }}{% endif %}</p>
{% for table in tables %}
<h2>{{ table.title }}</h2>
{% if table.rows %}
<table>
  <thead>
    <tr>{% for column in table.columns %}<th>{{ column }}</th>{% endfor %}</tr>
  </thead>
  <tbody>
  {% for row in table.rows %}
    <tr>{% for cell in row %}<td>{% if cell.url %}<a href="{{ cell.url }}" target="_blank">{{ cell.text }}</a>{% else %}{{ cell.text }}{% endif %}</td>{% endfor %}</tr>
  {% endfor %}
  </tbody>
</table>
{% else %}
<p class="note">Nothing to show.</p>
{% endif %}
{% for note in table.notes %}<p class="note">{{ note }}</p>{% endfor %}
{% endfor %}
</body>
</html>
"""


def render_html(
    title: str,
    tables: list[ReportTable],
    last_updated: datetime | None = None,
) -> str:
    template = Template(REPORT_TEMPLATE, autoescape=True)
    return template.render(
        title=title,
        tables=tables,
        generated=datetime.now().strftime("%Y-%m-%d %H:%M"),
        last_updated=last_updated.strftime("%Y-%m-%d %H:%M") if last_updated else "",
    )


def write_html(
    path: Path,
    title: str,
    tables: list[ReportTable],
    last_updated: datetime | None = None,
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_html(title, tables, last_updated), encoding="utf-8")
    return path
