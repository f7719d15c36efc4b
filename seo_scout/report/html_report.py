# File: seo_scout/report/html_report.py
"""seo_scout.report.html_report: HTML report rendering with Jinja2."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from seo_scout.aggregator import SeoReport

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def render_html_text(
    report: SeoReport,
    template_dir: Union[Path, str, None] = None,
    generated_at: Optional[datetime] = None,
) -> str:
    """Render *report* through the Jinja2 template and return the markup."""
    env = Environment(
        loader=FileSystemLoader(str(template_dir or DEFAULT_TEMPLATE_DIR)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    context: dict[str, Any] = {
        "base_url": report.base_url,
        "crawl_date": report.crawl_date.isoformat(),
        "generated_at": (generated_at or datetime.now(timezone.utc)).isoformat(timespec="seconds"),
        "summary": report.summary,
        "summary_rows": report.summary.rows(),
        "recommendations": report.summary.recommendations(),
        "pages": report.pages,
    }
    return template.render(**context)


def render_html(
    report: SeoReport,
    output_path: Union[Path, str],
    template_dir: Union[Path, str, None] = None,
) -> Path:
    """Render the HTML report and save it at the given path.

    Args:
        report: SeoReport to render.
        output_path: path of the resulting HTML file.
        template_dir: directory with Jinja2 templates; the bundled
            ``templates/`` directory when omitted.

    Returns:
        Path of the saved HTML file.

    Example:
    ```python
    from seo_scout.report.html_report import render_html
    html_path = render_html(report, output_path='output/seo-report.html')
    ```
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_html_text(report, template_dir), encoding="utf-8")
    return output_path
