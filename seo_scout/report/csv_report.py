# File: seo_scout/report/csv_report.py
"""seo_scout.report.csv_report: flat, one-row-per-page CSV export."""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Any, Dict, List, Sequence, Union

from seo_scout.aggregator import SeoReport
from seo_scout.crawler.models import PageResult

CSV_COLUMNS: Sequence[str] = (
    "url",
    "title",
    "suggested_title",
    "title_length",
    "title_score",
    "description",
    "suggested_description",
    "description_length",
    "description_score",
    "keywords",
    "suggested_keywords",
    "keywords_count",
    "keywords_score",
    "h1_count",
    "h1_score",
    "h1_text",
    "canonical_url",
    "og_title",
    "og_description",
    "og_image",
    "twitter_card",
    "twitter_title",
    "twitter_description",
    "twitter_image",
    "robots",
    "depth",
    "in_sitemap",
    "lastmod",
    "priority",
    "changefreq",
    "error",
)


def flatten_page(page: PageResult) -> Dict[str, Any]:
    """One CSV row; missing values become empty strings."""
    data = page.model_dump(mode="json")
    row: Dict[str, Any] = {}
    for column in CSV_COLUMNS:
        value = data.get(column)
        if column == "in_sitemap":
            row[column] = "yes" if value else "no"
        else:
            row[column] = "" if value is None else value
    return row


def render_csv_text(report: SeoReport) -> str:
    """CSV text of the report pages (header row included)."""
    buffer = io.StringIO(newline="")
    writer = csv.DictWriter(buffer, fieldnames=list(CSV_COLUMNS), lineterminator="\n")
    writer.writeheader()
    rows: List[Dict[str, Any]] = [flatten_page(p) for p in report.pages]
    writer.writerows(rows)
    return buffer.getvalue()


def render_csv(report: SeoReport, output_path: Union[str, Path]) -> Path:
    """Write the CSV export of *report* and return its path."""
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_csv_text(report), encoding="utf-8", newline="")
    return output
