# File: seo_scout/report/__init__.py
"""seo_scout.report: report renderers (JSON, CSV, HTML, console) and the output sink."""

from __future__ import annotations

from seo_scout.report.csv_report import render_csv, render_csv_text
from seo_scout.report.html_report import render_html, render_html_text
from seo_scout.report.json_report import render_json, render_json_text
from seo_scout.report.sink import OutputSink
from seo_scout.report.text_report import format_recommendations, format_summary

__all__ = [
    "OutputSink",
    "format_recommendations",
    "format_summary",
    "render_csv",
    "render_csv_text",
    "render_html",
    "render_html_text",
    "render_json",
    "render_json_text",
]
