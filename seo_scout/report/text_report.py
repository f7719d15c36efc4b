# File: seo_scout/report/text_report.py
"""seo_scout.report.text_report: plain-text summary table for the console."""

from __future__ import annotations

from typing import List

from seo_scout.aggregator import ReportSummary

_HEADER = ("Metric", "Count", "Percentage")


def format_summary(summary: ReportSummary) -> str:
    """Bordered three-column table of the summary rows."""
    rows = [(name, str(count), f"{pct}%") for name, count, pct in summary.rows()]
    widths = [max(len(r[i]) for r in [_HEADER, *rows]) for i in range(3)]
    rule = "+" + "+".join("-" * (w + 2) for w in widths) + "+"

    def line(cells: tuple[str, str, str]) -> str:
        return "| " + " | ".join(c.ljust(w) for c, w in zip(cells, widths)) + " |"

    out: List[str] = [rule, line(_HEADER), rule]
    out.extend(line(r) for r in rows)
    out.append(rule)
    return "\n".join(out)


def format_recommendations(summary: ReportSummary) -> str:
    tips = summary.recommendations()
    if not tips:
        return "No issues found."
    return "\n".join(f"- {tip}" for tip in tips)
