# seo_scout/report/json_report.py

"""
JSON report generation for SeoScout.

Serializes a SeoReport to a file.
"""
from pathlib import Path

from seo_scout.aggregator import SeoReport


def render_json_text(report: SeoReport) -> str:
    """JSON text of *report*; identical input gives identical output."""
    return report.json(pretty=True) + "\n"


def render_json(report: SeoReport, output_path: Path | str) -> Path:
    """
    Save *report* as JSON at the given path.

    :param report: SeoReport with crawl data
    :param output_path: path to the JSON file
    :return: Path of the saved file

    Example:
    ```python
    from seo_scout.report.json_report import render_json
    report_path = render_json(report, 'output/seo-report.json')
    print(f"JSON report saved to: {report_path}")
    ```
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_json_text(report), encoding="utf-8")
    return output
