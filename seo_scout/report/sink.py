# File: seo_scout/report/sink.py
"""seo_scout.report.sink: writes the growing result set after each batch and the final report."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from seo_scout.aggregator import SeoReport
from seo_scout.config import OutputFormat
from seo_scout.logger import logger
from seo_scout.report.csv_report import render_csv
from seo_scout.report.html_report import render_html
from seo_scout.report.json_report import render_json

Renderer = Callable[[SeoReport, Path], Path]

RENDERERS: Dict[OutputFormat, Renderer] = {
    OutputFormat.JSON: render_json,
    OutputFormat.CSV: render_csv,
    OutputFormat.HTML: render_html,
}


class OutputSink:
    """Renders reports to ``<output_dir>/<name>.<format>``.

    The sink only reads the report it is handed; the crawl controller owns the
    page collection.
    """

    def __init__(
        self,
        output_dir: Union[str, Path],
        name: str,
        fmt: OutputFormat,
        template_dir: Union[str, Path, None] = None,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.name = name
        self.format = fmt
        self.template_dir = template_dir

    def path_for(self, fmt: OutputFormat) -> Path:
        return self.output_dir / f"{self.name}.{fmt.value}"

    def _render(self, report: SeoReport, fmt: OutputFormat) -> Path:
        path = self.path_for(fmt)
        if fmt is OutputFormat.HTML and self.template_dir is not None:
            return render_html(report, path, self.template_dir)
        return RENDERERS[fmt](report, path)

    def write_progress(self, report: SeoReport) -> Path:
        """Rewrite the selected format with the pages integrated so far."""
        path = self._render(report, self.format)
        logger.debug("Progress written to %s (%d pages)", path, len(report.pages))
        return path

    def write_final(self, report: SeoReport, formats: Optional[List[OutputFormat]] = None) -> Dict[OutputFormat, Path]:
        """Render the final report in every format (or the given ones)."""
        written: Dict[OutputFormat, Path] = {}
        for fmt in formats or list(OutputFormat):
            written[fmt] = self._render(report, fmt)
        logger.info("Report saved to %s", written.get(self.format, self.path_for(self.format)))
        return written
