"""
Loading and validation of SeoScout crawl settings.
Pydantic describes the schema; an optional YAML/JSON file supplies defaults
which keyword overrides (usually CLI flags) take precedence over.
"""
from __future__ import annotations

import errno
import json
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    SecretStr,
    field_validator,
    model_validator,
)

__all__ = [
    "CrawlConfig",
    "OutputFormat",
    "SuggestionConfig",
    "TraversalPolicy",
    "load_config",
    "read_settings",
]


class OutputFormat(str, Enum):
    JSON = "json"
    CSV = "csv"
    HTML = "html"


class TraversalPolicy(str, Enum):
    """How the frontier is seeded."""

    SINGLE_PAGE = "single_page"
    SITEMAP_ONLY = "sitemap_only"
    SITEMAP_AND_LINKS = "sitemap_and_links"


class SuggestionConfig(BaseModel):
    """Settings for the metadata suggestion service (OpenAI-compatible API)."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    enabled: bool = Field(False, description="Ask the service for better title/description/keywords.")
    api_base: str = Field("https://api.openai.com/v1", description="Base URL of the chat completions API.")
    model: str = Field("gpt-4.1", min_length=1)
    api_key: Optional[SecretStr] = Field(
        default_factory=lambda: SecretStr(os.environ["OPENAI_API_KEY"]) if os.environ.get("OPENAI_API_KEY") else None,
        exclude=True,
        description="Falls back to $OPENAI_API_KEY; never serialized.",
    )
    timeout: float = Field(30.0, gt=0, description="Timeout for one suggestion request (seconds).")
    reference_keywords: List[str] = Field(
        default_factory=list, description="Ranked keywords the service should prefer."
    )


class CrawlConfig(BaseModel):
    """Configuration for one crawl run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_url: HttpUrl = Field(..., description="Site (or single page) to crawl.")
    sitemap_url: Optional[str] = Field(None, description="Sitemap override; discovered via robots.txt otherwise.")
    max_depth: int = Field(3, ge=0, description="Maximum link depth when following links.")
    page_limit: int = Field(100, ge=1, description="Hard limit on processed pages.")
    concurrency: int = Field(5, ge=1, description="Pages fetched concurrently per batch.")
    timeout: float = Field(10.0, gt=0, description="Timeout for one request (seconds).")
    user_agent: str = Field("SEO-Metadata-Crawler/1.0 (SeoScout)", min_length=1)
    follow_links: bool = True
    sitemap_only: bool = False
    single_page: bool = False
    force_refresh: bool = Field(False, description="Ignore any cached crawl for this site.")
    cache_ttl: float = Field(24 * 60 * 60, ge=0, description="Age (seconds) below which a cache is reused as is.")
    output_name: str = Field("seo-report", min_length=1)
    output_format: OutputFormat = OutputFormat.CSV
    output_dir: Path = Path("output")
    cache_dir: Path = Path("output/cache")
    suggestions: SuggestionConfig = Field(default_factory=SuggestionConfig)

    @field_validator("base_url", mode="before")
    def _add_scheme(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            if v and not v.startswith(("http://", "https://")):
                return "https://" + v
        return v

    @model_validator(mode="before")
    def _single_page_footprint(cls, data: Any) -> Any:
        # a single page is never expanded: no sitemap, no links, one fetch
        if isinstance(data, dict) and data.get("single_page"):
            data = {**data, "max_depth": 0, "page_limit": 1, "follow_links": False, "sitemap_url": None}
        return data

    @property
    def policy(self) -> TraversalPolicy:
        if self.single_page:
            return TraversalPolicy.SINGLE_PAGE
        if self.sitemap_only:
            return TraversalPolicy.SITEMAP_ONLY
        return TraversalPolicy.SITEMAP_AND_LINKS

    @property
    def output_path(self) -> Path:
        return self.output_dir / f"{self.output_name}.{self.output_format.value}"

    def public_options(self) -> Dict[str, Any]:
        """Settings as stored in cache files and reports (secrets excluded)."""
        return self.model_dump(mode="json")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def read_settings(path: Union[str, Path]) -> dict[str, Any]:
    """Read a YAML or JSON settings file into a plain mapping."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlConfig:
    """
    Build a validated CrawlConfig from an optional settings file.

    Overrides whose value is None are ignored so that unset CLI flags do not
    mask values coming from the file. Raises FileNotFoundError for a missing
    file and pydantic.ValidationError for invalid settings.
    """
    data: dict[str, Any] = read_settings(path) if path is not None else {}
    data.update({k: v for k, v in overrides.items() if v is not None})

    return CrawlConfig(**data)
