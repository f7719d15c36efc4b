# seo_scout/suggest.py
"""
Client for the metadata suggestion service.

Talks to any OpenAI-compatible ``chat/completions`` endpoint and asks for a
JSON object with ``suggestedTitle``, ``suggestedDescription`` and
``suggestedKeywords``.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from aiohttp import ClientSession, ClientTimeout

from seo_scout.config import SuggestionConfig
from seo_scout.crawler.models import PageResult, Suggestion

__all__ = ("ChatCompletionSuggester", "parse_suggestion")

_HTML_EXCERPT = 4000
_FIELD_RE = {
    key: re.compile(rf'"{key}"\s*:\s*"([^"]+)"')
    for key in ("suggestedTitle", "suggestedDescription", "suggestedKeywords")
}


def parse_suggestion(content: Optional[str]) -> Suggestion:
    """Read the service reply; tolerate replies that are not strict JSON."""
    if not content:
        return Suggestion()
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        data = {}
        for key, pattern in _FIELD_RE.items():
            match = pattern.search(content)
            if match:
                data[key] = match.group(1)
    if not isinstance(data, dict):
        return Suggestion()

    def _text(key: str) -> Optional[str]:
        value = data.get(key)
        return (value.strip() or None) if isinstance(value, str) else None

    keywords = _text("suggestedKeywords")
    return Suggestion(
        title=_text("suggestedTitle"),
        description=_text("suggestedDescription"),
        keywords=keywords.lower() if keywords else None,
    )


class ChatCompletionSuggester:
    """Suggestion service backed by a chat completions API.

    Errors (HTTP failures, timeouts, malformed payloads) are raised; the batch
    scheduler treats them as "no suggestion".
    """

    def __init__(self, session: ClientSession, config: SuggestionConfig) -> None:
        self.session = session
        self.config = config
        self.logger = logging.getLogger("SeoScout")

    def build_prompt(self, page: PageResult, html: str, reference_keywords: Sequence[str] = ()) -> str:
        parts: List[str] = [
            f"Given the HTML of the page at {page.url}, suggest an improved <title> "
            "(max 60 characters), a meta description (max 155 characters) and 3-4 "
            "comma-separated SEO keywords.",
        ]
        if reference_keywords:
            parts.append("Prefer these keywords where appropriate: " + ", ".join(reference_keywords[:10]))
        if page.title:
            parts.append(f'Current title: "{page.title}"')
        if page.description:
            parts.append(f'Current description: "{page.description}"')
        if page.keywords:
            parts.append(f'Current keywords: "{page.keywords}"')
        parts.append(f"HTML:\n{html[:_HTML_EXCERPT]}\n---")
        parts.append(
            "Respond in JSON with keys 'suggestedTitle', 'suggestedDescription' and 'suggestedKeywords'."
        )
        return "\n".join(parts)

    async def suggest(self, page: PageResult, html: str) -> Suggestion:
        payload: Dict[str, Any] = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": "You are a helpful assistant for SEO metadata optimization."},
                {"role": "user", "content": self.build_prompt(page, html, self.config.reference_keywords)},
            ],
            "response_format": {"type": "json_object"},
            "max_tokens": 350,
            "temperature": 0.7,
        }
        headers = {"Content-Type": "application/json"}
        if self.config.api_key is not None:
            headers["Authorization"] = f"Bearer {self.config.api_key.get_secret_value()}"

        url = f"{self.config.api_base.rstrip('/')}/chat/completions"
        async with self.session.post(
            url,
            json=payload,
            headers=headers,
            timeout=ClientTimeout(total=self.config.timeout),
            raise_for_status=True,
        ) as resp:
            body = await resp.json(content_type=None)

        content = body["choices"][0]["message"]["content"]
        suggestion = parse_suggestion(content)
        self.logger.debug("Suggestions for %s: %s", page.url, suggestion)
        return suggestion
