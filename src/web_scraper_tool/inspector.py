"""Extract structured metadata and timings from a loaded page."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .browser.base import PageHandle
from .models import Heading, MetaTag, PageSnapshot, PerformanceMetrics

LOGGER = logging.getLogger(__name__)

PAGE_INFO_SCRIPT = """
() => ({
  title: document.title,
  url: window.location.href,
  metaTags: Array.from(document.querySelectorAll('meta'))
    .map(meta => ({
      name: meta.getAttribute('name') || meta.getAttribute('property'),
      content: meta.getAttribute('content'),
    }))
    .filter(meta => meta.name),
  headings: Array.from(document.querySelectorAll('h1, h2, h3')).map(h => ({
    level: Number(h.tagName.substring(1)),
    text: (h.textContent || '').trim(),
  })),
  links: document.querySelectorAll('a[href]').length,
  images: document.querySelectorAll('img').length,
  forms: document.querySelectorAll('form').length,
})
"""

PERFORMANCE_SCRIPT = """
() => {
  const nav = performance.getEntriesByType('navigation')[0];
  const paint = name => {
    const entry = performance.getEntriesByType('paint').find(p => p.name === name);
    return entry ? entry.startTime : null;
  };
  return {
    domContentLoaded: nav ? nav.domContentLoadedEventEnd - nav.domContentLoadedEventStart : null,
    loadComplete: nav ? nav.loadEventEnd - nav.loadEventStart : null,
    firstPaint: paint('first-paint'),
    firstContentfulPaint: paint('first-contentful-paint'),
  };
}
"""


class PageInspector:
    """Build :class:`PageSnapshot` objects from a page that is already loaded."""

    def snapshot(
        self,
        page: PageHandle,
        include_performance: bool,
        load_time_ms: float,
    ) -> PageSnapshot:
        info: Mapping[str, Any] = page.evaluate(PAGE_INFO_SCRIPT) or {}
        performance = None
        if include_performance:
            performance = self.performance(page, load_time_ms)
        return PageSnapshot(
            title=info.get("title") or "",
            url=info.get("url") or page.url,
            meta_tags=[
                MetaTag(name=str(tag["name"]), content=tag.get("content"))
                for tag in info.get("metaTags", [])
            ],
            headings=[
                Heading(level=int(item["level"]), text=item.get("text") or "")
                for item in info.get("headings", [])
            ],
            link_count=int(info.get("links", 0)),
            image_count=int(info.get("images", 0)),
            form_count=int(info.get("forms", 0)),
            load_time_ms=load_time_ms,
            performance=performance,
        )

    def performance(self, page: PageHandle, load_time_ms: float) -> PerformanceMetrics:
        raw: Mapping[str, Any] = page.evaluate(PERFORMANCE_SCRIPT) or {}
        LOGGER.debug("Performance entries: %s", raw)
        return PerformanceMetrics(
            load_time_ms=load_time_ms,
            dom_content_loaded_ms=_timing(raw.get("domContentLoaded")),
            load_complete_ms=_timing(raw.get("loadComplete")),
            first_paint_ms=_timing(raw.get("firstPaint")),
            first_contentful_paint_ms=_timing(raw.get("firstContentfulPaint")),
        )


def _timing(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
