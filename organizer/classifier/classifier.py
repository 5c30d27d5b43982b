"""Pattern based bookmark classifier.

The classifier walks the technology table in order and stops at the first
technology with a pattern contained in ``"<url> <title>"``. Only when no
technology matches does it fall back to the known-domain table, which is
matched against the URL alone.
"""

from __future__ import annotations

from classifier.category import (
    DOMAIN_CONFIDENCE,
    PATTERN_CONFIDENCE_CAP,
    PATTERN_CONFIDENCE_STEP,
    Category,
    TechnologyCategory,
    make_category,
)
from utils.config import Config, get_config


def build_search_text(url: str, title: str | None) -> str:
    return f"{url.lower()} {(title or '').lower()}"


def pattern_confidence(content: str, pattern: str) -> float:
    """Confidence for a pattern hit: 0.3 per occurrence, capped at 0.9."""
    if not pattern:
        return 0.0
    occurrences = content.count(pattern.lower())
    return round(min(occurrences * PATTERN_CONFIDENCE_STEP, PATTERN_CONFIDENCE_CAP), 2)


def match_technology(content: str, config: Config) -> TechnologyCategory | None:
    for entry in config.patterns:
        for pattern in entry.patterns:
            if pattern in content:
                return TechnologyCategory(
                    tech=entry.tech,
                    confidence=pattern_confidence(content, pattern),
                )
    return None


def match_domain(url: str, config: Config) -> Category | None:
    lowered_url = url.lower()
    for entry in config.domains:
        if entry.domain in lowered_url:
            return make_category(entry.type, entry.tech, DOMAIN_CONFIDENCE)
    return None


def classify(url: str, title: str | None, config: Config | None = None) -> Category | None:
    """Classify a bookmark from its URL and title.

    Args:
        url: Bookmark URL
        title: Bookmark title (may be empty)
        config: Pattern and domain tables (defaults to the packaged tables)

    Returns:
        The first matching technology category, else the first matching
        domain category, else None
    """
    config = config or get_config()
    content = build_search_text(url, title)

    category = match_technology(content, config)
    if category is not None:
        return category

    return match_domain(url, config)


class BookmarkClassifier:
    """Callable wrapper binding a config to :func:`classify`."""

    def __init__(self, config: Config | None = None):
        self.config = config or get_config()

    def __call__(self, url: str, title: str | None) -> Category | None:
        return classify(url, title, self.config)
