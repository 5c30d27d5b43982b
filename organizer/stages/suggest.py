"""
Ranks bookmarks from the whole store as suggestions for a workspace.

Read-only: nothing is moved, created or associated.
"""

import logging
from collections.abc import Callable, Iterable

from api.api import Bookmark, ScoredBookmark
from classifier.category import Category
from classifier.classifier import BookmarkClassifier
from storage.bookmark_store import BookmarkStore

logger = logging.getLogger(__name__)

DEFAULT_SUGGESTION_LIMIT = 10


def rank_bookmarks(
    bookmarks: Iterable[Bookmark],
    tech_stack: Iterable[str],
    classify: Callable[[str, str], Category | None],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
) -> list[ScoredBookmark]:
    """Classify, filter by tech stack and sort by confidence.

    Ties keep enumeration order (sorted() is stable with reverse=True).
    """
    if limit < 0:
        raise ValueError(f"limit must not be negative, got {limit}")

    stack = set(tech_stack)
    candidates: list[ScoredBookmark] = []
    for bookmark in bookmarks:
        if not bookmark.url:
            continue
        category = classify(bookmark.url, bookmark.title)
        if category is None or category.tech not in stack:
            continue
        candidates.append(
            ScoredBookmark(
                id=bookmark.id,
                url=bookmark.url,
                title=bookmark.title,
                category=category,
                relevance_score=category.confidence,
            )
        )

    ranked = sorted(candidates, key=lambda s: s.relevance_score, reverse=True)
    return ranked[:limit]


def suggest(
    store: BookmarkStore,
    workspace_id: str,
    tech_stack: Iterable[str],
    limit: int = DEFAULT_SUGGESTION_LIMIT,
    classifier: BookmarkClassifier | None = None,
) -> list[ScoredBookmark]:
    classifier = classifier or BookmarkClassifier()
    bookmarks = store.get_all_bookmarks()
    suggestions = rank_bookmarks(bookmarks, tech_stack, classifier, limit)
    logger.info(
        f"Found {len(suggestions)} suggestions for workspace {workspace_id} "
        f"from {len(bookmarks)} bookmarks"
    )
    return suggestions
