"""
Maps a category to its "Dev - ..." folder and finds or creates that folder
in the bookmark store.
"""

import logging
import threading

from api.api import BookmarkTreeNode
from classifier.category import Category
from storage.bookmark_models import BOOKMARKS_BAR_ID
from storage.bookmark_store import BookmarkStore

logger = logging.getLogger(__name__)

FOLDER_PREFIX = "Dev - "

FOLDER_NAMES_BY_TYPE = {
    "repository": "Repositories",
    "documentation": "Documentation",
    "package": "Packages",
}


def folder_name(category: Category) -> str:
    if category.type == "technology":
        tech = category.tech
        return f"{FOLDER_PREFIX}{tech[:1].upper()}{tech[1:]}"
    return FOLDER_PREFIX + FOLDER_NAMES_BY_TYPE.get(category.type, "General")


def find_folder_by_name(
    tree: list[BookmarkTreeNode], name: str
) -> BookmarkTreeNode | None:
    """Depth-first search for a folder (a node without url) titled ``name``."""
    for node in tree:
        if node.title == name and node.is_folder:
            return node
        if node.children:
            found = find_folder_by_name(node.children, name)
            if found is not None:
                return found
    return None


def default_parent(tree: list[BookmarkTreeNode], preferred_id: str) -> BookmarkTreeNode:
    """The bookmarks bar, or the first top-level folder when it is missing."""
    if not tree or not tree[0].children:
        raise LookupError("Bookmark tree has no top-level folder to create into")
    top_level = tree[0].children
    for child in top_level:
        if child.id == preferred_id:
            return child
    return top_level[0]


class FolderResolver:
    """Find-or-create for category folders.

    Resolution of one folder name is serialized by a per-name lock, so two
    concurrent resolutions of a new category create a single folder.
    """

    def __init__(self, store: BookmarkStore, default_parent_id: str = str(BOOKMARKS_BAR_ID)):
        self.store = store
        self.default_parent_id = default_parent_id
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, name: str) -> threading.Lock:
        with self._locks_guard:
            return self._locks.setdefault(name, threading.Lock())

    def resolve_folder(self, category: Category) -> str:
        name = folder_name(category)
        with self._lock_for(name):
            tree = self.store.get_tree()
            existing = find_folder_by_name(tree, name)
            if existing is not None:
                return existing.id

            parent = default_parent(tree, self.default_parent_id)
            folder = self.store.create(parent_id=parent.id, title=name)
            logger.info(f"Created folder '{name}' ({folder.id}) under '{parent.title}'")
            return folder.id
