"""Bookmark tree backed by bookmarks.db.

Ids are exposed as strings, the way browsers hand them out.
"""

import logging

from sqlalchemy import func, select

from api.api import Bookmark, BookmarkTreeNode
from storage.bookmark_models import BookmarkNode, ROOT_NODE_ID
from storage.manager import StorageManager, utc_now_iso

logger = logging.getLogger(__name__)


class BookmarkNotFoundError(LookupError):
    pass


def _parse_id(bookmark_id: str | int) -> int:
    try:
        return int(bookmark_id)
    except (TypeError, ValueError) as e:
        raise BookmarkNotFoundError(f"Bookmark {bookmark_id!r} not found") from e


def _to_bookmark(node: BookmarkNode) -> Bookmark:
    return Bookmark(
        id=str(node.id),
        url=node.url,
        title=node.title or "",
        parent_id=None if node.parent_id is None else str(node.parent_id),
    )


class BookmarkStore:
    def __init__(self, storage: StorageManager):
        self.storage = storage

    def get(self, bookmark_id: str | int) -> Bookmark:
        with self.storage.get_session(read_only=True) as session:
            node = session.get(BookmarkNode, _parse_id(bookmark_id))
            if node is None:
                raise BookmarkNotFoundError(f"Bookmark {bookmark_id!r} not found")
            return _to_bookmark(node)

    def create(
        self, parent_id: str | int, title: str, url: str | None = None
    ) -> Bookmark:
        """Create a bookmark (or a folder when url is None) as the last child."""
        parent_key = _parse_id(parent_id)
        with self.storage.get_session() as session:
            parent = session.get(BookmarkNode, parent_key)
            if parent is None:
                raise BookmarkNotFoundError(f"Parent folder {parent_id!r} not found")
            if parent.url is not None:
                raise ValueError(f"Parent {parent_id!r} is a bookmark, not a folder")

            node = BookmarkNode(
                parent_id=parent_key,
                title=title,
                url=url,
                position=self._next_position(session, parent_key),
                created_at=utc_now_iso(),
            )
            session.add(node)
            session.commit()
            return _to_bookmark(node)

    def move(self, bookmark_id: str | int, parent_id: str | int) -> Bookmark:
        node_key = _parse_id(bookmark_id)
        parent_key = _parse_id(parent_id)
        with self.storage.get_session() as session:
            node = session.get(BookmarkNode, node_key)
            if node is None:
                raise BookmarkNotFoundError(f"Bookmark {bookmark_id!r} not found")
            parent = session.get(BookmarkNode, parent_key)
            if parent is None or parent.url is not None:
                raise BookmarkNotFoundError(f"Folder {parent_id!r} not found")

            if node.parent_id != parent_key:
                node.parent_id = parent_key
                node.position = self._next_position(session, parent_key)
                session.commit()
            return _to_bookmark(node)

    def get_tree(self) -> list[BookmarkTreeNode]:
        """Return the whole tree as a forest rooted at the root node."""
        with self.storage.get_session(read_only=True) as session:
            nodes = (
                session.execute(
                    select(BookmarkNode).order_by(
                        BookmarkNode.position, BookmarkNode.id
                    )
                )
                .scalars()
                .all()
            )

        children_map: dict[int, list[BookmarkNode]] = {}
        roots: list[BookmarkNode] = []
        for node in nodes:
            if node.parent_id is None:
                roots.append(node)
            else:
                children_map.setdefault(node.parent_id, []).append(node)

        def node_to_tree(node: BookmarkNode) -> BookmarkTreeNode:
            tree_node = BookmarkTreeNode(
                id=str(node.id),
                title=node.title or "",
                url=node.url,
                parent_id=None if node.parent_id is None else str(node.parent_id),
            )
            if node.url is None:
                tree_node.children = [
                    node_to_tree(child) for child in children_map.get(node.id, [])
                ]
            return tree_node

        roots.sort(key=lambda n: (n.id != ROOT_NODE_ID, n.position, n.id))
        return [node_to_tree(root) for root in roots]

    def get_all_bookmarks(self) -> list[Bookmark]:
        return flatten(self.get_tree())

    @staticmethod
    def _next_position(session, parent_id: int) -> int:
        current = session.execute(
            select(func.max(BookmarkNode.position)).where(
                BookmarkNode.parent_id == parent_id
            )
        ).scalar()
        return 0 if current is None else current + 1


def flatten(tree: list[BookmarkTreeNode]) -> list[Bookmark]:
    """Depth-first list of leaf bookmarks, skipping folders."""
    bookmarks: list[Bookmark] = []

    def traverse(nodes: list[BookmarkTreeNode]) -> None:
        for node in nodes:
            if node.url:
                bookmarks.append(
                    Bookmark(
                        id=node.id, url=node.url, title=node.title, parent_id=node.parent_id
                    )
                )
            if node.children:
                traverse(node.children)

    traverse(tree)
    return bookmarks
