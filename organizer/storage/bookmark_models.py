"""Database models for the bookmark store and workspace associations.

This module defines SQLAlchemy models for bookmarks.db, which holds the
bookmark tree, the workspace directory, the workspace->associations map
and the settings store.

IMPORTANT: Association rows are append-only per workspace. Row order (the
autoincrement id) is the association list order.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import String, Integer, ForeignKey, Index
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from storage.db_helpers import CategoryJson, TechStack, UtcDateTime

# Schema version (increment on breaking changes)
BOOKMARK_SCHEMA_VERSION = "1.0.0"

# Browser-style skeleton seeded into every new database
ROOT_NODE_ID = 0
BOOKMARKS_BAR_ID = 1
OTHER_BOOKMARKS_ID = 2


class BookmarkBase(DeclarativeBase):
    pass


class BookmarkNode(BookmarkBase):
    """Bookmark or folder in the bookmark tree.

    Folders have no url; leaf bookmarks have a url and no children.
    """

    __tablename__ = "bookmark_node"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    parent_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("bookmark_node.id"), nullable=True
    )
    title: Mapped[str] = mapped_column(String, default="")
    url: Mapped[Optional[str]] = mapped_column(String, nullable=True)
    position: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[Optional[str]]

    __table_args__ = (Index("idx_bookmark_node_parent", "parent_id"),)


class WorkspaceRecord(BookmarkBase):
    """Workspace with its declared technology stack."""

    __tablename__ = "workspace"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    workspace_id: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String, default="")
    tech_stack: Mapped[list] = mapped_column(TechStack, default=list)
    created_at: Mapped[Optional[str]]


class AssociationRecord(BookmarkBase):
    """Bookmark associated with a workspace.

    workspace_id is not a foreign key: imported snapshots may target a
    workspace the directory does not (yet) know about.
    """

    __tablename__ = "workspace_association"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    workspace_id: Mapped[str] = mapped_column(String, nullable=False)
    bookmark_id: Mapped[Optional[str]]
    url: Mapped[str] = mapped_column(String, nullable=False)
    title: Mapped[str] = mapped_column(String, default="")
    category: Mapped[Optional[dict]] = mapped_column(CategoryJson, nullable=True)
    timestamp: Mapped[Optional[datetime]] = mapped_column(UtcDateTime, nullable=True)

    __table_args__ = (Index("idx_association_workspace", "workspace_id"),)


class Setting(BookmarkBase):
    """Settings key-value store, values are JSON encoded."""

    __tablename__ = "setting"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[Optional[str]]


class Meta(BookmarkBase):
    """Metadata key-value store for bookmarks.db.

    Used for storing schema_version and other database-level metadata.
    """

    __tablename__ = "meta"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[Optional[str]]
