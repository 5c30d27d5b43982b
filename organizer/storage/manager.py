"""Storage manager for bookmarks.db.

This module provides the main interface for the single SQLite database
holding the bookmark tree, the workspace directory, workspace associations
and settings. Pattern and domain tables are managed separately via YAML
files loaded in-memory (see organizer/utils/config.py).
"""

from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from storage.bookmark_models import (
    BookmarkBase,
    BookmarkNode,
    Meta,
    BOOKMARK_SCHEMA_VERSION,
    BOOKMARKS_BAR_ID,
    OTHER_BOOKMARKS_ID,
    ROOT_NODE_ID,
)


# Default paths
DATA_DIR = Path(__file__).parent.parent / "data"
DATABASE_NAME = "bookmarks.db"


# CRITICAL: Set PRAGMAs per connection, not per engine
# SQLite requires these settings on every new connection
@event.listens_for(Engine, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Set SQLite PRAGMAs for every new connection.

    Without this, new connections will silently disable foreign key enforcement.
    """
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class StorageManager:
    """Manager for bookmarks.db.

    Usage:
        manager = StorageManager(path)
        with manager.get_session() as session:
            ...

    IMPORTANT:
    - The schema version is checked on initialization
    - A new database is seeded with a root node, "Bookmarks bar" and
      "Other bookmarks" so folder creation always has a default parent
    """

    def __init__(self, database_path: Path | None):
        """Initialize storage manager.

        Args:
            database_path: Directory where bookmarks.db lives (defaults to data/)
        """
        if database_path is None:
            database_path = DATA_DIR
        self.database_path = database_path / DATABASE_NAME
        self.engine: Engine | None = None
        self._sessionmaker: sessionmaker | None = None

        self._ensure_database()

    def _ensure_database(self):
        """Ensure the database file exists and its schema is initialized."""
        self.database_path.parent.mkdir(parents=True, exist_ok=True)

        self.engine = create_engine(f"sqlite:///{self.database_path}")
        self._sessionmaker = sessionmaker(bind=self.engine)

        BookmarkBase.metadata.create_all(self.engine)

        self._verify_schema_version()
        self._seed_bookmark_tree()

    def _verify_schema_version(self):
        """Verify bookmarks.db schema version matches code version.

        Raises:
            RuntimeError: If schema version mismatch detected
        """
        with self.get_session() as session:
            meta = session.query(Meta).filter_by(key="schema_version").first()

            if meta is None:
                meta = Meta(key="schema_version", value=BOOKMARK_SCHEMA_VERSION)
                session.add(meta)
                session.commit()
            elif meta.value != BOOKMARK_SCHEMA_VERSION:
                raise RuntimeError(
                    f"bookmarks.db schema version mismatch: "
                    f"database is v{meta.value}, code expects v{BOOKMARK_SCHEMA_VERSION}. "
                    f"Delete {self.database_path} to recreate (WARNING: loses all bookmarks)."
                )

    def _seed_bookmark_tree(self):
        """Create the root, bookmarks bar and other bookmarks nodes once."""
        with self.get_session() as session:
            if session.get(BookmarkNode, ROOT_NODE_ID) is not None:
                return

            created_at = utc_now_iso()
            session.add(BookmarkNode(id=ROOT_NODE_ID, title="", created_at=created_at))
            session.flush()
            session.add_all(
                [
                    BookmarkNode(
                        id=BOOKMARKS_BAR_ID,
                        parent_id=ROOT_NODE_ID,
                        title="Bookmarks bar",
                        position=0,
                        created_at=created_at,
                    ),
                    BookmarkNode(
                        id=OTHER_BOOKMARKS_ID,
                        parent_id=ROOT_NODE_ID,
                        title="Other bookmarks",
                        position=1,
                        created_at=created_at,
                    ),
                ]
            )
            session.commit()

    @contextmanager
    def get_session(self, read_only: bool = False) -> Iterator[Session]:
        """Get SQLAlchemy session for bookmarks.db.

        Args:
            read_only: If True, returns session that raises error on flush/commit.
                      Use for enumeration and suggestion queries.

        Returns:
            Context manager yielding a SQLAlchemy session
        """
        if self._sessionmaker is None:
            raise RuntimeError("Database not initialized.")

        session = self._sessionmaker()

        if read_only:

            @event.listens_for(session, "before_flush")
            def prevent_flush(session, flush_context, instances):
                raise RuntimeError("Cannot modify bookmarks.db with read-only session.")

        try:
            yield session
        finally:
            session.close()

    def dispose(self):
        if self.engine is not None:
            self.engine.dispose()
