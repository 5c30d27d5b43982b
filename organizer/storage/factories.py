"""factory_boy factories for bookmarks.db models.

Bind a session before use:
    BookmarkNodeFactory._meta.sqlalchemy_session = session
"""

from datetime import datetime, timezone

import factory
from factory.alchemy import SQLAlchemyModelFactory

from storage.bookmark_models import (
    AssociationRecord,
    BookmarkNode,
    BOOKMARKS_BAR_ID,
    Setting,
    WorkspaceRecord,
)


class BookmarkNodeFactory(SQLAlchemyModelFactory):
    class Meta:
        model = BookmarkNode
        sqlalchemy_session_persistence = "commit"

    parent_id = BOOKMARKS_BAR_ID
    title = factory.Faker("sentence", nb_words=3)
    url = factory.Faker("url")
    position = factory.Sequence(lambda n: n + 100)
    created_at = factory.LazyFunction(lambda: datetime.now(timezone.utc).isoformat())


class FolderNodeFactory(BookmarkNodeFactory):
    title = factory.Faker("word")
    url = None


class WorkspaceRecordFactory(SQLAlchemyModelFactory):
    class Meta:
        model = WorkspaceRecord
        sqlalchemy_session_persistence = "commit"

    workspace_id = factory.Sequence(lambda n: f"workspace_{n}")
    name = factory.Faker("word")
    tech_stack = factory.LazyFunction(list)
    created_at = factory.LazyFunction(lambda: datetime.now(timezone.utc).isoformat())


class AssociationRecordFactory(SQLAlchemyModelFactory):
    class Meta:
        model = AssociationRecord
        sqlalchemy_session_persistence = "commit"

    workspace_id = "workspace_0"
    bookmark_id = factory.Sequence(lambda n: str(n + 1000))
    url = factory.Faker("url")
    title = factory.Faker("sentence", nb_words=3)
    category = factory.LazyFunction(
        lambda: {"type": "technology", "tech": "python", "confidence": 0.3}
    )
    timestamp = factory.LazyFunction(lambda: datetime.now(timezone.utc))


class SettingFactory(SQLAlchemyModelFactory):
    class Meta:
        model = Setting
        sqlalchemy_session_persistence = "commit"

    key = "smartBookmarkOrganization"
    value = "true"
