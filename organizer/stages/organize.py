"""
Reacts to bookmark events: classify, then (when smart organization is on)
move the bookmark into its category folder and associate it with a workspace.

Failures never leave this module; each event ends with an OrganizeOutcome.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError

from api.api import Bookmark, BookmarkEvent, OrganizeOutcome, OrganizeStatus
from classifier.classifier import BookmarkClassifier
from stages.folders import FolderResolver
from stages.workspace_bookmarks import WorkspaceBookmarks
from storage.bookmark_store import BookmarkStore
from storage.settings_store import SettingsStore

logger = logging.getLogger(__name__)

PIPELINE_ERRORS = (SQLAlchemyError, LookupError, OSError, ValueError)


class BookmarkOrganizer:
    def __init__(
        self,
        store: BookmarkStore,
        settings: SettingsStore,
        folders: FolderResolver,
        workspace_bookmarks: WorkspaceBookmarks,
        classifier: BookmarkClassifier | None = None,
    ):
        self.store = store
        self.settings = settings
        self.folders = folders
        self.workspace_bookmarks = workspace_bookmarks
        self.classifier = classifier or BookmarkClassifier()

    def handle_event(self, event: BookmarkEvent, bookmark_id: str) -> OrganizeOutcome:
        try:
            bookmark = self.store.get(bookmark_id)
        except PIPELINE_ERRORS as e:
            logger.error(f"Could not load bookmark {bookmark_id} for '{event.value}' event: {e}")
            return OrganizeOutcome(
                bookmark_id=str(bookmark_id), status=OrganizeStatus.failed, error=str(e)
            )
        return self.categorize(bookmark)

    def handle_created(self, bookmark: Bookmark) -> OrganizeOutcome:
        return self.categorize(bookmark)

    def handle_changed(self, bookmark_id: str) -> OrganizeOutcome:
        return self.handle_event(BookmarkEvent.changed, bookmark_id)

    def categorize(self, bookmark: Bookmark) -> OrganizeOutcome:
        if not bookmark.url:
            logger.debug(f"Skipping {bookmark.id}: no url")
            return OrganizeOutcome(bookmark_id=bookmark.id, status=OrganizeStatus.skipped)

        category = self.classifier(bookmark.url, bookmark.title)
        if category is None:
            return OrganizeOutcome(
                bookmark_id=bookmark.id, status=OrganizeStatus.unclassified
            )

        try:
            if not self.settings.is_smart_organization_enabled():
                return OrganizeOutcome(
                    bookmark_id=bookmark.id,
                    status=OrganizeStatus.classified,
                    category=category,
                )

            folder_id = self.folders.resolve_folder(category)
            if bookmark.parent_id != folder_id:
                self.store.move(bookmark.id, folder_id)
                logger.info(f"Moved bookmark {bookmark.id} to folder {folder_id}")

            workspace = self.workspace_bookmarks.find_workspace(category)
            if workspace is not None:
                self.workspace_bookmarks.associate(bookmark, category, workspace)
        except PIPELINE_ERRORS as e:
            logger.exception(f"Error organizing bookmark {bookmark.id}")
            return OrganizeOutcome(
                bookmark_id=bookmark.id,
                status=OrganizeStatus.failed,
                category=category,
                error=str(e),
            )

        return OrganizeOutcome(
            bookmark_id=bookmark.id,
            status=OrganizeStatus.organized,
            category=category,
            folder_id=folder_id,
            workspace_id=workspace.id if workspace is not None else None,
        )

    def organize_all(self) -> list[OrganizeOutcome]:
        """Replay every bookmark in the store through the pipeline."""
        try:
            bookmarks = self.store.get_all_bookmarks()
        except PIPELINE_ERRORS:
            logger.exception("Could not enumerate bookmarks")
            return []

        outcomes = [self.categorize(bookmark) for bookmark in bookmarks]
        organized = sum(1 for o in outcomes if o.status == OrganizeStatus.organized)
        logger.info(f"Organized {organized}/{len(outcomes)} bookmarks")
        return outcomes
