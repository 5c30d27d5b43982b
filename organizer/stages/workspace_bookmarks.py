"""
Associates classified bookmarks with workspaces, and exports/imports a
workspace's associated bookmarks as a portable snapshot.

The workspace -> associations map is loaded once when the service is built
and kept in memory; every mutation is written through to the repository.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import Any

from pydantic import ValidationError

from api.api import (
    Association,
    Bookmark,
    ImportResult,
    Workspace,
    WorkspaceSnapshot,
)
from classifier.category import Category
from storage.association_store import AssociationMap, AssociationRepository
from storage.workspace_directory import WorkspaceDirectory
from utils.config import get_config

logger = logging.getLogger(__name__)


class SnapshotValidationError(ValueError):
    """Raised when an import payload is not a valid workspace snapshot."""


def find_matching_workspace(
    workspaces: list[Workspace], category: Category
) -> Workspace | None:
    """First workspace, in directory order, whose tech stack has the category's tech."""
    for workspace in workspaces:
        if category.tech in workspace.tech_stack:
            return workspace
    return None


def dedupe_by_url(associations: list[Association]) -> list[Association]:
    """Keep the first association seen for each url."""
    seen: set[str] = set()
    unique: list[Association] = []
    for association in associations:
        if association.url in seen:
            continue
        seen.add(association.url)
        unique.append(association)
    return unique


def parse_snapshot(payload: Any) -> WorkspaceSnapshot:
    """Validate an import payload.

    ``bookmarks`` must be a list and every entry needs a non-empty ``url``.
    """
    if isinstance(payload, WorkspaceSnapshot):
        return payload
    try:
        if isinstance(payload, (str, bytes)):
            return WorkspaceSnapshot.model_validate_json(payload)
        return WorkspaceSnapshot.model_validate(payload)
    except ValidationError as e:
        raise SnapshotValidationError(f"Invalid workspace snapshot: {e}") from e


class WorkspaceBookmarks:
    def __init__(
        self,
        repository: AssociationRepository,
        directory: WorkspaceDirectory,
        reference_hash: str | None = None,
    ):
        self.repository = repository
        self.directory = directory
        self.reference_hash = reference_hash
        self._lock = threading.Lock()
        self._associations: AssociationMap = repository.load()

    def find_workspace(self, category: Category) -> Workspace | None:
        return find_matching_workspace(self.directory.list_workspaces(), category)

    def associate(
        self,
        bookmark: Bookmark,
        category: Category,
        workspace: Workspace | None = None,
    ) -> Association | None:
        """Record ``bookmark`` against the first workspace using ``category.tech``.

        Associations are a history log: reclassifying the same bookmark
        appends another entry.
        """
        workspace = workspace or self.find_workspace(category)
        if workspace is None:
            logger.debug(
                f"No workspace uses '{category.tech}', bookmark {bookmark.id} not associated"
            )
            return None

        association = Association(
            bookmark_id=bookmark.id,
            url=bookmark.url or "",
            title=bookmark.title,
            category=category,
            timestamp=datetime.now(timezone.utc),
        )

        with self._lock:
            self.repository.append_association(workspace.id, association)
            self._associations.setdefault(workspace.id, []).append(association)

        logger.info(f"Associated bookmark {bookmark.id} with workspace {workspace.id}")
        return association

    def get_workspace_bookmarks(self, workspace_id: str) -> list[Association]:
        with self._lock:
            return list(self._associations.get(workspace_id, []))

    def workspace_ids(self) -> list[str]:
        with self._lock:
            return list(self._associations)

    def export_workspace(self, workspace_id: str) -> WorkspaceSnapshot:
        return WorkspaceSnapshot(
            workspace_id=workspace_id,
            bookmarks=self.get_workspace_bookmarks(workspace_id),
            export_date=datetime.now(timezone.utc),
            reference_hash=self.reference_hash or get_config().reference_hash,
        )

    def import_workspace(self, workspace_id: str, snapshot: Any) -> ImportResult:
        """Merge a snapshot into the workspace, existing entries win on url collisions.

        Raises:
            SnapshotValidationError: If the payload is malformed
        """
        parsed = parse_snapshot(snapshot)

        with self._lock:
            existing = self._associations.get(workspace_id, [])
            merged = dedupe_by_url([*existing, *parsed.bookmarks])
            self.repository.replace_workspace(workspace_id, merged)
            self._associations[workspace_id] = merged

        added = len(merged) - len(dedupe_by_url(existing))
        result = ImportResult(
            workspace_id=workspace_id,
            added=added,
            skipped=len(parsed.bookmarks) - added,
            total=len(merged),
        )
        logger.info(
            f"Imported {result.added} bookmarks into workspace {workspace_id} "
            f"({result.skipped} duplicates skipped, {result.total} total)"
        )
        return result
