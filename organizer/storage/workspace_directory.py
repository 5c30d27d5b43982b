"""Workspace directory backed by bookmarks.db."""

import time
import uuid
from collections.abc import Iterable

from sqlalchemy import select

from api.api import Workspace
from storage.bookmark_models import WorkspaceRecord
from storage.manager import StorageManager, utc_now_iso


class WorkspaceNotFoundError(LookupError):
    pass


def new_workspace_id() -> str:
    return f"workspace_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


def normalize_tech_stack(tech_stack: Iterable[str]) -> list[str]:
    """Lowercased, stripped, de-duplicated tags in first-seen order."""
    return list(dict.fromkeys(tag.strip().lower() for tag in tech_stack if tag.strip()))


def _to_workspace(record: WorkspaceRecord) -> Workspace:
    return Workspace(
        id=record.workspace_id, name=record.name or "", tech_stack=list(record.tech_stack)
    )


class WorkspaceDirectory:
    def __init__(self, storage: StorageManager):
        self.storage = storage

    def list_workspaces(self) -> list[Workspace]:
        """All workspaces in creation order."""
        with self.storage.get_session(read_only=True) as session:
            records = (
                session.execute(select(WorkspaceRecord).order_by(WorkspaceRecord.id))
                .scalars()
                .all()
            )
            return [_to_workspace(record) for record in records]

    def get(self, workspace_id: str) -> Workspace:
        with self.storage.get_session(read_only=True) as session:
            record = session.execute(
                select(WorkspaceRecord).where(
                    WorkspaceRecord.workspace_id == workspace_id
                )
            ).scalar_one_or_none()
            if record is None:
                raise WorkspaceNotFoundError(f"Workspace {workspace_id!r} not found")
            return _to_workspace(record)

    def create(
        self, name: str, tech_stack: list[str], workspace_id: str | None = None
    ) -> Workspace:
        # Tags are lowercased to line up with the pattern table
        normalized_stack = normalize_tech_stack(tech_stack)
        with self.storage.get_session() as session:
            record = WorkspaceRecord(
                workspace_id=workspace_id or new_workspace_id(),
                name=name,
                tech_stack=normalized_stack,
                created_at=utc_now_iso(),
            )
            session.add(record)
            session.commit()
            return _to_workspace(record)

    def delete(self, workspace_id: str) -> None:
        with self.storage.get_session() as session:
            record = session.execute(
                select(WorkspaceRecord).where(
                    WorkspaceRecord.workspace_id == workspace_id
                )
            ).scalar_one_or_none()
            if record is None:
                raise WorkspaceNotFoundError(f"Workspace {workspace_id!r} not found")
            session.delete(record)
            session.commit()
