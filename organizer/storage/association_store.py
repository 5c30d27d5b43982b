"""Workspace -> associations map backed by bookmarks.db.

The map is keyed by workspace id; each value is the ordered association
list for that workspace (insertion order).
"""

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from api.api import Association
from classifier.category import category_adapter
from storage.bookmark_models import AssociationRecord
from storage.manager import StorageManager

AssociationMap = dict[str, list[Association]]


def _to_record(workspace_id: str, association: Association) -> AssociationRecord:
    return AssociationRecord(
        workspace_id=workspace_id,
        bookmark_id=association.bookmark_id,
        url=association.url,
        title=association.title,
        category=(
            category_adapter.dump_python(association.category, mode="json")
            if association.category is not None
            else None
        ),
        timestamp=association.timestamp,
    )


def _to_association(record: AssociationRecord) -> Association:
    return Association.model_validate(
        {
            "bookmark_id": record.bookmark_id,
            "url": record.url,
            "title": record.title or "",
            "category": record.category,
            "timestamp": record.timestamp,
        }
    )


class AssociationRepository:
    """Persistence for the workspace -> associations map."""

    def __init__(self, storage: StorageManager):
        self.storage = storage

    def load(self) -> AssociationMap:
        with self.storage.get_session(read_only=True) as session:
            records = (
                session.execute(
                    select(AssociationRecord).order_by(AssociationRecord.id)
                )
                .scalars()
                .all()
            )
            associations: AssociationMap = {}
            for record in records:
                associations.setdefault(record.workspace_id, []).append(
                    _to_association(record)
                )
            return associations

    def save(self, associations: AssociationMap) -> None:
        """Replace the whole map in one transaction."""
        with self.storage.get_session() as session:
            session.execute(delete(AssociationRecord))
            for workspace_id, entries in associations.items():
                self._insert(session, workspace_id, entries)
            session.commit()

    def append_association(self, workspace_id: str, association: Association) -> None:
        with self.storage.get_session() as session:
            session.add(_to_record(workspace_id, association))
            session.commit()

    def replace_workspace(
        self, workspace_id: str, associations: list[Association]
    ) -> None:
        """Replace a single workspace's list in one transaction."""
        with self.storage.get_session() as session:
            session.execute(
                delete(AssociationRecord).where(
                    AssociationRecord.workspace_id == workspace_id
                )
            )
            self._insert(session, workspace_id, associations)
            session.commit()

    @staticmethod
    def _insert(
        session: Session, workspace_id: str, associations: list[Association]
    ) -> None:
        # add_all keeps list order for the autoincrement ids
        session.add_all(
            [_to_record(workspace_id, association) for association in associations]
        )
