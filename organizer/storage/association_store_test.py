from datetime import datetime, timezone

from sqlalchemy import select

from api.api import Association
from classifier.category import PackageCategory, TechnologyCategory
from storage.association_store import AssociationRepository
from storage.bookmark_models import AssociationRecord
from storage.factories import AssociationRecordFactory


def make_association(url: str, **kwargs) -> Association:
    return Association(url=url, **kwargs)


class TestAssociationRepository:
    def test_load_empty(self, storage_manager):
        assert AssociationRepository(storage_manager).load() == {}

    def test_load_groups_by_workspace_in_insertion_order(self, storage_manager, session):
        AssociationRecordFactory(workspace_id="ws-a", url="https://1.com")
        AssociationRecordFactory(workspace_id="ws-b", url="https://2.com")
        AssociationRecordFactory(workspace_id="ws-a", url="https://3.com")

        loaded = AssociationRepository(storage_manager).load()

        assert [a.url for a in loaded["ws-a"]] == ["https://1.com", "https://3.com"]
        assert [a.url for a in loaded["ws-b"]] == ["https://2.com"]
        assert loaded["ws-a"][0].category == TechnologyCategory(tech="python", confidence=0.3)

    def test_append_round_trips_fields(self, storage_manager):
        repository = AssociationRepository(storage_manager)
        timestamp = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        association = make_association(
            "https://pypi.org/project/flask",
            bookmark_id="42",
            title="Flask",
            category=PackageCategory(tech="python"),
            timestamp=timestamp,
        )

        repository.append_association("ws", association)

        assert repository.load() == {"ws": [association]}

    def test_entry_without_category(self, storage_manager):
        repository = AssociationRepository(storage_manager)
        repository.append_association("ws", make_association("https://a.com"))

        loaded = repository.load()["ws"][0]

        assert loaded.category is None
        assert loaded.bookmark_id is None

    def test_save_replaces_whole_map(self, storage_manager):
        repository = AssociationRepository(storage_manager)
        repository.append_association("old", make_association("https://old.com"))

        repository.save(
            {
                "ws-1": [make_association("https://a.com"), make_association("https://b.com")],
                "ws-2": [make_association("https://c.com")],
            }
        )

        loaded = repository.load()
        assert set(loaded) == {"ws-1", "ws-2"}
        assert [a.url for a in loaded["ws-1"]] == ["https://a.com", "https://b.com"]

    def test_replace_workspace_leaves_others(self, storage_manager):
        repository = AssociationRepository(storage_manager)
        repository.append_association("ws-1", make_association("https://a.com"))
        repository.append_association("ws-2", make_association("https://b.com"))

        repository.replace_workspace("ws-1", [make_association("https://z.com")])

        loaded = repository.load()
        assert [a.url for a in loaded["ws-1"]] == ["https://z.com"]
        assert [a.url for a in loaded["ws-2"]] == ["https://b.com"]

    def test_category_is_stored_as_tagged_json(self, storage_manager):
        repository = AssociationRepository(storage_manager)
        repository.append_association(
            "ws",
            make_association("https://pypi.org/project/flask", category=PackageCategory(tech="python")),
        )

        with storage_manager.get_session(read_only=True) as session:
            record = session.execute(select(AssociationRecord)).scalar_one()
            assert record.category == {"type": "package", "tech": "python", "confidence": 0.8}
