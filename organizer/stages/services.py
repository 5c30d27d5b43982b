"""Wires the storage-backed collaborators into the organizer services."""

from dataclasses import dataclass

from classifier.classifier import BookmarkClassifier
from stages.folders import FolderResolver
from stages.organize import BookmarkOrganizer
from stages.workspace_bookmarks import WorkspaceBookmarks
from storage.association_store import AssociationRepository
from storage.bookmark_store import BookmarkStore
from storage.manager import StorageManager
from storage.settings_store import SettingsStore
from storage.workspace_directory import WorkspaceDirectory
from utils.config import Config, get_config


@dataclass(frozen=True)
class Services:
    storage: StorageManager
    store: BookmarkStore
    directory: WorkspaceDirectory
    settings: SettingsStore
    classifier: BookmarkClassifier
    folders: FolderResolver
    workspace_bookmarks: WorkspaceBookmarks
    organizer: BookmarkOrganizer


def build_services(storage: StorageManager, config: Config | None = None) -> Services:
    config = config or get_config()

    store = BookmarkStore(storage)
    directory = WorkspaceDirectory(storage)
    settings = SettingsStore(storage)
    classifier = BookmarkClassifier(config)
    folders = FolderResolver(store)
    workspace_bookmarks = WorkspaceBookmarks(
        AssociationRepository(storage), directory, reference_hash=config.reference_hash
    )
    organizer = BookmarkOrganizer(
        store, settings, folders, workspace_bookmarks, classifier=classifier
    )

    return Services(
        storage=storage,
        store=store,
        directory=directory,
        settings=settings,
        classifier=classifier,
        folders=folders,
        workspace_bookmarks=workspace_bookmarks,
        organizer=organizer,
    )
