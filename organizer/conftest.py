"""Shared test fixtures"""

import os
import random

import pytest
from faker import Faker

from stages.services import build_services
from storage.factories import (
    AssociationRecordFactory,
    BookmarkNodeFactory,
    FolderNodeFactory,
    SettingFactory,
    WorkspaceRecordFactory,
)
from storage.manager import StorageManager
from storage.settings_store import SMART_ORGANIZATION_KEY
from utils.config import get_config


@pytest.fixture(scope="session", autouse=True)
def setup_factory_seed():
    """Configure factory_boy/Faker to use a deterministic seed for reproducibility.

    The seed can be set via FACTORY_SEED environment variable, or will be
    randomly generated. The seed is printed to stdout for reproducibility.
    """
    seed = os.environ.get("FACTORY_SEED")
    if seed:
        seed = int(seed)
    else:
        seed = random.randint(0, 2**32 - 1)

    print(f"\n{'=' * 70}")
    print(f"Factory seed: {seed}")
    print(f"To reproduce this test run, set: FACTORY_SEED={seed}")
    print(f"{'=' * 70}\n")

    Faker.seed(seed)
    random.seed(seed)

    return seed


@pytest.fixture
def storage_manager(tmp_path):
    """Create a StorageManager with a temporary bookmarks.db."""
    manager = StorageManager(database_path=tmp_path)
    yield manager
    manager.dispose()


@pytest.fixture
def session(storage_manager):
    """A session with every factory bound to it."""
    with storage_manager.get_session() as session:
        BookmarkNodeFactory._meta.sqlalchemy_session = session  # type: ignore[misc]
        FolderNodeFactory._meta.sqlalchemy_session = session  # type: ignore[misc]
        WorkspaceRecordFactory._meta.sqlalchemy_session = session  # type: ignore[misc]
        AssociationRecordFactory._meta.sqlalchemy_session = session  # type: ignore[misc]
        SettingFactory._meta.sqlalchemy_session = session  # type: ignore[misc]
        yield session


@pytest.fixture
def services(storage_manager):
    return build_services(storage_manager, get_config())


@pytest.fixture
def smart_services(services):
    """Services with smart bookmark organization switched on."""
    services.settings.set(SMART_ORGANIZATION_KEY, True)
    return services
