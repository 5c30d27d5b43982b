"""Settings store backed by bookmarks.db."""

import json
from typing import Any

from storage.bookmark_models import Setting
from storage.manager import StorageManager

SMART_ORGANIZATION_KEY = "smartBookmarkOrganization"


class SettingsStore:
    def __init__(self, storage: StorageManager):
        self.storage = storage

    def get(self, key: str, default: Any = None) -> Any:
        with self.storage.get_session(read_only=True) as session:
            setting = session.get(Setting, key)
            if setting is None or setting.value is None:
                return default
            return json.loads(setting.value)

    def set(self, key: str, value: Any) -> None:
        with self.storage.get_session() as session:
            setting = session.get(Setting, key)
            if setting is None:
                session.add(Setting(key=key, value=json.dumps(value)))
            else:
                setting.value = json.dumps(value)
            session.commit()

    def is_smart_organization_enabled(self) -> bool:
        return bool(self.get(SMART_ORGANIZATION_KEY, False))
