"""Storage module for the bookmark tree, workspaces and associations.

Everything lives in one SQLite database (data/bookmarks.db). Pattern and
domain tables are managed separately via YAML files in organizer/config/
(see organizer/utils/config.py).
"""

from storage.manager import StorageManager

__all__ = ["StorageManager"]
