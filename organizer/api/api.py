from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from classifier.category import Category


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Bookmark(CamelModel):
    id: str
    url: str | None = None
    title: str = ""
    parent_id: str | None = None


class BookmarkTreeNode(CamelModel):
    id: str
    title: str = ""
    url: str | None = None
    parent_id: str | None = None
    children: list["BookmarkTreeNode"] | None = None

    @property
    def is_folder(self) -> bool:
        return self.url is None


class Workspace(CamelModel):
    id: str
    name: str = ""
    tech_stack: list[str] = []


class Association(CamelModel):
    """A bookmark recorded against a workspace.

    Imported entries only need a ``url``; everything else is optional so
    snapshots written by other tools still merge.
    """

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    bookmark_id: Optional[str] = None
    url: str = Field(min_length=1)
    title: str = ""
    category: Optional[Category] = None
    timestamp: Optional[datetime] = None

    @field_validator("title", mode="before")
    @classmethod
    def _title_or_empty(cls, value):
        return "" if value is None else value

    @field_validator("bookmark_id", mode="before")
    @classmethod
    def _bookmark_id_as_str(cls, value):
        # browsers hand out string ids, other tools sometimes write numbers
        return str(value) if isinstance(value, int) else value


class ScoredBookmark(CamelModel):
    id: str
    url: str
    title: str = ""
    category: Category
    relevance_score: float


class WorkspaceSnapshot(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    workspace_id: Optional[str] = None
    bookmarks: list[Association]
    export_date: Optional[datetime] = None
    reference_hash: Optional[str] = None


class ImportResult(CamelModel):
    workspace_id: str
    added: int
    skipped: int
    total: int


class OrganizeStatus(str, Enum):
    skipped = "skipped"
    unclassified = "unclassified"
    classified = "classified"
    organized = "organized"
    failed = "failed"


class OrganizeOutcome(CamelModel):
    bookmark_id: str
    status: OrganizeStatus
    category: Optional[Category] = None
    folder_id: Optional[str] = None
    workspace_id: Optional[str] = None
    error: Optional[str] = None


class ClassifyRequest(CamelModel):
    url: str = Field(min_length=1)
    title: str = ""


class ClassifyResponse(CamelModel):
    category: Optional[Category] = None
    folder_name: Optional[str] = None


class BookmarkEvent(str, Enum):
    created = "created"
    changed = "changed"
