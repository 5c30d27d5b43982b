import logging
from functools import lru_cache
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from api.api import (
    Association,
    BookmarkEvent,
    ClassifyRequest,
    ClassifyResponse,
    ImportResult,
    OrganizeOutcome,
    ScoredBookmark,
    WorkspaceSnapshot,
)
from classifier.classifier import classify
from stages.folders import folder_name
from stages.services import Services, build_services
from stages.suggest import suggest
from stages.workspace_bookmarks import SnapshotValidationError
from storage.manager import StorageManager
from storage.workspace_directory import normalize_tech_stack
from utils.config import CONFIG_DIR, get_config, get_config_for
from utils.logging_config import setup_logging
from utils.settings import AppSettings

logger = logging.getLogger(__name__)

app = FastAPI()
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_services() -> Services:
    """One set of services per process, so the association map is loaded once."""
    settings = AppSettings()
    setup_logging(settings.log_file_prefix)
    config = (
        get_config()
        if settings.config_dir.resolve() == CONFIG_DIR
        else get_config_for(settings.config_dir)
    )
    return build_services(StorageManager(settings.storage_path), config)


@app.post("/api/classify", response_model=ClassifyResponse, response_model_by_alias=True)
def classify_bookmark(
    request: ClassifyRequest, services: Services = Depends(get_services)
) -> ClassifyResponse:
    category = classify(request.url, request.title, services.classifier.config)
    return ClassifyResponse(
        category=category,
        folder_name=folder_name(category) if category is not None else None,
    )


@app.post("/api/bookmarks/{bookmark_id}/events", response_model=OrganizeOutcome)
def bookmark_event(
    bookmark_id: str,
    event: BookmarkEvent = Query(BookmarkEvent.changed),
    services: Services = Depends(get_services),
) -> OrganizeOutcome:
    """Replay a bookmark event; pipeline failures come back in the outcome, not as errors."""
    return services.organizer.handle_event(event, bookmark_id)


@app.get("/api/workspaces/{workspace_id}/bookmarks", response_model=list[Association])
def workspace_bookmarks(
    workspace_id: str, services: Services = Depends(get_services)
) -> list[Association]:
    return services.workspace_bookmarks.get_workspace_bookmarks(workspace_id)


@app.get(
    "/api/workspaces/{workspace_id}/suggestions", response_model=list[ScoredBookmark]
)
def workspace_suggestions(
    workspace_id: str,
    limit: int | None = Query(None, ge=0),
    tech: list[str] | None = Query(None),
    services: Services = Depends(get_services),
) -> list[ScoredBookmark]:
    tech_stack = normalize_tech_stack(tech or [])
    if not tech_stack:
        try:
            tech_stack = services.directory.get(workspace_id).tech_stack
        except LookupError as e:
            raise HTTPException(status_code=404, detail=str(e))

    return suggest(
        services.store,
        workspace_id,
        tech_stack,
        limit=AppSettings().suggestion_limit if limit is None else limit,
        classifier=services.classifier,
    )


@app.get("/api/workspaces/{workspace_id}/export", response_model=WorkspaceSnapshot)
def export_workspace(
    workspace_id: str, services: Services = Depends(get_services)
) -> WorkspaceSnapshot:
    return services.workspace_bookmarks.export_workspace(workspace_id)


@app.post("/api/workspaces/{workspace_id}/import", response_model=ImportResult)
def import_workspace(
    workspace_id: str,
    payload: Any = Body(...),
    services: Services = Depends(get_services),
) -> ImportResult:
    try:
        return services.workspace_bookmarks.import_workspace(workspace_id, payload)
    except SnapshotValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
