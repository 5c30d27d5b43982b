import json
import logging
from pathlib import Path

import typer

from api.api import BookmarkTreeNode, OrganizeStatus
from classifier.classifier import classify as classify_bookmark
from stages.folders import folder_name
from stages.services import Services, build_services
from stages.suggest import suggest as suggest_bookmarks
from stages.workspace_bookmarks import SnapshotValidationError
from storage.bookmark_models import BOOKMARKS_BAR_ID
from storage.manager import StorageManager
from storage.settings_store import SMART_ORGANIZATION_KEY
from storage.workspace_directory import normalize_tech_stack
from utils.config import CONFIG_DIR, Config, get_config, get_config_for
from utils.logging_config import setup_logging
from utils.settings import AppSettings

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="organizer",
    help="Classify bookmarks and organize them into developer workspaces",
    no_args_is_help=True,
)

StorageOption = typer.Option(
    None,
    "--storage",
    "-s",
    help="Storage directory (contains bookmarks.db). If not specified, uses the configured data directory.",
)


def load_config(settings: AppSettings) -> Config:
    if settings.config_dir.resolve() == CONFIG_DIR:
        return get_config()
    return get_config_for(settings.config_dir)


def get_services(storage_path: Path | None) -> Services:
    settings = AppSettings()
    manager = StorageManager(storage_path or settings.storage_path)
    return build_services(manager, load_config(settings))


@app.callback()
def main() -> None:
    setup_logging(AppSettings().log_file_prefix)


@app.command()
def classify(
    url: str = typer.Argument(...),
    title: str = typer.Argument(""),
):
    """
    Classify a URL and title without touching the store.
    """
    category = classify_bookmark(url, title, load_config(AppSettings()))
    if category is None:
        typer.echo("No category")
        return
    typer.echo(
        f"{category.type} / {category.tech} (confidence {category.confidence:.2f}) -> {folder_name(category)}"
    )


@app.command("add-bookmark")
def add_bookmark(
    url: str = typer.Argument(...),
    title: str = typer.Argument(""),
    parent_id: str = typer.Option(str(BOOKMARKS_BAR_ID), "--parent", "-p"),
    storage_path: Path | None = StorageOption,
):
    """
    Add a bookmark and run it through the organizer as a "created" event.
    """
    if not url.strip():
        typer.echo("Error: url must not be empty", err=True)
        raise typer.Exit(1)

    services = get_services(storage_path)
    try:
        bookmark = services.store.create(parent_id=parent_id, title=title, url=url)
    except LookupError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    outcome = services.organizer.handle_created(bookmark)
    typer.echo(f"✓ Added bookmark {bookmark.id} ({outcome.status.value})")


@app.command("add-workspace")
def add_workspace(
    name: str = typer.Argument(...),
    tech: list[str] = typer.Option(
        [], "--tech", "-t", help="Technology tag; repeat for each tag in the stack."
    ),
    storage_path: Path | None = StorageOption,
):
    """
    Register a workspace with its technology stack.
    """
    services = get_services(storage_path)
    workspace = services.directory.create(name=name, tech_stack=tech)
    typer.echo(f"✓ Created workspace {workspace.id}: {', '.join(workspace.tech_stack)}")


@app.command()
def workspaces(storage_path: Path | None = StorageOption):
    """
    List workspaces and their technology stacks.
    """
    services = get_services(storage_path)
    for workspace in services.directory.list_workspaces():
        typer.echo(f"{workspace.id}\t{workspace.name}\t{', '.join(workspace.tech_stack)}")


@app.command()
def tree(storage_path: Path | None = StorageOption):
    """
    Print the bookmark tree.
    """
    services = get_services(storage_path)

    def echo_node(node: BookmarkTreeNode, depth: int) -> None:
        label = node.title or "(root)"
        if node.url:
            label = f"{label} <{node.url}>"
        typer.echo(f"{'  ' * depth}[{node.id}] {label}")
        for child in node.children or []:
            echo_node(child, depth + 1)

    for root in services.store.get_tree():
        echo_node(root, 0)


@app.command()
def organize(
    bookmark_id: str | None = typer.Argument(
        None, help="Bookmark to replay as a 'changed' event. Omit to organize all bookmarks."
    ),
    storage_path: Path | None = StorageOption,
):
    """
    Classify bookmarks and, when smart organization is on, move and associate them.
    """
    services = get_services(storage_path)
    if bookmark_id is not None:
        outcomes = [services.organizer.handle_changed(bookmark_id)]
    else:
        outcomes = services.organizer.organize_all()

    for outcome in outcomes:
        detail = ""
        if outcome.category is not None:
            detail = f" {outcome.category.type}/{outcome.category.tech}"
        if outcome.workspace_id:
            detail += f" -> {outcome.workspace_id}"
        if outcome.error:
            detail += f" ({outcome.error})"
        typer.echo(f"{outcome.bookmark_id}: {outcome.status.value}{detail}")

    if any(outcome.status == OrganizeStatus.failed for outcome in outcomes):
        raise typer.Exit(1)


@app.command()
def suggest(
    workspace_id: str = typer.Argument(...),
    limit: int | None = typer.Option(None, "--limit", "-n", min=0),
    tech: list[str] = typer.Option(
        [], "--tech", "-t", help="Tech stack override; defaults to the workspace's stack."
    ),
    storage_path: Path | None = StorageOption,
):
    """
    Suggest bookmarks for a workspace, highest confidence first.
    """
    settings = AppSettings()
    services = get_services(storage_path)
    tech_stack = normalize_tech_stack(tech or [])
    if not tech_stack:
        try:
            tech_stack = services.directory.get(workspace_id).tech_stack
        except LookupError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

    suggestions = suggest_bookmarks(
        services.store,
        workspace_id,
        tech_stack,
        limit=settings.suggestion_limit if limit is None else limit,
        classifier=services.classifier,
    )
    for suggestion in suggestions:
        typer.echo(
            f"{suggestion.relevance_score:.2f}\t{suggestion.category.tech}\t{suggestion.title}\t{suggestion.url}"
        )


@app.command()
def export(
    workspace_id: str = typer.Argument(...),
    output_path: Path = typer.Argument(..., help="Output JSON file path"),
    storage_path: Path | None = StorageOption,
):
    """
    Export a workspace's associated bookmarks to a JSON snapshot.
    """
    services = get_services(storage_path)
    snapshot = services.workspace_bookmarks.export_workspace(workspace_id)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        snapshot.model_dump_json(by_alias=True, indent=2), encoding="utf-8"
    )
    typer.echo(f"✓ Exported {len(snapshot.bookmarks)} bookmarks to {output_path}")


@app.command("import")
def import_snapshot(
    workspace_id: str = typer.Argument(...),
    input_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    storage_path: Path | None = StorageOption,
):
    """
    Merge a JSON snapshot into a workspace, skipping URLs it already has.
    """
    services = get_services(storage_path)
    try:
        payload = json.loads(input_path.read_text(encoding="utf-8"))
        result = services.workspace_bookmarks.import_workspace(workspace_id, payload)
    except (json.JSONDecodeError, SnapshotValidationError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    typer.echo(
        f"✓ Imported {result.added} bookmarks ({result.skipped} skipped, {result.total} total)"
    )


@app.command("settings")
def settings_command(
    smart: bool | None = typer.Option(
        None,
        "--smart/--no-smart",
        help="Turn automatic folder organization and workspace association on or off.",
    ),
    storage_path: Path | None = StorageOption,
):
    """
    Show or change the smart organization setting.
    """
    services = get_services(storage_path)
    if smart is not None:
        services.settings.set(SMART_ORGANIZATION_KEY, smart)
    state = "on" if services.settings.is_smart_organization_enabled() else "off"
    typer.echo(f"Smart bookmark organization: {state}")


if __name__ == "__main__":
    app()
