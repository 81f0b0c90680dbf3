"""lvb CLI - Browse the schema and provision list views."""

import asyncio
import json
import logging
import sys
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from config import settings
from listview.client import ListViewApiClient
from listview.console import BrowserNavigator, ConsoleNotifier
from listview.entities import Operator, SearchKind
from listview.session import ListViewSession

app = typer.Typer(
    name="lvb",
    help="lvb CLI - Browse the schema and provision list views",
    no_args_is_help=True,
)
console = Console()


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format="%(levelname)s %(name)s: %(message)s")
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging("DEBUG" if verbose else settings.LOG_LEVEL)


def get_client() -> ListViewApiClient:
    return ListViewApiClient()


def build_session(client: ListViewApiClient) -> ListViewSession:
    return ListViewSession(
        directory=client,
        endpoint=client,
        notifier=ConsoleNotifier(console),
        navigator=BrowserNavigator(),
        pause_ms=0,
        filter_ms=0,
    )


def parse_filter(spec: str) -> tuple[str, Operator, str]:
    """FIELD:OPERATOR[:VALUE] -> (field, operator, value)"""
    parts = spec.split(":", 2)
    if len(parts) < 2 or not parts[0]:
        raise typer.BadParameter(f"expected FIELD:OPERATOR[:VALUE], got '{spec}'")
    try:
        operator = Operator(parts[1])
    except ValueError:
        valid = ", ".join(o.value for o in Operator)
        raise typer.BadParameter(f"unknown operator '{parts[1]}' (valid: {valid})")
    return parts[0], operator, parts[2] if len(parts) == 3 else ""


async def _load(client: ListViewApiClient) -> ListViewSession:
    session = build_session(client)
    await session.load_schema()
    if not session.index.entities:
        console.print("[red]✗[/red] No objects available from the schema directory")
        raise typer.Exit(1)
    return session


# ============ Schema ============


@app.command()
def objects(
    search: str = typer.Option(None, "--search", "-s", help="Filter objects by label or API name"),
) -> None:
    """List selectable objects."""

    async def run() -> None:
        session = await _load(get_client())
        entities = session.index.entities
        if search:
            session.index.entity_term = search
            entities = session.index.run_search(SearchKind.ENTITY)

        table = Table(title="Objects")
        table.add_column("Label", style="cyan")
        table.add_column("API Name", style="magenta")
        table.add_column("Fields", style="green", justify="right")

        for entity in entities:
            table.add_row(entity.label, entity.api_name, str(len(entity.fields)))

        console.print(table)

    asyncio.run(run())


@app.command()
def fields(
    entity: str = typer.Argument(..., help="Object API name"),
    search: str = typer.Option(None, "--search", "-s", help="Filter fields by label or API name"),
) -> None:
    """List the fields of an object."""

    async def run() -> None:
        session = await _load(get_client())
        if not session.select_entity(entity):
            console.print(f"[red]✗[/red] Unknown object: {entity}")
            raise typer.Exit(1)

        session.index.field_term = search or ""
        found = session.index.run_search(SearchKind.FIELD)

        table = Table(title=f"Fields of {entity}")
        table.add_column("Label", style="cyan")
        table.add_column("API Name", style="magenta")
        table.add_column("Type", style="dim")

        for f in found:
            table.add_row(f.label, f.api_name, f.data_type)

        console.print(table)

    asyncio.run(run())


# ============ Create ============


@app.command()
def create(
    label: str = typer.Option(None, "--label", "-l", help="List view label"),
    api_name: str = typer.Option(None, "--api-name", help="List view API name (default: from label)"),
    entity: str = typer.Option(None, "--object", "-o", help="Object API name"),
    field: list[str] = typer.Option(None, "--field", "-f", help="Column to display (repeatable)"),
    sort: str = typer.Option(None, "--sort", help="Field to sort by"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    filter_: list[str] = typer.Option(
        None, "--filter", help="FIELD:OPERATOR[:VALUE] condition (repeatable)"
    ),
    logic: str = typer.Option(None, "--logic", help="and, or, or a custom expression like '(1 OR 2)'"),
    draft: Path = typer.Option(None, "--draft", help="JSON draft configuration to start from"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print the configuration without submitting"),
    open_: bool = typer.Option(False, "--open", help="Open the list view after creating it"),
) -> None:
    """Build a list view configuration and provision it."""
    filters = [parse_filter(spec) for spec in filter_ or []]

    draft_data = None
    if draft is not None:
        if not draft.exists():
            console.print(f"[red]✗[/red] Draft not found: {draft}")
            raise typer.Exit(1)
        try:
            draft_data = json.loads(draft.read_text())
        except json.JSONDecodeError as e:
            console.print(f"[red]✗[/red] Invalid draft JSON: {e}")
            raise typer.Exit(1)

    async def run() -> None:
        session = await _load(get_client())

        target = entity or (draft_data or {}).get("objectApiName") or (draft_data or {}).get(
            "entityApiName"
        )
        if target and not session.select_entity(target):
            console.print(f"[red]✗[/red] Unknown object: {target}")
            raise typer.Exit(1)

        if draft_data is not None:
            try:
                applied = session.preload_context(draft_data)
            except ValidationError as e:
                console.print(f"[red]✗[/red] Invalid draft: {e.error_count()} errors")
                raise typer.Exit(1)
            if not applied:
                console.print("[yellow]![/yellow] Draft could not be applied to the selected object")

        if label is not None:
            session.set_label(label)
        if api_name is not None:
            session.set_api_name(api_name)

        for name in field or []:
            if not session.set_field_selected(name):
                console.print(f"[yellow]![/yellow] Skipping unknown field: {name}")

        for field_api_name, operator, value in filters:
            session.set_field_selected(field_api_name)
            session.add_filter(field_api_name, operator, value)

        if sort:
            session.set_field_selected(sort)
            session.set_sort(sort, "DESC" if desc else "ASC")
        if logic:
            session.set_logic(logic)

        config = session.configuration
        if not config.api_name:
            console.print("[red]✗[/red] A label or API name is required")
            raise typer.Exit(1)

        console.print_json(json.dumps(config.to_payload()))
        if dry_run:
            return

        result = await session.submit()
        if result.errors:
            raise typer.Exit(1)

        console.print(f"[green]✓[/green] Created {result.identifier}")
        console.print(f"  Link: {result.canonical_url}")
        if open_:
            session.provisioning.open_list_view()

    asyncio.run(run())


# ============ Configure ============


@app.command()
def configure(
    endpoint: str = typer.Option(None, "--endpoint", "-e", help="Instance API endpoint"),
    show: bool = typer.Option(False, "--show", "-s", help="Show current configuration"),
) -> None:
    """Configure CLI settings."""
    env_file = Path(".env")

    if show or endpoint is None:
        token = "set" if settings.API_TOKEN else "not set"
        console.print("Current configuration:")
        console.print(f"  Endpoint: {settings.API_ENDPOINT}")
        console.print(f"  Instance URL: {settings.instance_origin}")
        console.print(f"  API version: {settings.API_VERSION}")
        console.print(f"  Token: {token}")
        return

    lines = []
    found = False

    if env_file.exists():
        for line in env_file.read_text().splitlines():
            if line.startswith("LISTVIEW_API_ENDPOINT="):
                lines.append(f"LISTVIEW_API_ENDPOINT={endpoint}")
                found = True
            else:
                lines.append(line)

    if not found:
        lines.append(f"LISTVIEW_API_ENDPOINT={endpoint}")

    env_file.write_text("\n".join(lines) + "\n")
    console.print(f"[green]✓[/green] Configuration saved to {env_file}")


if __name__ == "__main__":
    app()
