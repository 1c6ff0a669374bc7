"""Index maintenance and search commands."""

import json
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console
from rich.table import Table

from searchlite.models import ID_FIELD, TYPE_FIELD, ResultEnvelope


def get_provider(ctx):
    """Get the search provider from context."""
    return ctx.obj.provider


def load_documents(path: Path) -> list[dict[str, Any]]:
    """Load documents from a JSON or YAML file.

    The file holds either a list of documents or a mapping with a
    ``documents`` list.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise click.BadParameter(f"Invalid document file {path}: {e}")

    if isinstance(data, dict):
        data = data.get("documents")
    if not isinstance(data, list):
        raise click.BadParameter(f"{path} does not contain a list of documents")
    return data


def parse_weights(values: tuple[str, ...]) -> dict[str, float] | None:
    """Parse ``field=weight`` pairs."""
    if not values:
        return None

    weights = {}
    for value in values:
        field, sep, weight = value.partition("=")
        if not sep or not field:
            raise click.BadParameter(f"Expected FIELD=WEIGHT, got {value!r}")
        try:
            weights[field] = float(weight)
        except ValueError:
            raise click.BadParameter(f"Weight for {field!r} is not a number")
    return weights


@click.command()
@click.argument("source", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def index(ctx: click.Context, source: Path) -> None:
    """Rebuild the index from a JSON or YAML document file."""
    console = ctx.obj.console
    documents = load_documents(source)

    get_provider(ctx).replace(documents)
    console.print(f"[green]✓[/green] Indexed {len(documents)} documents")


@click.command()
@click.argument("source", type=click.Path(exists=True, path_type=Path))
@click.pass_context
def add(ctx: click.Context, source: Path) -> None:
    """Add documents to the existing index."""
    console = ctx.obj.console
    provider = get_provider(ctx)
    documents = load_documents(source)

    for document in documents:
        provider.insert(document)
    console.print(f"[green]✓[/green] Added {len(documents)} documents")


@click.command()
@click.argument("ids", nargs=-1, required=True)
@click.pass_context
def remove(ctx: click.Context, ids: tuple[str, ...]) -> None:
    """Remove documents from the index by id."""
    console = ctx.obj.console
    provider = get_provider(ctx)

    for document_id in ids:
        provider.delete(document_id)
    console.print(f"[green]✓[/green] Removed {len(ids)} documents")


@click.command()
@click.argument("query", required=True)
@click.option("--page", "-p", type=click.IntRange(min=1), default=1, help="Result page")
@click.option(
    "--limit", "-n", type=click.IntRange(min=1), default=10, help="Results per page"
)
@click.option(
    "--operator",
    type=click.Choice(["AND", "OR", "NOT"]),
    default=None,
    help="Operator between query words",
)
@click.option(
    "--weight",
    "-w",
    "weights",
    multiple=True,
    help="Ranking weight as FIELD=WEIGHT (repeatable)",
)
@click.option("--json", "as_json", is_flag=True, help="Print the raw result envelope")
@click.pass_context
def search(
    ctx: click.Context,
    query: str,
    page: int,
    limit: int,
    operator: str | None,
    weights: tuple[str, ...],
    as_json: bool,
) -> None:
    """Search the index.

    Words match as prefixes and are combined with OR unless the query
    already contains AND, OR or NOT.
    """
    console = ctx.obj.console
    results = get_provider(ctx).search(
        query,
        page=page,
        limit=limit,
        operator=operator,
        weights=parse_weights(weights),
    )

    if as_json:
        click.echo(json.dumps(results.to_dict()))
        return

    _display_results(console, results, query)


@click.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show index status."""
    console = ctx.obj.console
    provider = get_provider(ctx)

    console.print("\n[bold]Index Status[/bold]\n")
    console.print(f"Location: {provider.config.resolve_file()}")

    if not provider.has_index():
        console.print("Index: [yellow]missing[/yellow]")
        return

    engine = provider.engine
    relation = provider.config.relation
    console.print("Index: [green]OK[/green]")
    console.print(f"Documents: {engine.count(relation)}")
    columns = [
        name
        for name in engine.describe_columns(relation)
        if name not in (ID_FIELD, TYPE_FIELD)
    ]
    console.print(f"Columns: {', '.join(columns)}")


def _display_results(console: Console, results: ResultEnvelope, query: str) -> None:
    if results.is_empty:
        console.print(f"[yellow]No results found for '{query}'[/yellow]")
        return

    table = Table(title=f"Results for '{query}' (page {results.page})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("ID", style="cyan")
    table.add_column("Type", style="green")

    offset = (results.page - 1) * results.limit
    for position, hit in enumerate(results.hits, start=offset + 1):
        table.add_row(str(position), str(hit[ID_FIELD]), str(hit[TYPE_FIELD] or ""))

    console.print(table)
