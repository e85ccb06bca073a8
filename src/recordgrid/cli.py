"""Typer-based CLI: inspect a record-set file through the grid engine."""

from __future__ import annotations

import functools
import json
import logging
from pathlib import Path
from typing import Any, Hashable, List, Optional

import typer
from rich.console import Console
from rich.table import Table

from recordgrid.domain.models import (
    FeatureFlags,
    GridOptions,
    MutationPayload,
    RecordSet,
)
from recordgrid.errors import RecordGridError
from recordgrid.io.record_set_loader import load_record_set
from recordgrid.settings import SettingsManager
from recordgrid.viewmodels import CommandResult, ViewController, ViewSnapshot

app = typer.Typer(help="Search, sort, page and plan edits over tabular record files")
console = Console()


def _handle_errors(func):
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except RecordGridError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(1) from exc

    return wrapper


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _options(settings: Optional[Path]) -> GridOptions:
    if settings is None:
        return GridOptions()
    manager = SettingsManager(path=settings)
    manager.load(create=False)
    return manager.grid_options()


def _controller(path: Path, settings: Optional[Path], all_editable: bool) -> ViewController:
    options = _options(settings)
    # Payloads are printed, never sent anywhere
    options = GridOptions(
        page_size=options.page_size,
        bulk_edit_min_selection=options.bulk_edit_min_selection,
        id_field=options.id_field,
        features=FeatureFlags(
            bulk_edit_enabled=options.features.bulk_edit_enabled,
            navigation_enabled=False,
            remote_save_enabled=False,
        ),
    )
    controller = ViewController(options=options)
    controller.load(load_record_set(path, id_field=options.id_field, all_editable=all_editable))
    return controller


def _resolve_id(record_set: RecordSet, raw: str) -> Hashable:
    """Map a command-line id onto the record set's id, which may be numeric."""
    if raw in record_set:
        return raw
    try:
        number = int(raw)
    except ValueError:
        return raw
    return number if number in record_set else raw


def _parse_assignments(assignments: List[str]) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    for item in assignments:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"Expected FIELD=VALUE, got {item!r}", param_hint="--set")
        fields[name.strip()] = value
    return fields


def _check(result: CommandResult) -> None:
    if not result.success:
        typer.echo(f"Refused: {result.error}", err=True)
        raise typer.Exit(1)


def _apply(controller: ViewController, fields: dict[str, Any]) -> None:
    result = controller.set_edit_fields(fields)
    if not result.success:
        typer.echo(f"Skipped: {result.error}", err=True)


def _render(controller: ViewController, snapshot: ViewSnapshot) -> None:
    if snapshot.no_data:
        console.print("[yellow]No records match.")
        return
    table = Table(title=snapshot.page_info)
    columns = controller.record_set.columns
    for column in columns:
        table.add_column(column.display_label)
    for record in snapshot.visible:
        cells = [record.get(c.field_name) for c in columns]
        table.add_row(*("" if cell is None else str(cell) for cell in cells))
    console.print(table)
    console.print(f"{snapshot.filtered_count} of {snapshot.total_count} record(s)")


def _emit(controller: ViewController, commit) -> None:
    captured: List[MutationPayload] = []
    controller.mutation_requested.connect(captured.append)
    future = commit()
    result = future.result()
    if not captured:
        typer.echo(f"Refused: {result.message}", err=True)
        raise typer.Exit(1)
    for payload in captured:
        console.print_json(json.dumps(payload.to_dict(), default=str))


@app.command()
@_handle_errors
def show(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Record-set JSON file"),
    search: str = typer.Option("", "--search", "-s", help="Case-insensitive search term"),
    sort: Optional[str] = typer.Option(None, "--sort", help="Field to sort by"),
    desc: bool = typer.Option(False, "--desc", help="Sort descending"),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page to show"),
    page_size: Optional[int] = typer.Option(None, "--page-size", min=1),
    settings: Optional[Path] = typer.Option(None, "--settings", help="Settings JSON file"),
) -> None:
    """Print one page of records after search and sort."""

    controller = _controller(path, settings, all_editable=False)
    if page_size is not None:
        controller.set_page_size(page_size)
    controller.search(search)
    controller.sort(sort, "desc" if desc else "asc")
    snapshot = controller.go_to_page(page)
    _render(controller, snapshot)


@app.command()
@_handle_errors
def update(
    path: Path = typer.Argument(..., exists=True, dir_okay=False),
    ids: List[str] = typer.Option(..., "--id", help="Record id; repeat for a bulk edit"),
    assignments: List[str] = typer.Option(..., "--set", help="FIELD=VALUE"),
    all_editable: bool = typer.Option(False, "--all-editable", help="Treat every column as editable"),
    settings: Optional[Path] = typer.Option(None, "--settings"),
) -> None:
    """Print the update payload for editing one or more records."""

    controller = _controller(path, settings, all_editable)
    targets = [_resolve_id(controller.record_set, raw) for raw in ids]
    if len(targets) == 1:
        _check(controller.open_edit(targets[0]))
    else:
        controller.select_rows(targets)
        _check(controller.open_bulk_edit())
    _apply(controller, _parse_assignments(assignments))
    _emit(controller, controller.commit_edit)


@app.command()
@_handle_errors
def create(
    path: Path = typer.Argument(..., exists=True, dir_okay=False),
    assignments: List[str] = typer.Option([], "--set", help="FIELD=VALUE"),
    settings: Optional[Path] = typer.Option(None, "--settings"),
) -> None:
    """Print the create payload for a new record."""

    controller = _controller(path, settings, all_editable=False)
    _check(controller.open_create())
    _apply(controller, _parse_assignments(assignments))
    _emit(controller, controller.commit_edit)


@app.command()
@_handle_errors
def delete(
    path: Path = typer.Argument(..., exists=True, dir_okay=False),
    record: str = typer.Option(..., "--id", help="Record id"),
    settings: Optional[Path] = typer.Option(None, "--settings"),
) -> None:
    """Print the delete payload for one record."""

    controller = _controller(path, settings, all_editable=False)
    target = _resolve_id(controller.record_set, record)
    _emit(controller, lambda: controller.request_delete(target))


if __name__ == "__main__":  # pragma: no cover
    app()
