"""Command-line interface for the Milestones service."""
from __future__ import annotations

from pathlib import Path

import typer
from rich import print as rprint
from rich.table import Table

from . import config, state, uploads
from .logging_config import setup_logging

app = typer.Typer(help="Run the Milestones backend and inspect its stored data")


@app.command("serve")
def serve(
    host: str = typer.Option(config.HOST, "--host", help="Host to bind"),
    port: int = typer.Option(config.PORT, "--port", help="Port to bind"),
) -> None:
    """Start the HTTP server."""

    from . import server

    setup_logging()
    server.main(host=host, port=port)


@app.command("list")
def list_milestones(
    db_file: Path = typer.Option(config.DB_FILE, "--db-file", help="Milestone store file"),
) -> None:
    """List stored milestones."""

    milestones = state.load_milestones(db_file)
    if not milestones:
        typer.echo("No milestones stored.")
        return

    table = Table(title=f"Milestones ({db_file.name})")
    table.add_column("ID")
    table.add_column("Title")
    table.add_column("Owner")
    table.add_column("Date")
    table.add_column("Images")
    table.add_column("Created")
    for milestone in milestones:
        table.add_row(
            str(milestone.get("id", "")),
            str(milestone.get("title", "")),
            str(milestone.get("owner", "")),
            str(milestone.get("date", "")),
            str(len(milestone.get("images") or [])),
            str(milestone.get("createdAt", "")),
        )
    rprint(table)


@app.command("delete")
def delete_milestone(
    milestone_id: str = typer.Argument(..., help="Milestone id"),
    db_file: Path = typer.Option(config.DB_FILE, "--db-file", help="Milestone store file"),
) -> None:
    """Delete every milestone with the given id. Uploaded images are left in place."""

    before, after = state.remove_milestone(db_file, milestone_id)
    if len(after) == len(before):
        known = ", ".join(str(m.get("id")) for m in before) or "(none)"
        typer.echo(f"Milestone '{milestone_id}' not found. Known ids: {known}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Deleted milestone '{milestone_id}'. {len(after)} remaining.")


@app.command("orphans")
def list_orphans(
    db_file: Path = typer.Option(config.DB_FILE, "--db-file", help="Milestone store file"),
    upload_dir: Path = typer.Option(config.UPLOAD_DIR, "--upload-dir", help="Upload directory"),
) -> None:
    """Show uploaded files that no stored milestone references."""

    referenced = set()
    for milestone in state.load_milestones(db_file):
        for url in milestone.get("images") or []:
            referenced.add(url.rsplit("/", 1)[-1])

    orphans = [name for name in uploads.stored_names(upload_dir) if name not in referenced]
    if not orphans:
        typer.echo("No orphaned uploads.")
        return

    table = Table(title=f"Orphaned uploads in {upload_dir}")
    table.add_column("File")
    table.add_column("Size (KB)")
    for name in orphans:
        size_kb = (upload_dir / name).stat().st_size / 1024
        table.add_row(name, f"{size_kb:.2f}")
    rprint(table)


if __name__ == "__main__":  # pragma: no cover
    app()
