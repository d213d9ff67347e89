"""Typer application entrypoint."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
import typer
from rich import print as rprint
from rich.table import Table
from typer.core import TyperGroup

from backup.manager import describe_backups, run_backups
from backup.process import BackupError
from db.config import get_backup_settings, get_settings
from logging_config import configure_logging
from restore.prompts import RichPrompter
from restore.runner import NoBackupsError, RestoreOutcome, run_restore


configure_logging()


class UsageFallbackGroup(TyperGroup):
    """Print the usage text instead of failing on an unknown command or option."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError:
            _show_usage(ctx)

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except click.UsageError as exc:
            _show_usage(exc.ctx or ctx)


def _show_usage(ctx: click.Context) -> None:
    typer.echo(ctx.get_help())
    ctx.exit(0)


app = typer.Typer(
    cls=UsageFallbackGroup,
    help="Back up PostgreSQL databases with pg_dump and restore them with psql",
    add_completion=False,
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    if verbose:
        configure_logging("DEBUG", force=True)
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _backup_directory(option: Optional[Path]) -> Path:
    return option if option is not None else get_backup_settings().directory


def _format_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = size_bytes / 1024
    for unit in ("KB", "MB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} GB"


@app.command("backup")
def backup_command(
    backup_dir: Optional[Path] = typer.Option(None, "--backup-dir", help="Backup directory (default: ./db_backups)"),
) -> None:
    """Back up every configured database."""

    urls = get_settings().urls
    if not urls:
        typer.echo("No databases configured. Set DATABASE_URLS or create dbs.yaml.", err=True)
        raise typer.Exit(code=1)

    directory = _backup_directory(backup_dir)
    try:
        results = run_backups(urls, directory, pg_dump=get_backup_settings().pg_dump)
    except BackupError as exc:
        typer.echo(f"Backup failed: {exc}", err=True)
        raise typer.Exit(code=1)

    for result in results:
        if result.ok:
            typer.echo(f"✅ {result.database}: {result.path}")
        else:
            typer.echo(f"❌ {result.database}: {result.error}", err=True)
    succeeded = sum(1 for result in results if result.ok)
    typer.echo(f"Backed up {succeeded} of {len(results)} databases.")


@app.command("restore")
def restore_command(
    backup_dir: Optional[Path] = typer.Option(None, "--backup-dir", help="Backup directory (default: ./db_backups)"),
    file: Optional[Path] = typer.Option(None, "--file", help="Backup to restore; skips the selection prompt"),
    target: Optional[str] = typer.Option(None, "--target", help="Target postgres:// URL; skips the prompt"),
) -> None:
    """Restore one backup into a target database."""

    directory = _backup_directory(backup_dir)
    try:
        outcome = run_restore(
            directory,
            RichPrompter(),
            psql=get_backup_settings().psql,
            dump_file=file,
            target=target,
        )
    except NoBackupsError:
        typer.echo(f"❌ No backup files found in {directory}/", err=True)
        raise typer.Exit(code=1)
    except BackupError as exc:
        typer.echo(f"Restore failed: {exc}", err=True)
        raise typer.Exit(code=1)

    if outcome is RestoreOutcome.CANCELLED:
        typer.echo("Restore cancelled, exiting.")
        return
    if outcome is RestoreOutcome.FAILED:
        typer.echo("❌ Restore failed", err=True)
        raise typer.Exit(code=1)
    typer.echo("✅ Restore completed")


@app.command("list")
def list_command(
    backup_dir: Optional[Path] = typer.Option(None, "--backup-dir", help="Backup directory (default: ./db_backups)"),
) -> None:
    """List saved backups, newest first."""

    try:
        backups = describe_backups(_backup_directory(backup_dir))
    except BackupError as exc:
        typer.echo(f"List failed: {exc}", err=True)
        raise typer.Exit(code=1)
    if not backups:
        typer.echo("No backups found.")
        return

    table = Table(title="Backups")
    table.add_column("File")
    table.add_column("Size", justify="right")
    table.add_column("Modified (UTC)")
    for info in backups:
        table.add_row(info.name, _format_size(info.size_bytes), info.modified.strftime("%Y-%m-%d %H:%M:%S"))
    rprint(table)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
