"""CLI commands for generating and applying tree patches."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from .config import EngineConfig, load_config
from .errors import ConfigError
from .tools.apply import PatchStatus, is_applicable, is_applied, reconcile, run_patch
from .tools.diff import generate
from .tools.normalize import normalize_diff_paths

APP_HELP = "Generate and apply unified diffs between directory trees."

app = typer.Typer(help=APP_HELP)


def _load_engine_config(config: Optional[Path]) -> EngineConfig:
    """Load engine settings, exiting with a message when they are invalid."""
    if config is not None and not config.exists():
        raise typer.BadParameter(f"Config file not found: {config}")
    try:
        return load_config(config)
    except ConfigError as error:
        typer.echo(f"Failed to load config: {error}")
        raise typer.Exit(code=1) from error


def _read_patch(patch_file: Path) -> str:
    if not patch_file.is_file():
        raise typer.BadParameter(f"Patch file not found: {patch_file}")
    return patch_file.read_text(encoding="utf-8")


@app.command()
def diff(
    base: Path = typer.Argument(..., help="Directory holding the original tree."),
    target: Path = typer.Argument(..., help="Directory holding the modified tree."),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write the patch to this file instead of stdout.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to an engine configuration file.",
    ),
) -> None:
    """Print the unified diff turning BASE into TARGET."""
    settings = _load_engine_config(config)
    patch_text = generate(base.resolve(), target.resolve(), config=settings)
    if not patch_text:
        typer.echo("No differences found.", err=True)
        return
    if output is None:
        typer.echo(patch_text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(patch_text, encoding="utf-8")
    typer.echo(f"Patch written to {output}")


@app.command()
def apply(
    target: Path = typer.Argument(..., help="Directory the patch applies to."),
    patch_file: Path = typer.Argument(..., help="Unified diff to apply."),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Only check whether the patch applies cleanly.",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to an engine configuration file.",
    ),
) -> None:
    """Apply PATCH_FILE to TARGET unless it is already applied."""
    settings = _load_engine_config(config)
    patch_text = _read_patch(patch_file)
    root = target.resolve()

    if dry_run:
        check = run_patch(root, patch_text, reverse=False, dry_run=True, config=settings)
        if check.ok:
            typer.echo(f"{patch_file.name}: applies cleanly.")
            return
        typer.echo(f"{patch_file.name}: cannot apply patch.\n  {check.error}")
        raise typer.Exit(code=1)

    outcome = reconcile(root, patch_text, config=settings)
    if outcome.status is PatchStatus.ALREADY_APPLIED:
        typer.echo(f"{patch_file.name}: already applied, skipping.")
    elif outcome.status is PatchStatus.APPLIED:
        typer.echo(f"{patch_file.name}: applied successfully.")
        for path in outcome.paths:
            typer.echo(f"- {path}")
    elif outcome.status is PatchStatus.NOT_APPLICABLE:
        typer.echo(f"{patch_file.name}: cannot apply patch (content mismatch).\n  {outcome.error}")
        raise typer.Exit(code=1)
    else:
        typer.echo(f"{patch_file.name}: failed to apply.\n  {outcome.error}")
        raise typer.Exit(code=1)


@app.command()
def status(
    target: Path = typer.Argument(..., help="Directory the patch applies to."),
    patch_file: Path = typer.Argument(..., help="Unified diff to inspect."),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to an engine configuration file.",
    ),
) -> None:
    """Report whether PATCH_FILE is applied, applicable or conflicting."""
    settings = _load_engine_config(config)
    patch_text = _read_patch(patch_file)
    root = target.resolve()
    if is_applied(root, patch_text, config=settings):
        typer.echo("applied")
    elif is_applicable(root, patch_text, config=settings):
        typer.echo("applicable")
    else:
        typer.echo("conflict")
        raise typer.Exit(code=1)


@app.command()
def normalize(
    diff_file: Path = typer.Argument(..., help="Diff produced with absolute paths."),
    original: Path = typer.Option(..., "--original", help="Base directory of the original side."),
    modified: Path = typer.Option(..., "--modified", help="Base directory of the modified side."),
) -> None:
    """Rewrite absolute header paths in DIFF_FILE to portable a/ b/ paths."""
    text = _read_patch(diff_file)
    typer.echo(normalize_diff_paths(text, original, modified), nl=False)


if __name__ == "__main__":
    app()
