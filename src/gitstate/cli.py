"""gitstate CLI: Typer application with status, stash, reset, unstage, and init commands."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional, Tuple

import typer
from loguru import logger
from rich.console import Console

from gitstate import __version__
from gitstate.config.schema import GitStateConfig
from gitstate.git.capabilities import GitContext
from gitstate.git.reset import GitResetMode

app = typer.Typer(
    name="gitstate",
    help="Structured git working-tree and index status.",
    add_completion=False,
    no_args_is_help=True,
)
stash_app = typer.Typer(help="Stash, list, and restore working-tree changes.", no_args_is_help=True)
app.add_typer(stash_app, name="stash")

console = Console(stderr=True)


def setup_logging(log_level: str = "WARNING") -> None:
    """Route loguru output to stderr at *log_level*."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>",
        colorize=None,
    )


def _resolve_repo_root(context: Optional[GitContext] = None) -> Path:
    """Find the git repo root, exit 2 on failure."""
    from gitstate.git.adapter import GitError, get_repo_root

    try:
        return get_repo_root(context=context)
    except GitError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc


def _prepare(ctx: typer.Context, config: Optional[str] = None) -> Tuple[Path, GitStateConfig, GitContext]:
    """Resolve the repo, load config, configure logging, and build the git context."""
    from gitstate.config.loader import ConfigError, load_config

    log_override = (ctx.obj or {}).get("log_level")
    setup_logging(log_override or "WARNING")

    repo_root = _resolve_repo_root()
    try:
        cfg = load_config(repo_root, config)
    except ConfigError as exc:
        console.print(f"[bold red]Config error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    setup_logging(log_override or cfg.logging.level)
    logger.debug(f"Repo root: {repo_root}")
    git_context = GitContext(executable=cfg.git.executable, timeout=cfg.git.timeout)
    return repo_root, cfg, git_context


def _git_failed(exc: Exception) -> typer.Exit:
    console.print(f"[bold red]Git error:[/bold red] {exc}")
    return typer.Exit(code=2)


# ── status ────────────────────────────────────────────────────────────────────


@app.command()
def status(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .gitstate.toml"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=0, help="Max entries to read (0 = unbounded)"),
    allow_locks: bool = typer.Option(False, "--allow-locks", help="Do not pass --no-optional-locks to git"),
) -> None:
    """Show staged, unstaged, and untracked changes."""
    from gitstate.git.adapter import GitError
    from gitstate.git.status import StatusClassificationError, get_status
    from gitstate.output import json_report, terminal

    repo_root, cfg, git_context = _prepare(ctx, config)

    # --- CLI overrides ---
    if format:
        if format not in ("terminal", "json"):
            console.print(f"[bold red]Invalid format:[/bold red] {format}")
            raise typer.Exit(code=2)
        cfg.output.format = format  # type: ignore[assignment]
    if limit is not None:
        cfg.status.entry_limit = limit
    if allow_locks:
        cfg.status.no_optional_locks = False

    try:
        result = get_status(
            repo_root,
            no_optional_locks=cfg.status.no_optional_locks,
            limit=cfg.status.limit,
            context=git_context,
        )
    except GitError as exc:
        raise _git_failed(exc) from exc
    except StatusClassificationError as exc:
        console.print(f"[bold red]Status error:[/bold red] {exc}")
        raise typer.Exit(code=2) from exc

    if cfg.output.format == "json":
        print(json_report.render(result))
    else:
        terminal.render(result, show_summary=cfg.output.show_summary)


# ── stash ─────────────────────────────────────────────────────────────────────


@stash_app.command("push")
def stash_push(
    ctx: typer.Context,
    message: Optional[str] = typer.Option(None, "--message", "-m", help="Stash message"),
) -> None:
    """Stash the current changes."""
    from gitstate.git import stash
    from gitstate.git.adapter import GitError

    repo_root, _, git_context = _prepare(ctx)
    try:
        stash.push(repo_root, message, context=git_context)
    except GitError as exc:
        raise _git_failed(exc) from exc
    console.print("[green]✓[/green] Changes stashed")


@stash_app.command("list")
def stash_list(ctx: typer.Context) -> None:
    """List stashes, newest first."""
    from gitstate.git import stash
    from gitstate.git.adapter import GitError

    repo_root, _, git_context = _prepare(ctx)
    try:
        entries = stash.list_stashes(repo_root, context=git_context)
    except GitError as exc:
        raise _git_failed(exc) from exc
    for entry in entries:
        print(entry)


def _run_stash_op(ctx: typer.Context, op: str, stash_id: Optional[str]) -> None:
    from gitstate.git import stash
    from gitstate.git.adapter import GitError

    repo_root, _, git_context = _prepare(ctx)
    try:
        getattr(stash, op)(repo_root, stash_id, context=git_context)
    except GitError as exc:
        raise _git_failed(exc) from exc
    console.print(f"[green]✓[/green] stash {op} {stash_id or ''}".rstrip())


@stash_app.command("apply")
def stash_apply(
    ctx: typer.Context,
    stash_id: Optional[str] = typer.Argument(None, help="Stash id, e.g. stash@{1}"),
) -> None:
    """Apply the latest stash (or STASH_ID), keeping it in the list."""
    _run_stash_op(ctx, "apply", stash_id)


@stash_app.command("pop")
def stash_pop(
    ctx: typer.Context,
    stash_id: Optional[str] = typer.Argument(None, help="Stash id, e.g. stash@{1}"),
) -> None:
    """Apply and remove the latest stash (or STASH_ID)."""
    _run_stash_op(ctx, "pop", stash_id)


@stash_app.command("drop")
def stash_drop(
    ctx: typer.Context,
    stash_id: Optional[str] = typer.Argument(None, help="Stash id, e.g. stash@{1}"),
) -> None:
    """Remove the latest stash (or STASH_ID)."""
    _run_stash_op(ctx, "drop", stash_id)


@stash_app.command("clear")
def stash_clear(ctx: typer.Context) -> None:
    """Remove all stashes."""
    from gitstate.git import stash
    from gitstate.git.adapter import GitError

    repo_root, _, git_context = _prepare(ctx)
    try:
        stash.clear(repo_root, context=git_context)
    except GitError as exc:
        raise _git_failed(exc) from exc
    console.print("[green]✓[/green] All stashes cleared")


# ── reset / unstage ───────────────────────────────────────────────────────────


@app.command()
def reset(
    ctx: typer.Context,
    ref: str = typer.Argument("HEAD", help="Commit or tree to reset to"),
    paths: Optional[List[str]] = typer.Argument(None, help="Only reset these paths"),
    hard: bool = typer.Option(False, "--hard", help="Reset index and working tree"),
    soft: bool = typer.Option(False, "--soft", help="Move HEAD only"),
    mixed: bool = typer.Option(False, "--mixed", help="Reset the index (default)"),
) -> None:
    """Reset HEAD (or only PATHS in the index) to REF."""
    from gitstate.git import reset as git_reset
    from gitstate.git.adapter import GitError

    flags = {GitResetMode.HARD: hard, GitResetMode.SOFT: soft, GitResetMode.MIXED: mixed}
    selected = [m for m, on in flags.items() if on]
    if len(selected) > 1:
        console.print("[bold red]Choose only one of --hard, --soft, --mixed[/bold red]")
        raise typer.Exit(code=2)
    mode = selected[0] if selected else GitResetMode.MIXED

    repo_root, _, git_context = _prepare(ctx)
    try:
        if paths:
            git_reset.reset_paths(repo_root, mode, ref, paths, context=git_context)
        else:
            git_reset.reset(repo_root, mode, ref, context=git_context)
    except GitError as exc:
        raise _git_failed(exc) from exc
    console.print(f"[green]✓[/green] Reset ({mode.value}) to {ref}")


@app.command()
def unstage(ctx: typer.Context) -> None:
    """Unstage every staged change, keeping the working tree."""
    from gitstate.git import reset as git_reset
    from gitstate.git.adapter import GitError

    repo_root, _, git_context = _prepare(ctx)
    try:
        git_reset.unstage_all(repo_root, context=git_context)
    except GitError as exc:
        raise _git_failed(exc) from exc
    console.print("[green]✓[/green] All changes unstaged")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init() -> None:
    """Generate a starter .gitstate.toml in the repo root."""
    from gitstate.config.defaults import DEFAULT_TOML
    from gitstate.config.loader import CONFIG_FILENAME

    repo_root = _resolve_repo_root()
    config_path = repo_root / CONFIG_FILENAME

    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version / global options ──────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"gitstate {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug output"),
) -> None:
    """gitstate: structured git working-tree and index status."""
    log_level = "DEBUG" if debug else "INFO" if verbose else None
    ctx.obj = {"log_level": log_level}
