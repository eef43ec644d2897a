"""diffsense CLI — Typer application with analyze, diff, redact, check, info, history, commit and init."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from diffsense import __version__
from diffsense.errors import DiffSenseError, format_error

app = typer.Typer(
    name="diffsense",
    help="Parse, classify and redact git change sets.",
    add_completion=False,
    no_args_is_help=True,
)

console = Console(stderr=True)


def _configure_logging(verbose: bool, debug: bool) -> None:
    """Route the package logger through Rich on stderr."""
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING
    pkg_logger = logging.getLogger("diffsense")
    for handler in list(pkg_logger.handlers):
        if isinstance(handler, RichHandler):
            pkg_logger.removeHandler(handler)
    pkg_logger.addHandler(
        RichHandler(console=Console(stderr=True), show_time=debug, show_path=debug)
    )
    pkg_logger.setLevel(level)


def _is_debug(ctx: typer.Context) -> bool:
    return bool(ctx.obj and ctx.obj.get("debug"))


@contextmanager
def _errors_handled(ctx: typer.Context) -> Iterator[None]:
    """Turn errors into exit code 2. Tracebacks only with --debug."""
    debug = _is_debug(ctx)
    try:
        yield
    except DiffSenseError as exc:
        console.print(f"[bold red]✗[/bold red] {escape(format_error(exc, debug=debug))}")
        raise typer.Exit(code=2) from exc
    except (typer.Exit, typer.Abort):
        raise
    except Exception as exc:
        if debug:
            console.print_exception()
        else:
            console.print(f"[bold red]✗ Unexpected error:[/bold red] {escape(str(exc))}")
            console.print("[dim]Re-run with --debug for details.[/dim]")
        raise typer.Exit(code=2) from exc


def _read_input(path: Optional[str]) -> str:
    if path is None or path == "-":
        return typer.get_text_stream("stdin").read()
    p = Path(path)
    if not p.is_file():
        console.print(f"[bold red]Error:[/bold red] file not found: {escape(path)}")
        raise typer.Exit(code=2)
    return p.read_text(encoding="utf-8", errors="replace")


def _check_format(fmt: str) -> None:
    from diffsense.config.schema import OUTPUT_FORMATS

    if fmt not in OUTPUT_FORMATS:
        console.print(f"[bold red]Invalid format:[/bold red] {escape(fmt)}")
        raise typer.Exit(code=2)


# ── analyze ───────────────────────────────────────────────────────────────────


@app.command()
def analyze(
    ctx: typer.Context,
    staged: Optional[bool] = typer.Option(None, "--staged/--unstaged", help="Analyze the index (default from config)"),
    range_: Optional[str] = typer.Option(None, "--range", "-r", help="Revision range, e.g. main..HEAD"),
    format: Optional[str] = typer.Option(None, "--format", "-f", help="Output format: terminal | json"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffsense.toml"),
) -> None:
    """Classify the current changes: type, scope, magnitude, breaking-ness."""
    from diffsense.analysis import ContextBuilder, ContextOptions
    from diffsense.config.loader import load_config
    from diffsense.git.adapter import GitGateway
    from diffsense.output import json_report, terminal

    with _errors_handled(ctx):
        gateway = GitGateway()
        cfg = load_config(gateway.repository_root(), config)
        fmt = format or cfg.output.format
        _check_format(fmt)

        options = ContextOptions(
            staged=cfg.diff.staged if staged is None else staged,
            range=range_,
            scope_map=cfg.scope.map,
        )
        analysis = ContextBuilder(gateway).build(options)

        if fmt == "json":
            typer.echo(json_report.render(analysis))
        else:
            terminal.render(analysis)


# ── diff ──────────────────────────────────────────────────────────────────────


@app.command()
def diff(
    ctx: typer.Context,
    staged: Optional[bool] = typer.Option(None, "--staged/--unstaged", help="Diff the index (default from config)"),
    range_: Optional[str] = typer.Option(None, "--range", "-r", help="Revision range, e.g. main..HEAD"),
    context: Optional[int] = typer.Option(None, "--context", "-U", min=0, help="Context lines"),
    no_redact: bool = typer.Option(False, "--no-redact", help="Print the diff without redaction"),
    info: bool = typer.Option(False, "--info", help="Report what was redacted (stderr)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffsense.toml"),
) -> None:
    """Print the diff with secrets masked."""
    from diffsense.config.loader import load_config
    from diffsense.git.adapter import GitGateway
    from diffsense.git.models import DiffOptions
    from diffsense.output import terminal
    from diffsense.redaction.redactor import DIFF_ENVELOPE_PREFIXES, build_redactor

    with _errors_handled(ctx):
        gateway = GitGateway()
        repo_root = gateway.repository_root()
        cfg = load_config(repo_root, config)

        options = DiffOptions(
            staged=cfg.diff.staged if staged is None else staged,
            range=range_,
            context_lines=cfg.diff.context_lines if context is None else context,
        )
        text = gateway.diff(options)
        if not text.strip():
            console.print("[dim]No changes.[/dim]")
            raise typer.Exit(code=0)

        if no_redact or not cfg.redaction.enabled:
            typer.echo(text, nl=False)
            return

        redactor = build_redactor(cfg.redaction, repo_root)
        typer.echo(redactor.redact_diff(text), nl=False)
        if info:
            content = "\n".join(
                line for line in text.split("\n") if not line.startswith(DIFF_ENVELOPE_PREFIXES)
            )
            terminal.render_redaction(redactor.redact_with_info(content), console=console)


# ── redact ────────────────────────────────────────────────────────────────────


@app.command()
def redact(
    ctx: typer.Context,
    path: Optional[str] = typer.Argument(None, help="File to redact ('-' or omitted for stdin)"),
    as_diff: bool = typer.Option(False, "--diff", help="Keep unified-diff envelope lines verbatim"),
    info: bool = typer.Option(False, "--info", help="Report what was redacted (stderr)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffsense.toml"),
) -> None:
    """Redact secrets from a file or stdin and print the result."""
    from diffsense.config.loader import load_config
    from diffsense.output import terminal
    from diffsense.redaction.redactor import build_redactor

    with _errors_handled(ctx):
        cfg = load_config(Path.cwd(), config)
        redactor = build_redactor(cfg.redaction, Path.cwd())
        text = _read_input(path)

        if as_diff:
            typer.echo(redactor.redact_diff(text), nl=False)
        else:
            typer.echo(redactor.redact(text), nl=False)
        if info:
            terminal.render_redaction(redactor.redact_with_info(text), console=console)


# ── check ─────────────────────────────────────────────────────────────────────


@app.command()
def check(
    ctx: typer.Context,
    path: Optional[str] = typer.Argument(None, help="File to check ('-' or omitted for stdin)"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffsense.toml"),
) -> None:
    """Exit 1 if the input contains anything that looks like a secret."""
    from diffsense.config.loader import load_config
    from diffsense.output import terminal
    from diffsense.redaction.redactor import build_redactor

    with _errors_handled(ctx):
        cfg = load_config(Path.cwd(), config)
        redactor = build_redactor(cfg.redaction, Path.cwd())
        text = _read_input(path)

        for warning in redactor.scan_for_false_positives(text):
            console.print(f"[yellow]⚠[/yellow]  {escape(warning)}")

        if redactor.has_sensitive_data(text):
            terminal.render_redaction(redactor.redact_with_info(text), console=console)
            raise typer.Exit(code=1)
        console.print("[green]✓[/green] No sensitive data found.")


# ── info ──────────────────────────────────────────────────────────────────────


@app.command()
def info(
    ctx: typer.Context,
    remote: str = typer.Option("origin", "--remote", help="Remote name"),
) -> None:
    """Show the current branch and remote hosting info."""
    from diffsense.git.adapter import GitGateway, parse_remote_info

    with _errors_handled(ctx):
        gateway = GitGateway()
        typer.echo(f"branch: {gateway.current_branch()}")

        url = gateway.remote_url(remote)
        if url is None:
            typer.echo(f"remote: ({remote} not configured)")
            return
        typer.echo(f"remote: {url}")
        parsed = parse_remote_info(url)
        if parsed is not None:
            typer.echo(f"platform: {parsed.platform}")
            typer.echo(f"repository: {parsed.owner}/{parsed.repo}")


# ── history ───────────────────────────────────────────────────────────────────


@app.command()
def history(
    ctx: typer.Context,
    path: str = typer.Argument(..., help="File path"),
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Maximum subjects"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="Path to .diffsense.toml"),
) -> None:
    """List recent commit subjects that touched PATH."""
    from diffsense.config.loader import load_config
    from diffsense.git.adapter import GitGateway

    with _errors_handled(ctx):
        gateway = GitGateway()
        cfg = load_config(gateway.repository_root(), config)
        subjects = gateway.file_history(path, limit or cfg.history.limit)
        if not subjects:
            console.print(f"[dim]No history for {escape(path)}.[/dim]")
            return
        for subject in subjects:
            typer.echo(subject)


# ── commit ────────────────────────────────────────────────────────────────────


@app.command()
def commit(
    ctx: typer.Context,
    message: str = typer.Option(..., "--message", "-m", help="Commit message"),
    no_verify: bool = typer.Option(False, "--no-verify", help="Skip commit hooks"),
    amend: bool = typer.Option(False, "--amend", help="Amend the previous commit"),
    allow_empty: bool = typer.Option(False, "--allow-empty", help="Allow an empty commit"),
) -> None:
    """Commit the staged changes with MESSAGE."""
    from diffsense.git.adapter import GitGateway
    from diffsense.git.models import CommitOptions

    with _errors_handled(ctx):
        gateway = GitGateway()
        gateway.create_commit(
            message,
            CommitOptions(no_verify=no_verify, amend=amend, allow_empty=allow_empty),
        )
        console.print(f"[green]✓[/green] Committed on {escape(gateway.current_branch())}")


# ── init ──────────────────────────────────────────────────────────────────────


@app.command()
def init(ctx: typer.Context) -> None:
    """Generate a starter .diffsense.toml in the repo root."""
    from diffsense.config.defaults import DEFAULT_TOML
    from diffsense.config.loader import CONFIG_FILENAME
    from diffsense.git.adapter import GitGateway

    with _errors_handled(ctx):
        repo_root = GitGateway().repository_root()

    config_path = repo_root / CONFIG_FILENAME
    if config_path.exists():
        console.print(f"[yellow]⚠[/yellow]  {CONFIG_FILENAME} already exists at {config_path}")
        raise typer.Exit(code=1)

    config_path.write_text(DEFAULT_TOML, encoding="utf-8")
    console.print(f"[green]✓[/green] Created {config_path}")


# ── version ───────────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    if value:
        print(f"diffsense {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", "-V", callback=_version_callback,
        is_eager=True, help="Show version and exit",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
    debug: bool = typer.Option(False, "--debug", help="Debug logging and full tracebacks"),
) -> None:
    """diffsense — parse, classify and redact git change sets."""
    ctx.obj = {"debug": debug}
    _configure_logging(verbose, debug)
