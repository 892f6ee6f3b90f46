import contextlib
import os
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from known_folders.cli.shared_flags import folder_argument, output_options
from known_folders.core.domain.entities import KnownFolder, Platform
from known_folders.core.services.error_codes import ErrorCode, KnownFoldersError
from known_folders.core.services.exit_codes import exit_code_for_error
from known_folders.core.services.observability import get_current_run_id, log_operation
from known_folders.core.services.output_formatter import (
    format_envelope,
    format_error_envelope,
)
from known_folders.core.services.settings import Config, config_from_env, load_config_file
from known_folders.core.use_cases.open_folder import OpenFolderUseCase
from known_folders.core.use_cases.resolve_folder import ResolveFolderUseCase

console = Console()


def get_console() -> Console:
    """Helper to get the rich console from context if available."""
    ctx = click.get_current_context(silent=True)
    if ctx and isinstance(ctx.obj, dict) and "console" in ctx.obj:
        return ctx.obj["console"]
    return console


@contextlib.contextmanager
def command_output_handler(command_name: str, format: str, include_timestamp: bool, run_id: str):
    """Centralized error handling and output formatting for CLI commands."""
    try:
        yield
    except KnownFoldersError as e:
        if format == "json":
            click.echo(
                format_error_envelope(
                    command=command_name,
                    error_code=e.code,
                    message=e.message,
                    details=e.details,
                    include_timestamp=include_timestamp,
                    run_id=run_id,
                )
            )
        else:
            get_console().print(f"[bold red][ERROR {e.code.value}] {e.message}[/bold red]")
        raise SystemExit(exit_code_for_error(e.code))
    except Exception as e:
        safe_msg = "An unexpected internal error occurred."
        if format == "json":
            click.echo(
                format_error_envelope(
                    command=command_name,
                    error_code=ErrorCode.UNKNOWN_ERROR,
                    message=safe_msg,
                    details={"internal_error": str(e)},
                    include_timestamp=include_timestamp,
                    run_id=run_id,
                )
            )
        else:
            get_console().print(f"[bold red][ERROR UNKNOWN_ERROR] {safe_msg}[/bold red]")

        # Always log the real error to stderr for operators
        click.echo(f"INTERNAL ERROR: {e}", err=True)
        raise SystemExit(exit_code_for_error(ErrorCode.UNKNOWN_ERROR))


def build_config(ctx: click.Context) -> Config:
    """Environment, then --config file, then explicit flags."""
    options = ctx.obj["config_options"]
    config = config_from_env()
    if options["config_file"]:
        config = load_config_file(options["config_file"], base=config)
    return config.merged(
        xdg_force_default=options["xdg_force_default"],
        xdg_on_mac=options["xdg_on_mac"],
    )


def build_resolver(ctx: click.Context) -> ResolveFolderUseCase:
    return ResolveFolderUseCase(config=build_config(ctx))


def _unavailable(folder: KnownFolder) -> KnownFoldersError:
    return KnownFoldersError(
        code=ErrorCode.FOLDER_UNAVAILABLE,
        message=f"Folder '{folder.value}' has no location on this system",
        details={"folder": folder.value, "platform": Platform.current().value},
    )


@click.group()
@click.version_option(package_name="known-folders", prog_name="known-folders")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="YAML file with xdg_force_default / xdg_on_mac settings.",
)
@click.option(
    "--xdg-force-default/--no-xdg-force-default",
    default=None,
    help="Ignore XDG variables and user-dirs.dirs; use built-in defaults.",
)
@click.option(
    "--xdg-on-mac/--no-xdg-on-mac",
    default=None,
    help="Use XDG rules instead of the macOS Library layout.",
)
@click.option("--no-color", is_flag=True, default=False, help="Disable ANSI colors in text output.")
@click.option("--verbose", is_flag=True, default=False, help="Enable verbose debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Optional[str],
    xdg_force_default: Optional[bool],
    xdg_on_mac: Optional[bool],
    no_color: bool,
    verbose: bool,
):
    """Print the location of well-known folders."""
    if no_color:
        os.environ["NO_COLOR"] = "1"
    if verbose:
        previous_debug = os.environ.get("KNOWN_FOLDERS_DEBUG")
        os.environ["KNOWN_FOLDERS_DEBUG"] = "1"

        def _restore_debug() -> None:
            if previous_debug is None:
                os.environ.pop("KNOWN_FOLDERS_DEBUG", None)
            else:
                os.environ["KNOWN_FOLDERS_DEBUG"] = previous_debug

        ctx.call_on_close(_restore_debug)

    ctx.ensure_object(dict)
    ctx.obj["console"] = Console(no_color=no_color)
    ctx.obj["config_options"] = {
        "config_file": config_file,
        "xdg_force_default": xdg_force_default,
        "xdg_on_mac": xdg_on_mac,
    }


@cli.command()
@folder_argument()
@output_options()
@click.pass_context
def path(ctx, folder, format, include_timestamp):
    """Print the path of FOLDER (e.g. desktop, cache, app-menu)."""
    run_id = get_current_run_id()

    with command_output_handler("path", format, include_timestamp, run_id):
        with log_operation("cli_path", details={"folder": folder}, run_id=run_id) as log_ctx:
            target = KnownFolder.parse(folder)
            result = build_resolver(ctx).execute(target)
            log_ctx["details"]["source"] = result.source
            if result.path is None:
                raise _unavailable(target)

        if format == "json":
            click.echo(
                format_envelope(
                    command="path",
                    success=True,
                    data={"folder": target.value, "path": result.path, "source": result.source},
                    include_timestamp=include_timestamp,
                    run_id=run_id,
                )
            )
            return

        click.echo(result.path)


@cli.command("list")
@output_options()
@click.pass_context
def list_folders(ctx, format, include_timestamp):
    """Print every known folder and where it resolves."""
    run_id = get_current_run_id()

    with command_output_handler("list", format, include_timestamp, run_id):
        with log_operation("cli_list", run_id=run_id) as log_ctx:
            resolver = build_resolver(ctx)
            results = [resolver.execute(folder) for folder in KnownFolder]
            log_ctx["details"]["resolved"] = sum(1 for r in results if r.path is not None)

        if format == "json":
            click.echo(
                format_envelope(
                    command="list",
                    success=True,
                    data={
                        "platform": Platform.current().value,
                        "folders": {r.folder.value: r.path for r in results},
                    },
                    include_timestamp=include_timestamp,
                    run_id=run_id,
                )
            )
            return

        table = Table(title=f"Known folders ({Platform.current().value})")
        table.add_column("Folder", style="cyan", no_wrap=True)
        table.add_column("Path", overflow="fold")
        table.add_column("Source", style="dim")
        for r in results:
            table.add_row(r.folder.value, r.path or "-", r.source or "")
        get_console().print(table)


@cli.command("open")
@folder_argument()
@output_options()
@click.pass_context
def open_cmd(ctx, folder, format, include_timestamp):
    """Open FOLDER as a directory and report how many entries it holds."""
    run_id = get_current_run_id()

    with command_output_handler("open", format, include_timestamp, run_id):
        with log_operation("cli_open", details={"folder": folder}, run_id=run_id):
            target = KnownFolder.parse(folder)
            handle = OpenFolderUseCase(build_resolver(ctx)).execute(target)
            if handle is None:
                raise _unavailable(target)
            with handle:
                entries = sum(1 for _ in handle.scandir())

        if format == "json":
            click.echo(
                format_envelope(
                    command="open",
                    success=True,
                    data={"folder": target.value, "path": str(handle.path), "entries": entries},
                    include_timestamp=include_timestamp,
                    run_id=run_id,
                )
            )
            return

        click.echo(f"{handle.path} ({entries} entries)")


if __name__ == "__main__":
    cli()
