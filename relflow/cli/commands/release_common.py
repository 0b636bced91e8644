from __future__ import annotations

from typing import NoReturn

import typer

from relflow.cli.context import CLIContext
from relflow.core.result import Err
from relflow.output.console import ConsoleProtocol, Style
from relflow.release.errors import ReleaseError, release_error_code
from relflow.release.manifest import Manifest
from relflow.release.model import PublishContext, UploadTarget
from relflow.release.prepare import PreparedRepository, RefreshOptions, prepare_repository
from relflow.release.workflow import load_context

DIR_OPTION = typer.Option(None, "--dir", help="Project directory (default: current directory).")
CONFIG_OPTION = typer.Option(None, "--config", help="Config file (default: $RELFLOW_CONFIG).")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Show diagnostic output.")
REFRESH_SERVER_OPTION = typer.Option(
    False, "--refresh-server", help="Choose the hosting platform again."
)
REFRESH_TOKEN_OPTION = typer.Option(False, "--refresh-token", help="Enter the API token again.")
REFRESH_OWNER_OPTION = typer.Option(
    False, "--refresh-owner", help="Choose the repository owner again."
)


def exit_release(error: ReleaseError, *, console: ConsoleProtocol) -> NoReturn:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(release_error_code(error)))


def start_run(
    cli: CLIContext,
    *,
    refresh: RefreshOptions,
    build_command: str = "",
    is_production: bool = False,
    upload: UploadTarget | None = None,
) -> tuple[PublishContext, Manifest, PreparedRepository]:
    """Load the project and make sure its hosted repository is ready."""
    loaded = load_context(
        cli.work_dir,
        config=cli.config.workflow,
        build_command=build_command,
        is_production=is_production,
        upload=upload,
    )
    if isinstance(loaded, Err):
        exit_release(loaded.error, console=cli.console)
    ctx, manifest = loaded.value

    prepared = prepare_repository(
        project_name=ctx.project_name,
        work_dir=cli.work_dir,
        vcs=cli.vcs,
        store=cli.store,
        http=cli.http,
        config=cli.config,
        prompter=cli.prompter,
        console=cli.console,
        refresh=refresh,
    )
    if isinstance(prepared, Err):
        exit_release(prepared.error, console=cli.console)
    return ctx, manifest, prepared.value
