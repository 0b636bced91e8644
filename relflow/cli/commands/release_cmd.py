"""prepare / commit / publish commands."""

from __future__ import annotations

from pathlib import Path

import typer

from relflow.cli.commands.release_common import (
    CONFIG_OPTION,
    DIR_OPTION,
    REFRESH_OWNER_OPTION,
    REFRESH_SERVER_OPTION,
    REFRESH_TOKEN_OPTION,
    VERBOSE_OPTION,
    exit_release,
    start_run,
)
from relflow.cli.context import build_context
from relflow.core.result import Err
from relflow.release.model import UploadTarget
from relflow.release.prepare import RefreshOptions
from relflow.release.workflow import commit as commit_cycle
from relflow.release.workflow import publish as publish_pipeline


def prepare(
    work_dir: Path | None = DIR_OPTION,
    config_path: Path | None = CONFIG_OPTION,
    refresh_server: bool = REFRESH_SERVER_OPTION,
    refresh_token: bool = REFRESH_TOKEN_OPTION,
    refresh_owner: bool = REFRESH_OWNER_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Create the hosted repository if needed and initialize the local one."""
    cli = build_context(work_dir=work_dir, config_path=config_path, verbose=verbose)
    refresh = RefreshOptions(server=refresh_server, token=refresh_token, owner=refresh_owner)
    _, _, prepared = start_run(cli, refresh=refresh)
    cli.console.success(f"{prepared.platform} repository ready: {prepared.remote_url}")


def commit(
    work_dir: Path | None = DIR_OPTION,
    config_path: Path | None = CONFIG_OPTION,
    refresh_server: bool = REFRESH_SERVER_OPTION,
    refresh_token: bool = REFRESH_TOKEN_OPTION,
    refresh_owner: bool = REFRESH_OWNER_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Commit local work to dev/<version> and sync it with the remote."""
    cli = build_context(work_dir=work_dir, config_path=config_path, verbose=verbose)
    refresh = RefreshOptions(server=refresh_server, token=refresh_token, owner=refresh_owner)
    ctx, _, _ = start_run(cli, refresh=refresh)

    result = commit_cycle(
        ctx,
        vcs=cli.vcs,
        config=cli.config.workflow,
        prompter=cli.prompter,
        console=cli.console,
    )
    if isinstance(result, Err):
        exit_release(result.error, console=cli.console)
    cli.console.success(f"{result.value.target_branch} is up to date")


def publish(
    prod: bool = typer.Option(False, "--prod", help="Production release: tag and merge."),
    build_cmd: str = typer.Option("", "--build-cmd", help="Build command (npm run build)."),
    ssh_user: str = typer.Option("", "--ssh-user", help="Upload: ssh user."),
    ssh_ip: str = typer.Option("", "--ssh-ip", help="Upload: ssh host."),
    ssh_path: str = typer.Option("", "--ssh-path", help="Upload: remote directory."),
    work_dir: Path | None = DIR_OPTION,
    config_path: Path | None = CONFIG_OPTION,
    refresh_server: bool = REFRESH_SERVER_OPTION,
    refresh_token: bool = REFRESH_TOKEN_OPTION,
    refresh_owner: bool = REFRESH_OWNER_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Commit, build and (with --prod) tag release/<version> and merge to stable."""
    cli = build_context(work_dir=work_dir, config_path=config_path, verbose=verbose)
    refresh = RefreshOptions(server=refresh_server, token=refresh_token, owner=refresh_owner)

    upload: UploadTarget | None = None
    ssh = (ssh_user.strip(), ssh_ip.strip(), ssh_path.strip())
    if all(ssh):
        upload = UploadTarget(user=ssh[0], host=ssh[1], path=ssh[2])
    elif any(ssh):
        cli.console.warning("upload skipped: --ssh-user, --ssh-ip and --ssh-path are all required")

    ctx, manifest, _ = start_run(
        cli,
        refresh=refresh,
        build_command=build_cmd,
        is_production=prod,
        upload=upload,
    )

    committed = commit_cycle(
        ctx,
        vcs=cli.vcs,
        config=cli.config.workflow,
        prompter=cli.prompter,
        console=cli.console,
    )
    if isinstance(committed, Err):
        exit_release(committed.error, console=cli.console)

    report = publish_pipeline(
        committed.value,
        manifest=manifest,
        vcs=cli.vcs,
        builder=cli.builder,
        store=cli.store,
        config=cli.config.workflow,
        prompter=cli.prompter,
        console=cli.console,
    )
    if isinstance(report, Err):
        exit_release(report.error, console=cli.console)

    if report.value.warnings:
        cli.console.warning(f"published with {len(report.value.warnings)} cleanup warning(s)")
