from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from relflow.cli.prompts import TyperPrompter
from relflow.core.config import Config, load_config, resolve_config_path
from relflow.core.errors import ErrorCode
from relflow.core.result import Err
from relflow.git.protocol import VersionControl
from relflow.git.repository import Repository
from relflow.hosting.http import HttpClient, RealHttpClient
from relflow.output.console import ConsoleProtocol, RichConsole
from relflow.release.build import Builder, CommandBuilder
from relflow.release.prompter import Prompter
from relflow.release.state import StateStore


@dataclass(frozen=True, slots=True)
class CLIContext:
    work_dir: Path
    config: Config
    console: ConsoleProtocol
    vcs: VersionControl
    http: HttpClient
    prompter: Prompter
    store: StateStore
    builder: Builder


def build_context(*, work_dir: Path | None, config_path: Path | None, verbose: bool) -> CLIContext:
    root = (work_dir or Path.cwd()).expanduser()
    if not root.is_dir():
        typer.echo(f"error: not a directory: {root}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))
    root = root.resolve()

    config = Config()
    path = resolve_config_path(config_path, os.environ)
    if path is not None:
        loaded = load_config(path)
        if isinstance(loaded, Err):
            typer.echo(f"error: {loaded.error.message}", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
        config = loaded.value

    console = RichConsole(verbose=verbose)
    return CLIContext(
        work_dir=root,
        config=config,
        console=console,
        vcs=Repository(root),
        http=RealHttpClient(),
        prompter=TyperPrompter(console),
        store=StateStore(config.state.home_path),
        builder=CommandBuilder(console=console),
    )
