"""Default build collaborator: run the build command, then optionally scp the output."""

from __future__ import annotations

import shlex
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from relflow.core.result import Err, Ok, Result
from relflow.output.console import ConsoleProtocol, Style
from relflow.platform.process import ProcessError, run_live
from relflow.release.errors import ReleaseError
from relflow.release.model import PublishContext, UploadTarget

type Runner = Callable[[list[str], Path], Result[None, ProcessError]]


class Builder(Protocol):
    def build(self, ctx: PublishContext) -> Result[bool, ReleaseError]:
        """Produce (and upload) the artifacts. Ok(False) means the build did not succeed."""
        ...


class CommandBuilder:
    def __init__(self, *, console: ConsoleProtocol, runner: Runner = run_live) -> None:
        self._console = console
        self._runner = runner

    def build(self, ctx: PublishContext) -> Result[bool, ReleaseError]:
        argv = shlex.split(ctx.build_command)
        self._console.info(f"Building {ctx.project_name}@{ctx.version}...")
        self._console.print(" ".join(argv), Style.DIM)

        built = self._runner(argv, ctx.work_dir)
        if isinstance(built, Err):
            return Err(
                ReleaseError(
                    kind="build_failed",
                    message=f"build command failed: {built.error}",
                    hint=ctx.build_command,
                )
            )
        self._console.success("build finished")

        if ctx.upload is not None:
            uploaded = self._upload(ctx, ctx.upload)
            if isinstance(uploaded, Err):
                return uploaded
        return Ok(True)

    def _upload(self, ctx: PublishContext, target: UploadTarget) -> Result[None, ReleaseError]:
        source = ctx.work_dir / target.source
        if not source.exists():
            return Err(
                ReleaseError(
                    kind="build_failed",
                    message=f"build output not found: {source}",
                    hint="check the build command output directory",
                )
            )

        argv = ["scp", "-r", str(source), target.destination]
        self._console.info(f"Uploading {target.source} to {target.destination}...")
        self._console.print(" ".join(argv), Style.DIM)
        uploaded = self._runner(argv, ctx.work_dir)
        if isinstance(uploaded, Err):
            return Err(
                ReleaseError(
                    kind="remote_failed",
                    message=f"upload failed: {uploaded.error}",
                    hint=target.destination,
                )
            )
        self._console.success("upload finished")
        return Ok(None)
